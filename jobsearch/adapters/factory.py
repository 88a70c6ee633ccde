"""Factory functions for instantiating board adapters."""

from typing import Dict, List, Type

from jobsearch.config.models import AdvancedConfig, AppConfig
from jobsearch.logging import get_logger

from .actiris import ActirisAdapter
from .base import BaseSourceAdapter
from .editx import EditxAdapter
from .exceptions import AdapterConfigurationError
from .ictjob import ICTJobAdapter
from .jobat import JobatAdapter
from .optioncarriere import OptionCarriereAdapter
from .sitemap import SitemapSourceAdapter

logger = get_logger(__name__, component="adapter")

ADAPTER_REGISTRY: Dict[str, Type[BaseSourceAdapter]] = {
    "jobat": JobatAdapter,
    "actiris": ActirisAdapter,
    "optioncarriere": OptionCarriereAdapter,
    "ictjob": ICTJobAdapter,
    "editx": EditxAdapter,
}


def get_adapter(source_type: str, advanced_config: AdvancedConfig) -> BaseSourceAdapter:
    """Instantiate the adapter for one board.

    Args:
        source_type: Board identifier (jobat, actiris, optioncarriere, ictjob, editx)
        advanced_config: Timeout, user-agent and per-adapter limits

    Returns:
        Adapter instance for the board

    Raises:
        AdapterConfigurationError: If the board is unknown or settings are invalid

    Example:
        >>> adapter = get_adapter("ictjob", AdvancedConfig())
        >>> listings = adapter.search("devops", "Bruxelles")
    """
    key = str(source_type).strip().lower()
    adapter_class = ADAPTER_REGISTRY.get(key)

    if not adapter_class:
        supported_types = ", ".join(sorted(ADAPTER_REGISTRY))
        raise AdapterConfigurationError(
            f"Unknown source type: {source_type}. Supported types: {supported_types}"
        )

    kwargs = {
        "timeout": advanced_config.http_request_timeout,
        "user_agent": advanced_config.user_agent,
        "max_jobs": advanced_config.max_jobs_per_source,
    }
    if issubclass(adapter_class, SitemapSourceAdapter):
        kwargs["detail_workers"] = advanced_config.detail_fetch_workers

    logger.debug(
        "Creating adapter instance",
        extra={
            "event": "adapter.created",
            "source_type": key,
            "adapter_class": adapter_class.__name__,
        },
    )

    try:
        return adapter_class(**kwargs)
    except AdapterConfigurationError:
        raise
    except Exception as e:
        raise AdapterConfigurationError(f"Failed to create {key} adapter: {e}") from e


def build_adapters(app_config: AppConfig) -> List[BaseSourceAdapter]:
    """Adapters for every enabled source, in configuration order."""
    return [
        get_adapter(source.type, app_config.advanced)
        for source in app_config.get_enabled_sources()
    ]
