"""Job board adapters.

This package provides adapters for Belgian job boards:
- Jobat: jobat.JobatAdapter
- ICTJob: ictjob.ICTJobAdapter
- OptionCarriere: optioncarriere.OptionCarriereAdapter
- Actiris: actiris.ActirisAdapter (sitemap driven)
- Editx: editx.EditxAdapter (sitemap driven)

Use the factory to instantiate adapters:
    from jobsearch.adapters import build_adapters, get_adapter
    adapters = build_adapters(app_config)
    listings = get_adapter("jobat", app_config.advanced).search("devops", "Gent")

Every adapter raises a SourceAdapterError subclass when its board cannot be
queried and returns an empty list when nothing matches.
"""

from .actiris import ActirisAdapter
from .base import BaseSourceAdapter
from .editx import EditxAdapter
from .exceptions import (
    AdapterConfigurationError,
    NetworkError,
    NoResultsFound,
    ParsingError,
    SourceAdapterError,
    SourceUnavailable,
)
from .factory import ADAPTER_REGISTRY, build_adapters, get_adapter
from .ictjob import ICTJobAdapter
from .jobat import JobatAdapter
from .optioncarriere import OptionCarriereAdapter
from .results_page import ResultPageSourceAdapter
from .sitemap import SitemapEntry, SitemapSourceAdapter, parse_sitemap

__all__ = [
    # Base classes and factory
    "BaseSourceAdapter",
    "ResultPageSourceAdapter",
    "SitemapSourceAdapter",
    "SitemapEntry",
    "parse_sitemap",
    "ADAPTER_REGISTRY",
    "get_adapter",
    "build_adapters",
    # Adapters
    "JobatAdapter",
    "ICTJobAdapter",
    "OptionCarriereAdapter",
    "ActirisAdapter",
    "EditxAdapter",
    # Exceptions
    "SourceAdapterError",
    "NetworkError",
    "ParsingError",
    "NoResultsFound",
    "SourceUnavailable",
    "AdapterConfigurationError",
]
