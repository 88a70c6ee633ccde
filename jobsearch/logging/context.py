"""Context propagation for structured logging.

Fields pushed here (run_id, keyword, source, ...) are injected into every log
record emitted inside the scope. Context lives in a ContextVar, so it follows
asyncio tasks automatically; worker threads receive it through
``run_with_context``.
"""

from contextvars import ContextVar, Token, copy_context
from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the logging context.

    Returns:
        Token to hand back to pop_log_context()
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the logging context captured by ``token``."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field (mostly for tests)."""
    LogContextVar.set({})


def run_with_context(func: Callable[..., T]) -> Callable[..., T]:
    """Bind ``func`` to a snapshot of the caller's context.

    Executor threads do not inherit context variables, so anything submitted
    to a thread pool is wrapped with this first. Each call runs in its own
    copy of the snapshot, so the wrapper may run on several threads at once.

    Example:
        >>> executor.submit(run_with_context(adapter.search), "devops", None)
    """
    ctx = copy_context()

    def _bound(*args, **kwargs) -> T:
        return ctx.copy().run(func, *args, **kwargs)

    return _bound


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(run_id="abc123", keyword="devops"):
        ...     logger.info("Collecting listings")
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
