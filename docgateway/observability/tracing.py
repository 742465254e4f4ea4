"""
Observability — logging setup and the @traced decorator

Logging:
  Plain Python logging, one module logger per file, pipe-delimited
  "Component | key=value" messages. configure_logging() is called once at
  application startup.

  httpx logs every request line at INFO, including query strings. Gemini,
  Translation and Natural Language take the API key as a query parameter,
  so the httpx logger is capped at WARNING.

Decorator `@traced(name)`:
  Instruments any async function with timing and error recording.
"""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, Coroutine, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Coroutine[Any, Any, Any]])

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO", debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# @traced decorator
# ---------------------------------------------------------------------------

def traced(name: str | None = None) -> Callable[[F], F]:
    """
    Decorator that instruments an async function with timing and error logging.

    Usage::

        @traced("perform_task")
        async def perform_task(...) -> TaskResult:
            ...

        @traced()   # uses function name as span name
        async def check_providers(...) -> list[ProviderCheck]:
            ...
    """
    def decorator(func: F) -> F:
        span_name = name or func.__qualname__

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            t0 = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
                elapsed_ms = (time.perf_counter() - t0) * 1000
                logger.debug("trace | span=%s elapsed_ms=%.1f ok", span_name, elapsed_ms)
                return result
            except Exception as exc:
                elapsed_ms = (time.perf_counter() - t0) * 1000
                logger.error(
                    "trace | span=%s elapsed_ms=%.1f error=%s",
                    span_name, elapsed_ms, exc, exc_info=True,
                )
                raise

        return wrapper  # type: ignore[return-value]
    return decorator
