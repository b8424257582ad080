from __future__ import annotations

from time import perf_counter
from typing import Awaitable, Callable, TypeVar

import structlog

from bbbank_api.observability.metrics import get_metrics


T = TypeVar("T")


async def instrument_service_call(*, operation: str, fn: Callable[[], Awaitable[T]]) -> T:
    """Await a collaborator call, update metrics, and emit a debug log event.

    Exceptions are recorded and re-raised untouched; mapping them to a response
    is left to the caller.
    """

    logger = structlog.get_logger("service")
    start = perf_counter()
    try:
        result = await fn()
    except Exception as exc:
        elapsed_ms = (perf_counter() - start) * 1000.0
        get_metrics().observe_service_call(elapsed_ms=elapsed_ms, failed=True)
        logger.debug(
            "service_call_failed",
            operation=operation,
            error_type=type(exc).__name__,
            elapsed_ms=round(elapsed_ms, 2),
        )
        raise

    elapsed_ms = (perf_counter() - start) * 1000.0
    get_metrics().observe_service_call(elapsed_ms=elapsed_ms)
    logger.debug("service_call", operation=operation, elapsed_ms=round(elapsed_ms, 2))
    return result
