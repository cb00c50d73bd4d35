"""Structured logging for endpoint runs.

This module provides telemetry hooks for endpoint execution, emitting
structured log records whose payload lives in ``extra``. No handlers are
installed; applications route the ``remotekit`` loggers as they see fit.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


def log_request_started(*, endpoint_id: str, cache_key: str) -> None:
    """Log dispatch of a request to the transport.

    Args:
        endpoint_id: Endpoint identifier
        cache_key: String form of the built request
    """
    logger.debug(
        "request_started",
        extra={"endpoint_id": endpoint_id, "cache_key": cache_key},
    )


def log_cache_hit(*, endpoint_id: str, cache_key: str) -> None:
    """Log a run satisfied from the cache fast path.

    Args:
        endpoint_id: Endpoint identifier
        cache_key: String form of the built request
    """
    logger.debug(
        "cache_hit",
        extra={"endpoint_id": endpoint_id, "cache_key": cache_key},
    )


def log_request_completed(
    *,
    endpoint_id: str,
    latency_ms: float | None = None,
    from_cache: bool = False,
) -> None:
    """Log a successful run.

    Args:
        endpoint_id: Endpoint identifier
        latency_ms: Latency in milliseconds (optional)
        from_cache: Whether the output came from the cache
    """
    logger.info(
        "request_completed",
        extra={"endpoint_id": endpoint_id, "latency_ms": latency_ms, "from_cache": from_cache},
    )


def log_request_failed(*, endpoint_id: str, error: BaseException) -> None:
    """Log a failed run.

    Args:
        endpoint_id: Endpoint identifier
        error: The mapped error surfaced to the caller
    """
    underlying: Any = getattr(error, "underlying", None)
    logger.error(
        "request_failed",
        extra={
            "endpoint_id": endpoint_id,
            "error_type": type(underlying or error).__name__,
            "error_message": str(error),
        },
    )


def log_request_canceled(*, endpoint_id: str) -> None:
    """Log a canceled run. Cancellation is not a failure.

    Args:
        endpoint_id: Endpoint identifier
    """
    logger.debug("request_canceled", extra={"endpoint_id": endpoint_id})


def log_cache_write_failed(*, cache_key: str, error: BaseException) -> None:
    """Log a best-effort cache write that did not succeed.

    Args:
        cache_key: Key that could not be written
        error: The cache error
    """
    logger.warning(
        "cache_write_failed",
        extra={
            "cache_key": cache_key,
            "error_type": type(error).__name__,
            "error_message": str(error),
        },
    )
