"""Lookup trackers that time external calls and describe their outcome."""

from __future__ import annotations

import time
from logging import getLogger
from typing import TYPE_CHECKING, Any

from cinematch.domain.model import LookupMetric

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

log = getLogger(__name__)


def measure_call[T](
    source: str,
    operation: str,
    target: str,
    func: Callable[[], T],
    sink: Callable[[LookupMetric], None],
    *,
    fallback_level: int | None = None,
    confidence: float | None = None,
    metadata: Mapping[str, Any] | None = None,
    is_success: Callable[[T], bool] | None = None,
) -> T:
    """Run ``func``, hand one ``LookupMetric`` to ``sink`` and return or re-raise.

    Without ``is_success`` any value counts as a success.
    """

    started = time.monotonic()
    try:
        result = func()
    except Exception as exc:
        sink(
            LookupMetric(
                source=source,
                operation=operation,
                target=target,
                success=False,
                response_time_ms=_elapsed_ms(started),
                fallback_level=fallback_level,
                confidence=confidence,
                error_type=type(exc).__name__,
                error_message=str(exc),
                metadata=dict(metadata or {}),
            )
        )
        raise

    success = is_success(result) if is_success is not None else True
    sink(
        LookupMetric(
            source=source,
            operation=operation,
            target=target,
            success=success,
            response_time_ms=_elapsed_ms(started),
            fallback_level=fallback_level,
            confidence=confidence,
            metadata=dict(metadata or {}),
        )
    )
    return result


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class LoggingLookupTracker:
    """Tracker that reports each call to the log and stores nothing."""

    def track[T](
        self,
        source: str,
        operation: str,
        target: str,
        func: Callable[[], T],
        *,
        fallback_level: int | None = None,
        confidence: float | None = None,
        metadata: Mapping[str, Any] | None = None,
        is_success: Callable[[T], bool] | None = None,
    ) -> T:
        return measure_call(
            source,
            operation,
            target,
            func,
            _log_metric,
            fallback_level=fallback_level,
            confidence=confidence,
            metadata=metadata,
            is_success=is_success,
        )


def _log_metric(metric: LookupMetric) -> None:
    if metric.error_type is not None:
        log.warning(
            "%s %s for %r failed after %sms: %s: %s",
            metric.source,
            metric.operation,
            metric.target,
            metric.response_time_ms,
            metric.error_type,
            metric.error_message,
        )
        return
    log.debug(
        "%s %s for %r: success=%s in %sms",
        metric.source,
        metric.operation,
        metric.target,
        metric.success,
        metric.response_time_ms,
    )
