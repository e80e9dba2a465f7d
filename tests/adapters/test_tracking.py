from __future__ import annotations

import logging

import pytest

from cinematch.adapters.tracking import LoggingLookupTracker, measure_call
from cinematch.domain.model import LookupMetric
from cinematch.domain.ports.lookup import LookupTracker


def test_measure_call_hands_metric_to_sink() -> None:
    metrics: list[LookupMetric] = []

    result = measure_call(
        "tmdb",
        "fallback_normalized_title",
        "Amélie",
        lambda: [],
        metrics.append,
        fallback_level=3,
        confidence=0.8,
        metadata={"strategy_name": "normalized-title"},
        is_success=bool,
    )

    assert result == []
    assert len(metrics) == 1
    metric = metrics[0]
    assert metric.success is False
    assert metric.error_type is None
    assert metric.fallback_level == 3
    assert metric.metadata == {"strategy_name": "normalized-title"}
    assert metric.recorded_at.tzinfo is not None


def test_measure_call_reraises_after_recording() -> None:
    metrics: list[LookupMetric] = []

    def failing() -> int:
        raise ValueError("bad payload")

    with pytest.raises(ValueError, match="bad payload"):
        measure_call("tmdb", "fallback_direct_id", "tt1", failing, metrics.append)

    assert metrics[0].success is False
    assert metrics[0].error_type == "ValueError"
    assert metrics[0].error_message == "bad payload"


def test_logging_tracker_logs_failures(caplog: pytest.LogCaptureFixture) -> None:
    tracker = LoggingLookupTracker()

    def failing() -> int:
        raise ConnectionError("reset")

    assert isinstance(tracker, LookupTracker)
    assert tracker.track("tmdb", "fallback_fuzzy_title", "Heat", lambda: 7) == 7
    with caplog.at_level(logging.WARNING), pytest.raises(ConnectionError):
        tracker.track("tmdb", "fallback_fuzzy_title", "Heat", failing)

    assert any("ConnectionError" in record.getMessage() for record in caplog.records)
