from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from cinematch.adapters.sqlalchemy import SqlAlchemyLookupTracker, api_lookup_metric_table
from cinematch.adapters.sqlalchemy.unit_of_work import SqlAlchemyCatalogUnitOfWork, shutdown

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine


def test_tracker_persists_successful_calls(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
    sqlite_engine: Engine,
) -> None:
    tracker = SqlAlchemyLookupTracker(sqlite_unit_of_work)

    result = tracker.track(
        "tmdb",
        "fallback_exact_title_year",
        "The Matrix",
        lambda: ["match"],
        fallback_level=2,
        confidence=0.9,
        metadata={"strategy_name": "exact-title-year"},
        is_success=bool,
    )

    assert result == ["match"]
    with sqlite_engine.connect() as connection:
        row = connection.execute(select(api_lookup_metric_table)).one()
    assert row.source == "tmdb"
    assert row.success is True
    assert row.fallback_level == 2
    assert row.error_type is None
    assert row.response_time_ms >= 0


def test_tracker_records_failures_and_reraises(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
    sqlite_engine: Engine,
) -> None:
    tracker = SqlAlchemyLookupTracker(sqlite_unit_of_work)

    def failing() -> list[str]:
        raise TimeoutError("provider timed out")

    with pytest.raises(TimeoutError):
        tracker.track("tmdb", "fallback_direct_id", "tt0133093", failing)

    with sqlite_engine.connect() as connection:
        row = connection.execute(select(api_lookup_metric_table)).one()
    assert row.success is False
    assert row.error_type == "TimeoutError"
    assert row.error_message == "provider timed out"


def test_metric_sink_failure_never_changes_result(caplog: pytest.LogCaptureFixture) -> None:
    shutdown()
    tracker = SqlAlchemyLookupTracker(SqlAlchemyCatalogUnitOfWork)

    with caplog.at_level(logging.WARNING):
        result = tracker.track("tmdb", "fallback_fuzzy_title", "Heat", lambda: 949)

    assert result == 949
    assert any("Failed to persist lookup metric" in r.getMessage() for r in caplog.records)
