from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import insert, select

from cinematch.adapters.sqlalchemy import (
    SqlAlchemyImportStateRepository,
    SqlAlchemyLocalIdRepository,
    SqlAlchemyLookupMetricRepository,
    api_lookup_metric_table,
    import_state_table,
    movie_table,
    person_table,
)
from cinematch.domain.model import EntityKind, LookupMetric

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine

    from cinematch.adapters.sqlalchemy import SqlAlchemyCatalogUnitOfWork


def _seed(engine: Engine) -> None:
    with engine.begin() as connection:
        connection.execute(
            insert(movie_table),
            [
                {"tmdb_id": 603, "imdb_id": "tt0133093", "title": "The Matrix"},
                {"tmdb_id": 949, "imdb_id": "tt0113277", "title": "Heat"},
                {"tmdb_id": None, "imdb_id": "tt9999999", "title": "Unlinked"},
            ],
        )
        connection.execute(
            insert(person_table),
            [{"tmdb_id": 6384, "name": "Keanu Reeves"}, {"tmdb_id": None, "name": "Unknown"}],
        )


def test_local_id_repository_reads_linked_rows(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
    sqlite_engine: Engine,
) -> None:
    _seed(sqlite_engine)

    with sqlite_unit_of_work() as uow:
        movies = uow.repositories.movie_ids
        people = uow.repositories.local_ids(EntityKind.PERSON)

        assert isinstance(movies, SqlAlchemyLocalIdRepository)
        assert movies.load_ids() == {603, 949}
        assert movies.count_without_external_id() == 1
        assert people.load_ids() == {6384}
        assert people.count_without_external_id() == 1


def test_import_state_upserts(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
    sqlite_engine: Engine,
) -> None:
    with sqlite_unit_of_work() as uow:
        state = uow.repositories.import_state
        assert isinstance(state, SqlAlchemyImportStateRepository)
        assert state.get("total_movies") is None
        state.set("total_movies", "100")
        state.set("total_movies", "200")
        uow.commit()

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.import_state.get("total_movies") == "200"

    with sqlite_engine.connect() as connection:
        rows = connection.execute(select(import_state_table)).all()
    assert len(rows) == 1
    assert rows[0].updated_at.tzinfo is not None


def test_lookup_metric_repository_persists_rows(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
    sqlite_engine: Engine,
) -> None:
    recorded_at = datetime(2026, 5, 1, 12, 0, tzinfo=UTC)
    metric = LookupMetric(
        source="tmdb",
        operation="fallback_fuzzy_title",
        target="The Matrx",
        success=True,
        response_time_ms=42,
        fallback_level=5,
        confidence=0.6,
        metadata={"strategy_name": "fuzzy-title"},
        recorded_at=recorded_at,
    )

    with sqlite_unit_of_work() as uow:
        assert isinstance(uow.repositories.lookup_metrics, SqlAlchemyLookupMetricRepository)
        uow.repositories.lookup_metrics.add(metric)
        uow.commit()

    with sqlite_engine.connect() as connection:
        row = connection.execute(select(api_lookup_metric_table)).one()
    assert row.operation == "fallback_fuzzy_title"
    assert row.fallback_level == 5
    assert row.confidence == 0.6
    assert row.metadata == {"strategy_name": "fuzzy-title"}
    assert row.recorded_at == recorded_at


def test_rollback_discards_uncommitted_changes(
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    with pytest.raises(RuntimeError), sqlite_unit_of_work() as uow:
        uow.repositories.import_state.set("baseline_export_date", "2026-05-01")
        raise RuntimeError("boom")

    with sqlite_unit_of_work() as uow:
        assert uow.repositories.import_state.get("baseline_export_date") is None
