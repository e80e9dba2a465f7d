from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import insert, select

from cinematch import app
from cinematch.adapters.sqlalchemy import api_lookup_metric_table, movie_table
from cinematch.adapters.tmdb import TmdbDailyExport
from cinematch.config.http_resilience import ResilienceConfig
from cinematch.config.tmdb import ExportConfig, ResolverConfig
from cinematch.domain.gap_analysis import GapAnalysisOptions, SampleTier, TierLabel
from cinematch.domain.model import EntityKind
from cinematch.domain.resolution import ResolutionResult
from tests.helpers.catalog import FakeLookupClient, make_movie

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from cinematch.adapters.sqlalchemy import SqlAlchemyCatalogUnitOfWork

EXPORT = "\n".join(
    [
        '{"adult":false,"id":1,"original_title":"Blockbuster","popularity":120.0,"video":false}',
        '{"adult":false,"id":2,"original_title":"Sequel","popularity":60.0,"video":false}',
        '{"adult":false,"id":3,"original_title":"Indie","popularity":5.0,"video":false}',
        '{"adult":false,"id":4,"original_title":"Short","popularity":0.5,"video":false}',
    ]
)


def test_gap_analysis_against_sqlite_catalog(
    tmp_path: Path,
    sqlite_engine: Engine,
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    export_path = tmp_path / "movie_ids_05_01_2026.json"
    export_path.write_text(EXPORT, encoding="utf-8")
    with sqlite_engine.begin() as connection:
        connection.execute(
            insert(movie_table),
            [{"tmdb_id": 1, "title": "Blockbuster"}, {"tmdb_id": 3, "title": "Indie"}],
        )
    exports = TmdbDailyExport(
        ExportConfig(dest_dir=tmp_path, resilience=ResilienceConfig(name="unused", cache=None))
    )
    analyzer = app.build_gap_analyzer(
        EntityKind.MOVIE,
        exports=exports,
        unit_of_work_factory=sqlite_unit_of_work,
    )
    options = GapAnalysisOptions(export_path=export_path)

    report = app.analyze_catalog_gap(options=options, analyzer=analyzer)
    missing = app.find_missing(options=options, analyzer=analyzer)
    stats = app.get_export_stats(options=options, analyzer=analyzer)

    assert report.coverage_percent == 50.0
    assert report.tiers[TierLabel.MAJOR].missing == 1
    assert [entry.id for entry in missing] == [2, 4]
    assert stats.export_date.isoformat() == "2026-05-01"
    assert app.local_summary(analyzer=analyzer).with_external_id == 2


def test_resolve_movie_persists_lookup_metrics(
    sqlite_engine: Engine,
    sqlite_unit_of_work: Callable[[], SqlAlchemyCatalogUnitOfWork],
) -> None:
    client = FakeLookupClient(
        searches={("The Matrix", 1999): [make_movie(603, "The Matrix", "1999-03-30")]}
    )
    resolver = app.build_resolver(
        client=client,
        config=ResolverConfig(),
        unit_of_work_factory=sqlite_unit_of_work,
    )

    result = app.resolve_movie(title="The Matrix", year=1999, resolver=resolver)

    assert isinstance(result, ResolutionResult)
    with sqlite_engine.connect() as connection:
        rows = connection.execute(select(api_lookup_metric_table)).all()
    assert [row.operation for row in rows] == ["fallback_exact_title_year"]
    assert rows[0].success is True


def test_describe_export_counts_buckets_and_samples(tmp_path: Path) -> None:
    export_path = tmp_path / "movie_ids_05_01_2026.json"
    export_path.write_text(EXPORT, encoding="utf-8")
    exports = TmdbDailyExport(
        ExportConfig(dest_dir=tmp_path, resilience=ResilienceConfig(name="unused", cache=None))
    )

    analysis = app.describe_export(
        EntityKind.MOVIE, export_path=export_path, exports=exports, samples_per_tier=1
    )

    assert analysis.counts.total == 4
    assert analysis.distribution["100+"] == 1
    assert analysis.distribution["50-100"] == 1
    assert analysis.distribution["5-10"] == 1
    assert analysis.distribution["0.5-1"] == 1
    assert [entry.id for entry in analysis.samples[SampleTier.HIGH]] == [1]
    assert [entry.id for entry in analysis.samples[SampleTier.MEDIUM]] == [3]
    assert [entry.id for entry in analysis.samples[SampleTier.LOW]] == [4]
