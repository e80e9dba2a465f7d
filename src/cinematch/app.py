"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from cinematch.adapters.sqlalchemy import (
    SqlAlchemyCatalogUnitOfWork,
    SqlAlchemyLookupTracker,
    is_started,
    startup,
)
from cinematch.adapters.tmdb import TmdbClient, TmdbDailyExport, TmdbMovieLookup
from cinematch.config import get_export_config, get_resolver_config, get_tmdb_config
from cinematch.domain.gap_analysis import ExportAnalysis, GapAnalysisOptions, GapAnalyzer
from cinematch.domain.model import EntityKind
from cinematch.domain.ports.unit_of_work import CatalogUnitOfWork
from cinematch.domain.resolution import Resolver

if TYPE_CHECKING:
    from datetime import date
    from pathlib import Path

    from cinematch.config import ResolverConfig
    from cinematch.domain.gap_analysis import (
        ExportStats,
        GapReport,
        LocalSummary,
        TierLabel,
    )
    from cinematch.domain.model import ExportEntry
    from cinematch.domain.ports.export import ExportRepository
    from cinematch.domain.ports.lookup import LookupTracker, MovieLookupClient
    from cinematch.domain.resolution import Resolution

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]

log = getLogger(__name__)


def _ensure_started() -> None:
    if not is_started():
        startup()


def build_resolver(
    *,
    client: MovieLookupClient | None = None,
    tracker: LookupTracker | None = None,
    config: ResolverConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Resolver:
    """Resolver wired to TMDb with metrics persisted through the unit of work."""

    if tracker is None:
        _ensure_started()
        tracker = SqlAlchemyLookupTracker(unit_of_work_factory or SqlAlchemyCatalogUnitOfWork)
    return Resolver(
        client or TmdbMovieLookup(TmdbClient(config=get_tmdb_config())),
        tracker=tracker,
        config=config or get_resolver_config(),
    )


def resolve_movie(
    *,
    external_id: str | None = None,
    title: str | None = None,
    year: int | None = None,
    resolver: Resolver | None = None,
) -> Resolution:
    effective = resolver or build_resolver()
    log.info("Resolving movie: external_id=%s, title=%r, year=%s", external_id, title, year)
    return effective.resolve(external_id=external_id, title=title, year=year)


def build_gap_analyzer(
    kind: EntityKind = EntityKind.MOVIE,
    *,
    exports: ExportRepository | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> GapAnalyzer:
    if unit_of_work_factory is None:
        _ensure_started()
    return GapAnalyzer(
        kind,
        exports=exports or TmdbDailyExport(get_export_config()),
        unit_of_work_factory=unit_of_work_factory or SqlAlchemyCatalogUnitOfWork,
    )


def analyze_catalog_gap(
    kind: EntityKind = EntityKind.MOVIE,
    options: GapAnalysisOptions | None = None,
    *,
    analyzer: GapAnalyzer | None = None,
) -> GapReport:
    return (analyzer or build_gap_analyzer(kind)).analyze(options)


def find_missing(
    kind: EntityKind = EntityKind.MOVIE,
    options: GapAnalysisOptions | None = None,
    *,
    analyzer: GapAnalyzer | None = None,
) -> list[ExportEntry]:
    return (analyzer or build_gap_analyzer(kind)).find_missing_ids(options)


def find_missing_by_tier(
    kind: EntityKind = EntityKind.MOVIE,
    options: GapAnalysisOptions | None = None,
    *,
    analyzer: GapAnalyzer | None = None,
) -> dict[TierLabel, list[ExportEntry]]:
    return (analyzer or build_gap_analyzer(kind)).find_missing_by_tier(options)


def get_export_stats(
    kind: EntityKind = EntityKind.MOVIE,
    options: GapAnalysisOptions | None = None,
    *,
    analyzer: GapAnalyzer | None = None,
) -> ExportStats:
    return (analyzer or build_gap_analyzer(kind)).get_export_stats(options)


def update_baseline(
    kind: EntityKind = EntityKind.MOVIE,
    *,
    analyzer: GapAnalyzer | None = None,
) -> ExportStats:
    return (analyzer or build_gap_analyzer(kind)).update_baseline()


def local_summary(
    kind: EntityKind = EntityKind.MOVIE,
    *,
    analyzer: GapAnalyzer | None = None,
) -> LocalSummary:
    return (analyzer or build_gap_analyzer(kind)).quick_summary()


def download_export(
    kind: EntityKind = EntityKind.MOVIE,
    *,
    day: date | None = None,
    exports: TmdbDailyExport | None = None,
) -> Path:
    effective = exports or TmdbDailyExport(get_export_config())
    path = effective.download(kind, day=day)
    log.info("Export for %s ready at %s", kind.plural, path)
    return path


def describe_export(
    kind: EntityKind = EntityKind.MOVIE,
    *,
    export_path: Path | None = None,
    exports: TmdbDailyExport | None = None,
    samples_per_tier: int = 0,
) -> ExportAnalysis:
    """Count and bucket an export file, downloading today's file when no path is given.

    ``samples_per_tier`` above zero also collects that many sample entries per
    high, medium and low popularity tier.
    """

    effective = exports or TmdbDailyExport(get_export_config())
    path = export_path or effective.download(kind)
    analysis = ExportAnalysis(
        counts=effective.count_entries(path, kind),
        distribution=effective.popularity_distribution(path, kind),
    )
    if samples_per_tier > 0:
        analysis.samples = effective.sample_by_popularity(path, kind, per_tier=samples_per_tier)
    return analysis
