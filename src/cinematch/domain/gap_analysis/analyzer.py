"""Catalog gap analysis: reconcile a provider ID export against local IDs.

Given the export universe ``E`` (after video/adult/popularity filtering) and the
locally stored provider IDs ``L``:

- ``missing = E - L`` drives import scheduling
- ``extra = L - E`` flags local rows the provider has deleted or merged
- ``coverage = |E & L| / |E| * 100`` (0.0 for an empty export)

Tier totals are computed over the whole export universe, not only the missing
entries, so per-tier coverage is meaningful.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from .recommendations import PROFILES, build_recommendations
from .tiers import TIER_ORDER, TierLabel, TierStat, build_tier_stats, tier_for

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from cinematch.domain.model import EntityKind, ExportEntry
    from cinematch.domain.ports.export import ExportRepository
    from cinematch.domain.ports.unit_of_work import CatalogUnitOfWork

    from .recommendations import KindProfile

log = getLogger(__name__)

type SortKey = Literal["popularity", "id"]


class ExportFileNotFoundError(FileNotFoundError):
    """Raised when a required export file is not present on disk."""


@dataclass(frozen=True, slots=True)
class GapAnalysisOptions:
    """Knobs shared by every gap analysis entry point.

    ``skip_download`` left as None lets each entry point pick its default: the
    full analysis downloads, the stats call prefers a cached file.
    """

    export_path: Path | None = None
    skip_download: bool | None = None
    min_popularity: float | None = None
    skip_video: bool = True
    skip_adult: bool = True
    limit: int | None = None
    sort_by: SortKey = "popularity"


@dataclass(slots=True)
class GapReport:
    entity_kind: EntityKind
    as_of_date: date
    export_source_path: Path
    export_total: int
    local_total: int
    missing_count: int
    extra_count: int
    coverage_percent: float
    tiers: dict[TierLabel, TierStat]
    recommendations: list[str]

    @property
    def overlap(self) -> int:
        return self.export_total - self.missing_count


@dataclass(slots=True)
class ExportStats:
    entity_kind: EntityKind
    export_total: int
    local_total: int
    overlap: int
    missing_count: int
    coverage_percent: float
    export_date: date
    export_path: Path


@dataclass(slots=True)
class LocalSummary:
    entity_kind: EntityKind
    with_external_id: int
    without_external_id: int

    @property
    def total(self) -> int:
        return self.with_external_id + self.without_external_id


def _utc_today() -> date:
    return datetime.now(UTC).date()


def coverage_percent(overlap: int, export_total: int) -> float:
    if export_total <= 0:
        return 0.0
    return overlap / export_total * 100


class GapAnalyzer:
    """Gap analysis for one entity kind (movies or people)."""

    def __init__(
        self,
        kind: EntityKind,
        *,
        exports: ExportRepository,
        unit_of_work_factory: Callable[[], CatalogUnitOfWork],
        profile: KindProfile | None = None,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self.kind = kind
        self._exports = exports
        self._uow_factory = unit_of_work_factory
        self.profile = profile or PROFILES[kind]
        self._today = today

    def analyze(self, options: GapAnalysisOptions | None = None) -> GapReport:
        """Build the full report: set differences, tier breakdown and recommendations."""

        opts = options or GapAnalysisOptions()
        log.info("Starting %s gap analysis", self.kind.value)

        export_path = self._ensure_export(opts)
        popularity_by_id = self._load_export_popularity(export_path, opts)
        export_ids = set(popularity_by_id)
        local_ids = self._load_local_ids()

        missing_ids = export_ids - local_ids
        extra_ids = local_ids - export_ids
        overlap = len(export_ids) - len(missing_ids)
        tiers = build_tier_stats(popularity_by_id, missing_ids)

        report = GapReport(
            entity_kind=self.kind,
            as_of_date=self._today(),
            export_source_path=export_path,
            export_total=len(export_ids),
            local_total=len(local_ids),
            missing_count=len(missing_ids),
            extra_count=len(extra_ids),
            coverage_percent=coverage_percent(overlap, len(export_ids)),
            tiers=tiers,
            recommendations=build_recommendations(tiers, self.profile),
        )
        log.info(
            "Gap analysis complete. Missing %s %s.", report.missing_count, self.kind.plural
        )
        return report

    def find_missing_ids(self, options: GapAnalysisOptions | None = None) -> list[ExportEntry]:
        """Stream the export and return entries not stored locally, sorted and limited."""

        opts = options or GapAnalysisOptions()
        export_path = self._ensure_export(opts)
        local_ids = self._load_local_ids()

        missing = [
            entry
            for entry in self._stream(export_path, opts)
            if entry.id not in local_ids
        ]
        if opts.sort_by == "id":
            missing.sort(key=lambda entry: entry.id)
        else:
            missing.sort(key=lambda entry: entry.popularity, reverse=True)
        if opts.limit is not None:
            missing = missing[: max(opts.limit, 0)]
        return missing

    def find_missing_by_tier(
        self,
        options: GapAnalysisOptions | None = None,
    ) -> dict[TierLabel, list[ExportEntry]]:
        grouped: dict[TierLabel, list[ExportEntry]] = {label: [] for label in TIER_ORDER}
        for entry in self.find_missing_ids(options):
            label = tier_for(entry.popularity)
            if label is not None:
                grouped[label].append(entry)
        return grouped

    def get_export_stats(self, options: GapAnalysisOptions | None = None) -> ExportStats:
        """Scalar totals only; prefers a cached export and downloads once if none exists."""

        opts = options or GapAnalysisOptions()
        if opts.skip_download is None:
            opts = replace(opts, skip_download=True)
        try:
            return self._compute_stats(opts)
        except ExportFileNotFoundError:
            if not opts.skip_download:
                raise
            log.info("No cached %s export found, downloading", self.kind.value)
            return self._compute_stats(replace(opts, skip_download=False))

    def update_baseline(self) -> ExportStats:
        """Force a fresh download and persist the export total for lightweight reads."""

        log.info("Updating %s baseline from daily export", self.kind.value)
        stats = self.get_export_stats(GapAnalysisOptions(skip_download=False))
        with self._uow_factory() as uow:
            state = uow.repositories.import_state
            state.set(self.profile.baseline_total_key, str(stats.export_total))
            state.set(self.profile.baseline_updated_key, datetime.now(UTC).isoformat())
            state.set(self.profile.baseline_export_date_key, stats.export_date.isoformat())
            uow.commit()
        log.info(
            "Baseline updated: %s total %s in export (%s)",
            stats.export_total,
            self.kind.plural,
            stats.export_date,
        )
        return stats

    def quick_summary(self) -> LocalSummary:
        with self._uow_factory() as uow:
            repository = uow.repositories.local_ids(self.kind)
            return LocalSummary(
                entity_kind=self.kind,
                with_external_id=len(repository.load_ids()),
                without_external_id=repository.count_without_external_id(),
            )

    def _compute_stats(self, opts: GapAnalysisOptions) -> ExportStats:
        export_path = self._ensure_export(opts)
        export_ids = {entry.id for entry in self._stream(export_path, opts)}
        local_ids = self._load_local_ids()
        overlap = len(export_ids & local_ids)
        return ExportStats(
            entity_kind=self.kind,
            export_total=len(export_ids),
            local_total=len(local_ids),
            overlap=overlap,
            missing_count=len(export_ids) - overlap,
            coverage_percent=round(coverage_percent(overlap, len(export_ids)), 2),
            export_date=self._exports.export_date(export_path) or self._today(),
            export_path=export_path,
        )

    def _ensure_export(self, opts: GapAnalysisOptions) -> Path:
        if opts.export_path is not None:
            if not opts.export_path.exists():
                raise ExportFileNotFoundError(f"Export file not found: {opts.export_path}")
            return opts.export_path

        if opts.skip_download:
            default_path = self._exports.default_path(self.kind, self._today())
            if not default_path.exists():
                raise ExportFileNotFoundError(f"No cached export at {default_path}")
            return default_path

        return self._exports.download(self.kind)

    def _stream(self, path: Path, opts: GapAnalysisOptions) -> Iterator[ExportEntry]:
        return self._exports.stream(
            path,
            self.kind,
            skip_video=opts.skip_video,
            skip_adult=opts.skip_adult,
            min_popularity=opts.min_popularity,
        )

    def _load_export_popularity(self, path: Path, opts: GapAnalysisOptions) -> dict[int, float]:
        log.info("Loading %s export entries from %s", self.kind.value, path)
        return {entry.id: entry.popularity for entry in self._stream(path, opts)}

    def _load_local_ids(self) -> set[int]:
        log.info("Loading local %s IDs", self.kind.value)
        with self._uow_factory() as uow:
            ids = uow.repositories.local_ids(self.kind).load_ids()
        log.info("Found %s %s with provider IDs locally", len(ids), self.kind.plural)
        return ids
