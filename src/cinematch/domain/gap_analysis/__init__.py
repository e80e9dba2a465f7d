"""Catalog gap analysis."""

from __future__ import annotations

from .analyzer import (
    ExportFileNotFoundError,
    ExportStats,
    GapAnalysisOptions,
    GapAnalyzer,
    GapReport,
    LocalSummary,
    coverage_percent,
)
from .recommendations import (
    IMPORT_THROUGHPUT_PER_DAY,
    MOVIE_PROFILE,
    PERSON_PROFILE,
    PROFILES,
    KindProfile,
    build_recommendations,
)
from .report import format_export_counts, format_number, format_report, format_stats
from .tiers import (
    DISTRIBUTION_BUCKETS,
    PRIORITY_TIERS,
    TIER_BOUNDS,
    TIER_ORDER,
    ExportAnalysis,
    ExportCounts,
    SampleTier,
    TierLabel,
    TierStat,
    build_tier_stats,
    count_entries,
    distribution_bucket,
    popularity_distribution,
    sample_by_popularity,
    sample_tier,
    tier_for,
)

__all__ = [
    "DISTRIBUTION_BUCKETS",
    "IMPORT_THROUGHPUT_PER_DAY",
    "MOVIE_PROFILE",
    "PERSON_PROFILE",
    "PRIORITY_TIERS",
    "PROFILES",
    "TIER_BOUNDS",
    "TIER_ORDER",
    "ExportAnalysis",
    "ExportCounts",
    "ExportFileNotFoundError",
    "ExportStats",
    "GapAnalysisOptions",
    "GapAnalyzer",
    "GapReport",
    "KindProfile",
    "LocalSummary",
    "SampleTier",
    "TierLabel",
    "TierStat",
    "build_recommendations",
    "build_tier_stats",
    "count_entries",
    "coverage_percent",
    "distribution_bucket",
    "format_export_counts",
    "format_number",
    "format_report",
    "format_stats",
    "popularity_distribution",
    "sample_by_popularity",
    "sample_tier",
    "tier_for",
]
