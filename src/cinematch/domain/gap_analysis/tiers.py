"""Fixed popularity tiers used to bucket export entries."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from cinematch.domain.model import ExportEntry


class TierLabel(StrEnum):
    BLOCKBUSTER = "100+"
    MAJOR = "50-100"
    NOTABLE = "10-50"
    STANDARD = "1-10"
    OBSCURE = "<1"


# right-open [lower, upper) bands; None means unbounded
TIER_BOUNDS: dict[TierLabel, tuple[float, float | None]] = {
    TierLabel.BLOCKBUSTER: (100.0, None),
    TierLabel.MAJOR: (50.0, 100.0),
    TierLabel.NOTABLE: (10.0, 50.0),
    TierLabel.STANDARD: (1.0, 10.0),
    TierLabel.OBSCURE: (0.0, 1.0),
}
TIER_ORDER: tuple[TierLabel, ...] = tuple(TierLabel)
PRIORITY_TIERS: tuple[TierLabel, ...] = TIER_ORDER[:3]


def tier_for(popularity: float | None) -> TierLabel | None:
    """Return the tier containing ``popularity``, or None when it is undefined or negative."""

    if popularity is None or math.isnan(popularity):
        return None
    for label in TIER_ORDER:
        lower, upper = TIER_BOUNDS[label]
        if popularity >= lower and (upper is None or popularity < upper):
            return label
    return None


@dataclass(frozen=True, slots=True)
class TierStat:
    total: int
    missing: int

    @property
    def have(self) -> int:
        return self.total - self.missing

    @property
    def coverage_percent(self) -> float:
        if self.total == 0:
            return 100.0
        return self.have / self.total * 100


def build_tier_stats(
    popularity_by_id: Mapping[int, float],
    missing_ids: set[int],
) -> dict[TierLabel, TierStat]:
    """Aggregate every export entry into its tier, counting the missing ones."""

    totals = dict.fromkeys(TIER_ORDER, 0)
    missing = dict.fromkeys(TIER_ORDER, 0)
    for entity_id, popularity in popularity_by_id.items():
        label = tier_for(popularity)
        if label is None:
            continue
        totals[label] += 1
        if entity_id in missing_ids:
            missing[label] += 1
    return {label: TierStat(total=totals[label], missing=missing[label]) for label in TIER_ORDER}


@dataclass(slots=True)
class ExportCounts:
    """Whole-file breakdown of an export, before any filtering."""

    total: int = 0
    video: int = 0
    adult: int = 0
    by_tier: dict[TierLabel, int] = field(default_factory=lambda: dict.fromkeys(TIER_ORDER, 0))

    @property
    def non_video(self) -> int:
        return self.total - self.video


def count_entries(entries: Iterable[ExportEntry]) -> ExportCounts:
    counts = ExportCounts()
    for entry in entries:
        counts.total += 1
        if entry.is_video:
            counts.video += 1
        if entry.is_adult:
            counts.adult += 1
        label = tier_for(entry.popularity)
        if label is not None:
            counts.by_tier[label] += 1
    return counts


# finer bands for export inspection, highest first; each is [lower, next higher)
DISTRIBUTION_BUCKETS: tuple[tuple[str, float], ...] = (
    ("100+", 100.0),
    ("50-100", 50.0),
    ("20-50", 20.0),
    ("10-20", 10.0),
    ("5-10", 5.0),
    ("1-5", 1.0),
    ("0.5-1", 0.5),
    ("<0.5", -math.inf),
)


def distribution_bucket(popularity: float) -> str:
    for label, lower in DISTRIBUTION_BUCKETS:
        if popularity >= lower:
            return label
    return DISTRIBUTION_BUCKETS[-1][0]


def popularity_distribution(entries: Iterable[ExportEntry]) -> dict[str, int]:
    """Count entries per distribution bucket; every bucket is present, highest first."""

    distribution = {label: 0 for label, _ in DISTRIBUTION_BUCKETS}
    for entry in entries:
        distribution[distribution_bucket(entry.popularity)] += 1
    return distribution


class SampleTier(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def sample_tier(popularity: float) -> SampleTier:
    if popularity >= 10:
        return SampleTier.HIGH
    if popularity >= 1:
        return SampleTier.MEDIUM
    return SampleTier.LOW


def sample_by_popularity(
    entries: Iterable[ExportEntry],
    *,
    per_tier: int = 5,
) -> dict[SampleTier, list[ExportEntry]]:
    """Keep the first ``per_tier`` entries seen in each of the high, medium and low tiers."""

    samples: dict[SampleTier, list[ExportEntry]] = {tier: [] for tier in SampleTier}
    if per_tier <= 0:
        return samples
    for entry in entries:
        bucket = samples[sample_tier(entry.popularity)]
        if len(bucket) < per_tier:
            bucket.append(entry)
        if all(len(bucket) >= per_tier for bucket in samples.values()):
            break
    return samples


@dataclass(slots=True)
class ExportAnalysis:
    """Everything ``export analyze`` reports about one file."""

    counts: ExportCounts
    distribution: dict[str, int]
    samples: dict[SampleTier, list[ExportEntry]] = field(
        default_factory=lambda: {tier: [] for tier in SampleTier}
    )
