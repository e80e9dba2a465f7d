from __future__ import annotations

import math
from typing import TYPE_CHECKING

import pytest

from cinematch.domain.gap_analysis import (
    PRIORITY_TIERS,
    SampleTier,
    TierLabel,
    TierStat,
    build_recommendations,
    build_tier_stats,
    count_entries,
    distribution_bucket,
    popularity_distribution,
    sample_by_popularity,
    tier_for,
)
from cinematch.domain.gap_analysis.recommendations import MOVIE_PROFILE, estimate_import_days
from cinematch.domain.model import ExportEntry

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.mark.parametrize(
    ("popularity", "expected"),
    [
        (100.0, TierLabel.BLOCKBUSTER),
        (5000.0, TierLabel.BLOCKBUSTER),
        (99.999, TierLabel.MAJOR),
        (50.0, TierLabel.MAJOR),
        (10.0, TierLabel.NOTABLE),
        (1.0, TierLabel.STANDARD),
        (0.999, TierLabel.OBSCURE),
        (0.0, TierLabel.OBSCURE),
        (-0.5, None),
        (None, None),
        (math.nan, None),
    ],
)
def test_tier_bands_are_right_open(popularity: float | None, expected: TierLabel | None) -> None:
    assert tier_for(popularity) is expected


def test_tier_stat_coverage() -> None:
    assert TierStat(total=0, missing=0).coverage_percent == 100.0
    stat = TierStat(total=4, missing=1)
    assert stat.have == 3
    assert stat.coverage_percent == 75.0


def test_tier_totals_partition_defined_popularity() -> None:
    popularity = {1: 150.0, 2: 75.0, 3: 20.0, 4: 2.0, 5: 0.1, 6: -3.0}

    stats = build_tier_stats(popularity, missing_ids={2, 5, 6})

    assert sum(stat.total for stat in stats.values()) == 5
    assert stats[TierLabel.MAJOR].missing == 1
    assert stats[TierLabel.OBSCURE].missing == 1
    assert stats[TierLabel.BLOCKBUSTER].missing == 0


def test_recommendations_follow_tier_order() -> None:
    tiers = {
        TierLabel.BLOCKBUSTER: TierStat(total=10, missing=3),
        TierLabel.MAJOR: TierStat(total=10, missing=0),
        TierLabel.NOTABLE: TierStat(total=30_000, missing=12_000),
        TierLabel.STANDARD: TierStat(total=10, missing=10),
        TierLabel.OBSCURE: TierStat(total=10, missing=10),
    }

    assert build_recommendations(tiers, MOVIE_PROFILE) == [
        "PRIORITY: Import 3 blockbuster movies (popularity 100+)",
        "Import 12000 notable movies (popularity 10-50)",
        "Estimated time for priority imports: 2 days at 10K/day",
    ]


def test_no_priority_gap_means_no_recommendations() -> None:
    tiers = {label: TierStat(total=5, missing=0) for label in PRIORITY_TIERS}
    tiers[TierLabel.OBSCURE] = TierStat(total=5, missing=5)

    assert build_recommendations(tiers, MOVIE_PROFILE) == []


def test_estimate_rounds_up() -> None:
    assert estimate_import_days(1) == 1
    assert estimate_import_days(10_000) == 1
    assert estimate_import_days(10_001) == 2


def test_count_entries_ignores_filters() -> None:
    entries = [
        ExportEntry(id=1, popularity=120.0),
        ExportEntry(id=2, popularity=3.0, is_video=True),
        ExportEntry(id=3, popularity=0.2, is_adult=True),
    ]

    counts = count_entries(entries)

    assert counts.total == 3
    assert counts.video == 1
    assert counts.non_video == 2
    assert counts.adult == 1
    assert counts.by_tier[TierLabel.BLOCKBUSTER] == 1
    assert counts.by_tier[TierLabel.STANDARD] == 1
    assert counts.by_tier[TierLabel.OBSCURE] == 1
    assert counts.by_tier[TierLabel.NOTABLE] == 0


@pytest.mark.parametrize(
    ("popularity", "expected"),
    [
        (250.0, "100+"),
        (50.0, "50-100"),
        (49.9, "20-50"),
        (10.0, "10-20"),
        (7.5, "5-10"),
        (1.0, "1-5"),
        (0.5, "0.5-1"),
        (0.49, "<0.5"),
        (-3.0, "<0.5"),
    ],
)
def test_distribution_bucket_bounds(popularity: float, expected: str) -> None:
    assert distribution_bucket(popularity) == expected


def test_popularity_distribution_lists_every_bucket_in_order() -> None:
    entries = [ExportEntry(id=i, popularity=p) for i, p in enumerate([150.0, 22.0, 23.0, 0.1])]

    distribution = popularity_distribution(entries)

    assert list(distribution) == [
        "100+",
        "50-100",
        "20-50",
        "10-20",
        "5-10",
        "1-5",
        "0.5-1",
        "<0.5",
    ]
    assert distribution["100+"] == 1
    assert distribution["20-50"] == 2
    assert distribution["<0.5"] == 1
    assert sum(distribution.values()) == len(entries)


def test_sample_by_popularity_keeps_first_entries_per_tier() -> None:
    popularity = [12.0, 0.3, 15.0, 4.0, 99.0, 1.0, 0.9]
    entries = [ExportEntry(id=i, popularity=p) for i, p in enumerate(popularity)]

    samples = sample_by_popularity(entries, per_tier=2)

    assert [entry.id for entry in samples[SampleTier.HIGH]] == [0, 2]
    assert [entry.id for entry in samples[SampleTier.MEDIUM]] == [3, 5]
    assert [entry.id for entry in samples[SampleTier.LOW]] == [1, 6]
    assert sample_by_popularity(entries, per_tier=0) == {tier: [] for tier in SampleTier}


def test_sample_by_popularity_stops_reading_once_full() -> None:
    consumed: list[int] = []

    def entries() -> Iterator[ExportEntry]:
        for i, p in enumerate([20.0, 5.0, 0.1, 30.0, 6.0]):
            consumed.append(i)
            yield ExportEntry(id=i, popularity=p)

    sample_by_popularity(entries(), per_tier=1)

    assert consumed == [0, 1, 2]
