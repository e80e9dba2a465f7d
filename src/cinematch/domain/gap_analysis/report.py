"""Console formatting for gap analysis results."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .recommendations import PROFILES
from .tiers import TIER_ORDER, SampleTier

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from cinematch.domain.model import ExportEntry

    from .analyzer import ExportStats, GapReport
    from .recommendations import KindProfile
    from .tiers import ExportCounts

_RULE = "=" * 60
_SAMPLE_HEADINGS = {
    SampleTier.HIGH: "High popularity (>= 10)",
    SampleTier.MEDIUM: "Medium popularity (1-10)",
    SampleTier.LOW: "Low popularity (< 1)",
}


def format_number(value: int) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return str(value)


def format_report(report: GapReport, *, profile: KindProfile | None = None) -> str:
    active = profile or PROFILES[report.entity_kind]
    lines = [
        "",
        _RULE,
        active.report_title,
        f"Date: {report.as_of_date.isoformat()}",
        _RULE,
        "",
        "OVERVIEW",
        f"  Export total:          {format_number(report.export_total)}",
        f"  Our database:          {format_number(report.local_total)}",
        f"  Missing:               {format_number(report.missing_count)}",
        f"  Coverage:              {round(report.coverage_percent, 2)}%",
    ]
    if report.extra_count > 0:
        lines.append(f"  {active.extra_label + ':':<23}{format_number(report.extra_count)}")

    lines += ["", "MISSING BY POPULARITY TIER"]
    for label in TIER_ORDER:
        stat = report.tiers.get(label)
        if stat is None:
            continue
        lines.append(f"  {active.tier_names[label]}")
        lines.append(
            f"    Missing: {format_number(stat.missing)} / {format_number(stat.total)} "
            f"({round(stat.coverage_percent, 1)}% coverage)"
        )

    lines += ["", "RECOMMENDATIONS"]
    lines += [f"  - {recommendation}" for recommendation in report.recommendations]
    lines += ["", _RULE]
    return "\n".join(lines)


def format_stats(stats: ExportStats) -> str:
    return "\n".join(
        [
            f"{stats.entity_kind.value} export {stats.export_date.isoformat()} ({stats.export_path})",
            f"  Export total:  {format_number(stats.export_total)}",
            f"  Local total:   {format_number(stats.local_total)}",
            f"  Overlap:       {format_number(stats.overlap)}",
            f"  Missing:       {format_number(stats.missing_count)}",
            f"  Coverage:      {stats.coverage_percent}%",
        ]
    )


def format_export_counts(
    counts: ExportCounts,
    *,
    profile: KindProfile,
    distribution: Mapping[str, int] | None = None,
    samples: Mapping[SampleTier, Sequence[ExportEntry]] | None = None,
) -> str:
    """Whole-file counts, optionally followed by the finer distribution and samples.

    The distribution and samples exclude video and adult entries.
    """

    lines = [
        "EXPORT FILE ANALYSIS",
        "=" * 50,
        f"Total entries:       {format_number(counts.total)}",
        f"Non-video:           {format_number(counts.non_video)}",
        f"Video extras:        {format_number(counts.video)}",
        f"Adult content:       {format_number(counts.adult)}",
        "",
        "POPULARITY DISTRIBUTION",
    ]
    lines += [
        f"  {profile.tier_names[label]}: {format_number(counts.by_tier[label])}"
        for label in TIER_ORDER
    ]
    if distribution:
        lines += ["", "DETAILED DISTRIBUTION (non-video, non-adult)"]
        lines += [
            f"  {label:<8}{format_number(count)}" for label, count in distribution.items()
        ]
    if samples and any(samples.values()):
        lines += ["", "SAMPLES"]
        for tier, entries in samples.items():
            lines.append(f"{_SAMPLE_HEADINGS[tier]}:")
            lines += [f"  {entry.popularity:.1f} - {entry.name or entry.id}" for entry in entries]
    return "\n".join(lines)
