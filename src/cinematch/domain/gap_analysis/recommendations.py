"""Rule-based import recommendations derived from tier statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from cinematch.domain.model import EntityKind

from .tiers import PRIORITY_TIERS, TierLabel

if TYPE_CHECKING:
    from collections.abc import Mapping

    from .tiers import TierStat

IMPORT_THROUGHPUT_PER_DAY = 10_000


@dataclass(frozen=True, slots=True)
class KindProfile:
    """Wording and state keys that differ between movies and people."""

    kind: EntityKind
    report_title: str
    tier_names: Mapping[TierLabel, str]
    priority_templates: Mapping[TierLabel, str]
    notes: tuple[str, ...] = ()
    baseline_total_key: str = "total_movies"
    baseline_updated_key: str = "baseline_updated_at"
    baseline_export_date_key: str = "baseline_export_date"
    extra_label: str = "Extra (deleted?)"
    estimate_template: str = "Estimated time for priority imports: {days} days at 10K/day"


MOVIE_PROFILE = KindProfile(
    kind=EntityKind.MOVIE,
    report_title="TMDb GAP ANALYSIS REPORT",
    tier_names={
        TierLabel.BLOCKBUSTER: "Blockbusters (popularity 100+)",
        TierLabel.MAJOR: "Major Releases (popularity 50-100)",
        TierLabel.NOTABLE: "Notable Movies (popularity 10-50)",
        TierLabel.STANDARD: "Standard Movies (popularity 1-10)",
        TierLabel.OBSCURE: "Obscure (popularity <1)",
    },
    priority_templates={
        TierLabel.BLOCKBUSTER: "PRIORITY: Import {count} blockbuster movies (popularity 100+)",
        TierLabel.MAJOR: "Import {count} major releases (popularity 50-100)",
        TierLabel.NOTABLE: "Import {count} notable movies (popularity 10-50)",
    },
)

PERSON_PROFILE = KindProfile(
    kind=EntityKind.PERSON,
    report_title="TMDb PEOPLE GAP ANALYSIS REPORT",
    tier_names={
        TierLabel.BLOCKBUSTER: "Famous (popularity 100+)",
        TierLabel.MAJOR: "Well-Known (popularity 50-100)",
        TierLabel.NOTABLE: "Notable (popularity 10-50)",
        TierLabel.STANDARD: "Working (popularity 1-10)",
        TierLabel.OBSCURE: "Obscure (popularity <1)",
    },
    priority_templates={
        TierLabel.BLOCKBUSTER: "PRIORITY: Missing {count} famous people (popularity 100+)",
        TierLabel.MAJOR: "Missing {count} well-known people (popularity 50-100)",
        TierLabel.NOTABLE: "Missing {count} notable people (popularity 10-50)",
    },
    notes=("Note: People are imported with movies (via credits), not separately",),
    baseline_total_key="total_people",
    baseline_updated_key="people_baseline_updated_at",
    baseline_export_date_key="people_baseline_export_date",
    extra_label="Extra (deleted/merged?)",
)

PROFILES: dict[EntityKind, KindProfile] = {
    EntityKind.MOVIE: MOVIE_PROFILE,
    EntityKind.PERSON: PERSON_PROFILE,
}


def estimate_import_days(count: int, *, per_day: int = IMPORT_THROUGHPUT_PER_DAY) -> int:
    return math.ceil(count / per_day)


def build_recommendations(
    tiers: Mapping[TierLabel, TierStat],
    profile: KindProfile,
) -> list[str]:
    """Top tier first, then the import estimate, then any profile notes."""

    recommendations: list[str] = []
    priority_missing = 0
    for label in PRIORITY_TIERS:
        stat = tiers.get(label)
        missing = stat.missing if stat is not None else 0
        priority_missing += missing
        if missing > 0:
            recommendations.append(profile.priority_templates[label].format(count=missing))

    if priority_missing > 0:
        days = estimate_import_days(priority_missing)
        recommendations.append(profile.estimate_template.format(days=days))

    recommendations.extend(profile.notes)
    return recommendations
