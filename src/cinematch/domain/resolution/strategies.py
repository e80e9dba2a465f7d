"""Fixed catalog of resolution strategies, ordered by decreasing precision."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class StrategyKind(StrEnum):
    DIRECT_ID = "direct-id"
    EXACT_TITLE_YEAR = "exact-title-year"
    NORMALIZED_TITLE = "normalized-title"
    YEAR_TOLERANT = "year-tolerant"
    FUZZY_TITLE = "fuzzy-title"
    BROAD_KEYWORDS = "broad-keywords"


@dataclass(frozen=True, slots=True)
class ResolutionQuery:
    """The partial reference being resolved. Blank strings count as absent."""

    external_id: str | None = None
    title: str | None = None
    year: int | None = None

    @property
    def has_external_id(self) -> bool:
        return bool(self.external_id and self.external_id.strip())

    @property
    def has_title(self) -> bool:
        return bool(self.title and self.title.strip())

    @property
    def has_year(self) -> bool:
        return self.year is not None

    @property
    def target(self) -> str:
        if self.has_external_id and self.external_id is not None:
            return self.external_id.strip()
        return (self.title or "").strip()


@dataclass(frozen=True, slots=True)
class ResolutionStrategy:
    kind: StrategyKind
    level: int
    confidence: float
    needs_external_id: bool = False
    needs_title: bool = False
    needs_year: bool = False

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def operation(self) -> str:
        return f"fallback_{self.kind.value.replace('-', '_')}"

    def applies(self, query: ResolutionQuery) -> bool:
        if self.needs_external_id and not query.has_external_id:
            return False
        if self.needs_title and not query.has_title:
            return False
        return not (self.needs_year and not query.has_year)


STRATEGIES: tuple[ResolutionStrategy, ...] = (
    ResolutionStrategy(StrategyKind.DIRECT_ID, 1, 1.0, needs_external_id=True),
    ResolutionStrategy(StrategyKind.EXACT_TITLE_YEAR, 2, 0.9, needs_title=True, needs_year=True),
    ResolutionStrategy(StrategyKind.NORMALIZED_TITLE, 3, 0.8, needs_title=True),
    ResolutionStrategy(StrategyKind.YEAR_TOLERANT, 4, 0.7, needs_title=True, needs_year=True),
    ResolutionStrategy(StrategyKind.FUZZY_TITLE, 5, 0.6, needs_title=True),
    ResolutionStrategy(StrategyKind.BROAD_KEYWORDS, 6, 0.5, needs_title=True),
)


def plan_strategies(
    query: ResolutionQuery,
    *,
    max_fallback_level: int,
    strategies: tuple[ResolutionStrategy, ...] = STRATEGIES,
) -> tuple[ResolutionStrategy, ...]:
    """Return the applicable strategies in order, truncated to the cascade depth."""

    applicable = tuple(strategy for strategy in strategies if strategy.applies(query))
    return applicable[: max(max_fallback_level, 0)]
