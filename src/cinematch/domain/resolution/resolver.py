"""Progressive entity resolution against the provider catalog.

The resolver walks a fixed cascade of strategies, each cheaper and less precise
than the one before, and stops at the first strategy that produces a candidate
whose fixed confidence reaches the configured floor.

Key rules:
- the returned confidence is the winning strategy's fixed weight; the fuzzy
  similarity score only gates acceptance and is never reported
- a candidate below the floor is discarded even when it was a real match
- lookup errors end that strategy only; nothing is retried inside the cascade
- callers see either a ``ResolutionResult`` or a ``ResolutionNotFound`` whose
  ``transient_failure`` flag tells an exhausted catalog apart from an
  unavailable provider
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from cinematch.config.tmdb import ResolverConfig

from .similarity import extract_keywords, normalize_title, similarity
from .strategies import (
    STRATEGIES,
    ResolutionQuery,
    ResolutionStrategy,
    StrategyKind,
    plan_strategies,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from typing import Any

    from cinematch.domain.model import CatalogMovie
    from cinematch.domain.ports.lookup import LookupTracker, MovieLookupClient

log = getLogger(__name__)

DEFAULT_SOURCE = "tmdb"


class OutcomeStatus(StrEnum):
    MATCHED = "matched"
    NO_CANDIDATE = "no_candidate"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True, slots=True)
class StrategyOutcome:
    status: OutcomeStatus
    movie: CatalogMovie | None = None
    error: Exception | None = None

    @property
    def matched(self) -> bool:
        return self.status is OutcomeStatus.MATCHED

    @classmethod
    def match(cls, movie: CatalogMovie) -> StrategyOutcome:
        return cls(OutcomeStatus.MATCHED, movie=movie)

    @classmethod
    def no_candidate(cls) -> StrategyOutcome:
        return cls(OutcomeStatus.NO_CANDIDATE)

    @classmethod
    def transient(cls, error: Exception) -> StrategyOutcome:
        return cls(OutcomeStatus.TRANSIENT_ERROR, error=error)


@dataclass(frozen=True, slots=True)
class StrategyAttempt:
    strategy: ResolutionStrategy
    outcome: StrategyOutcome
    accepted: bool


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    movie: CatalogMovie
    confidence: float
    strategy_level: int
    strategy_name: str


@dataclass(frozen=True, slots=True)
class ResolutionNotFound:
    attempts: tuple[StrategyAttempt, ...] = ()

    @property
    def transient_failure(self) -> bool:
        return any(
            attempt.outcome.status is OutcomeStatus.TRANSIENT_ERROR for attempt in self.attempts
        )


type Resolution = ResolutionResult | ResolutionNotFound


class _PassThroughTracker:
    def track[T](
        self,
        source: str,
        operation: str,
        target: str,
        func: Callable[[], T],
        *,
        fallback_level: int | None = None,
        confidence: float | None = None,
        metadata: Mapping[str, Any] | None = None,
        is_success: Callable[[T], bool] | None = None,
    ) -> T:
        del source, operation, target, fallback_level, confidence, metadata, is_success
        return func()


def _is_matched(outcome: StrategyOutcome) -> bool:
    return outcome.matched


class Resolver:
    """Resolve a partial movie reference to a provider record."""

    def __init__(
        self,
        client: MovieLookupClient,
        *,
        tracker: LookupTracker | None = None,
        config: ResolverConfig | None = None,
        source: str = DEFAULT_SOURCE,
        strategies: tuple[ResolutionStrategy, ...] = STRATEGIES,
    ) -> None:
        self._client = client
        self._tracker: LookupTracker = tracker or _PassThroughTracker()
        self._config = config or ResolverConfig()
        self._source = source
        self._strategies = strategies

    @property
    def config(self) -> ResolverConfig:
        return self._config

    def plan(self, query: ResolutionQuery) -> tuple[ResolutionStrategy, ...]:
        return plan_strategies(
            query,
            max_fallback_level=self._config.max_fallback_level,
            strategies=self._strategies,
        )

    def resolve(
        self,
        external_id: str | None = None,
        title: str | None = None,
        year: int | None = None,
    ) -> Resolution:
        query = ResolutionQuery(external_id=external_id, title=title, year=year)
        attempts: list[StrategyAttempt] = []

        for strategy in self.plan(query):
            outcome = self._attempt(strategy, query)
            accepted = outcome.matched and strategy.confidence >= self._config.min_confidence
            attempts.append(StrategyAttempt(strategy=strategy, outcome=outcome, accepted=accepted))
            if accepted and outcome.movie is not None:
                log.info(
                    "Resolved %r via %s (level=%s, confidence=%s) -> %s",
                    query.target,
                    strategy.name,
                    strategy.level,
                    strategy.confidence,
                    outcome.movie.id,
                )
                return ResolutionResult(
                    movie=outcome.movie,
                    confidence=strategy.confidence,
                    strategy_level=strategy.level,
                    strategy_name=strategy.name,
                )

        log.info(
            "No match for %r after %s strategies (transient errors: %s)",
            query.target,
            len(attempts),
            any(a.outcome.status is OutcomeStatus.TRANSIENT_ERROR for a in attempts),
        )
        return ResolutionNotFound(attempts=tuple(attempts))

    def _attempt(self, strategy: ResolutionStrategy, query: ResolutionQuery) -> StrategyOutcome:
        log.debug("Executing strategy %s (level %s)", strategy.name, strategy.level)
        try:
            return self._tracker.track(
                self._source,
                strategy.operation,
                query.target,
                partial(self._execute, strategy, query),
                fallback_level=strategy.level,
                confidence=strategy.confidence,
                metadata={"strategy_name": strategy.name},
                is_success=_is_matched,
            )
        except Exception as exc:  # noqa: BLE001
            log.warning("Strategy %s failed for %r: %s", strategy.name, query.target, exc)
            return StrategyOutcome.transient(exc)

    def _execute(self, strategy: ResolutionStrategy, query: ResolutionQuery) -> StrategyOutcome:
        title = (query.title or "").strip()
        match strategy.kind:
            case StrategyKind.DIRECT_ID:
                return self._direct_id((query.external_id or "").strip())
            case StrategyKind.EXACT_TITLE_YEAR if query.year is not None:
                return self._exact_title_year(title, query.year)
            case StrategyKind.NORMALIZED_TITLE:
                return self._normalized_title(title, query.year)
            case StrategyKind.YEAR_TOLERANT if query.year is not None:
                return self._year_tolerant(title, query.year)
            case StrategyKind.FUZZY_TITLE:
                return self._fuzzy_title(title)
            case StrategyKind.BROAD_KEYWORDS:
                return self._broad_keywords(title)
            case _:
                return StrategyOutcome.no_candidate()

    def _direct_id(self, external_id: str) -> StrategyOutcome:
        movies = list(self._client.find_by_external_id(external_id))
        if len(movies) != 1:
            return StrategyOutcome.no_candidate()
        return StrategyOutcome.match(movies[0])

    def _exact_title_year(self, title: str, year: int) -> StrategyOutcome:
        wanted = title.casefold()
        for movie in self._client.search_movies(title, year=year):
            if (movie.title or "").casefold() == wanted and movie.release_year == year:
                return StrategyOutcome.match(movie)
        return StrategyOutcome.no_candidate()

    def _normalized_title(self, title: str, year: int | None) -> StrategyOutcome:
        normalized = normalize_title(title)
        if not normalized:
            return StrategyOutcome.no_candidate()
        return _first(self._client.search_movies(normalized, year=year))

    def _year_tolerant(self, title: str, year: int) -> StrategyOutcome:
        merged: list[CatalogMovie] = []
        errors: list[Exception] = []
        for candidate_year in (year - 1, year, year + 1):
            try:
                merged.extend(self._client.search_movies(title, year=candidate_year))
            except Exception as exc:  # noqa: BLE001
                log.debug("Year-tolerant search failed for %s: %s", candidate_year, exc)
                errors.append(exc)
        if len(errors) == 3:
            raise errors[-1]
        return _first(merged)

    def _fuzzy_title(self, title: str) -> StrategyOutcome:
        threshold = self._config.fuzzy_threshold
        for movie in self._client.search_movies(title):
            if similarity(movie.title or "", title) > threshold:
                return StrategyOutcome.match(movie)
        return StrategyOutcome.no_candidate()

    def _broad_keywords(self, title: str) -> StrategyOutcome:
        keywords = extract_keywords(title)
        if not keywords:
            return StrategyOutcome.no_candidate()
        return _first(self._client.search_movies(keywords))


def _first(movies: Iterable[CatalogMovie]) -> StrategyOutcome:
    for movie in movies:
        return StrategyOutcome.match(movie)
    return StrategyOutcome.no_candidate()
