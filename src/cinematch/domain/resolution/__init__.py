"""Progressive entity resolution."""

from __future__ import annotations

from .resolver import (
    OutcomeStatus,
    Resolution,
    ResolutionNotFound,
    ResolutionResult,
    Resolver,
    StrategyAttempt,
    StrategyOutcome,
)
from .similarity import extract_keywords, graphemes, levenshtein, normalize_title, similarity
from .strategies import (
    STRATEGIES,
    ResolutionQuery,
    ResolutionStrategy,
    StrategyKind,
    plan_strategies,
)

__all__ = [
    "STRATEGIES",
    "OutcomeStatus",
    "Resolution",
    "ResolutionNotFound",
    "ResolutionQuery",
    "ResolutionResult",
    "ResolutionStrategy",
    "Resolver",
    "StrategyAttempt",
    "StrategyKind",
    "StrategyOutcome",
    "extract_keywords",
    "graphemes",
    "levenshtein",
    "normalize_title",
    "plan_strategies",
    "similarity",
]
