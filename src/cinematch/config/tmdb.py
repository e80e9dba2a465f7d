"""TMDb configuration values."""

from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from .env import env_float, env_int, require_env_vars
from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

TMDB_BASE_URL = "https://api.themoviedb.org/3"
TMDB_TIMEOUT_SECONDS = 15.0
TMDB_EXPORT_BASE_URL = "http://files.tmdb.org/p/exports"
# export files are large; downloads get a generous timeout
TMDB_EXPORT_TIMEOUT_SECONDS = 300.0
DEFAULT_EXPORT_FALLBACK_DAYS = 3

DEFAULT_MAX_FALLBACK_LEVEL = 3
DEFAULT_MIN_CONFIDENCE = 0.7
DEFAULT_FUZZY_THRESHOLD = 0.7


def cacheable_tmdb_payload(payload: object) -> bool:
    """TMDb error bodies carry ``"success": false``; those stay out of the cache."""

    return not (isinstance(payload, dict) and payload.get("success") is False)


@dataclass(frozen=True, slots=True)
class TmdbConfig:
    """Holds TMDb API configuration values."""

    api_key: str
    resilience: ResilienceConfig


@dataclass(frozen=True, slots=True)
class ExportConfig:
    """Where and how daily ID exports are fetched."""

    dest_dir: Path
    base_url: str = TMDB_EXPORT_BASE_URL
    fallback_days: int = DEFAULT_EXPORT_FALLBACK_DAYS
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(
            name="tmdb-export",
            timeout_seconds=TMDB_EXPORT_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=2),
            cache=None,
        )
    )


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    """Thresholds for the progressive resolution cascade.

    ``max_fallback_level`` bounds how many applicable strategies are attempted;
    ``min_confidence`` is the floor a strategy's confidence must reach for its
    match to be accepted; ``fuzzy_threshold`` gates the fuzzy-title strategy.
    """

    max_fallback_level: int = DEFAULT_MAX_FALLBACK_LEVEL
    min_confidence: float = DEFAULT_MIN_CONFIDENCE
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD

    def __post_init__(self) -> None:
        if self.max_fallback_level < 0:
            raise ConfigurationError("max_fallback_level must be non-negative")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ConfigurationError("min_confidence must be within [0, 1]")
        if not 0.0 <= self.fuzzy_threshold <= 1.0:
            raise ConfigurationError("fuzzy_threshold must be within [0, 1]")


def get_tmdb_config(*, resilience: ResilienceConfig | None = None) -> TmdbConfig:
    values = require_env_vars(("TMDB_API_KEY",))
    return TmdbConfig(
        api_key=values["TMDB_API_KEY"],
        resilience=resilience
        or ResilienceConfig(
            name="tmdb",
            base_url=TMDB_BASE_URL,
            timeout_seconds=TMDB_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=40, per_seconds=10.0),
            cache=CacheConfig(backend="memory", should_cache=cacheable_tmdb_payload),
        ),
    )


def get_export_config() -> ExportConfig:
    env_dir = os.getenv("CINEMATCH_EXPORT_DIR")
    dest_dir = Path(env_dir) if env_dir else Path(tempfile.gettempdir())
    return ExportConfig(dest_dir=dest_dir.expanduser())


def get_resolver_config() -> ResolverConfig:
    return ResolverConfig(
        max_fallback_level=env_int("TMDB_MAX_FALLBACK_LEVEL", DEFAULT_MAX_FALLBACK_LEVEL),
        min_confidence=env_float("TMDB_MIN_CONFIDENCE", DEFAULT_MIN_CONFIDENCE),
    )
