"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config
from .tmdb import (
    ExportConfig,
    ResolverConfig,
    TmdbConfig,
    get_export_config,
    get_resolver_config,
    get_tmdb_config,
)

__all__ = [
    "CacheConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ExportConfig",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "ResolverConfig",
    "RetryPolicy",
    "StorageConfig",
    "TmdbConfig",
    "configure_logging",
    "get_database_config",
    "get_export_config",
    "get_resolver_config",
    "get_storage_config",
    "get_tmdb_config",
    "require_env_var",
    "require_env_vars",
]
