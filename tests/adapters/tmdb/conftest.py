"""Shared fixtures for TMDb adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from cinematch.config.http_resilience import ResilienceConfig, RetryPolicy
from cinematch.config.tmdb import ExportConfig, TmdbConfig

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def tmdb_config() -> TmdbConfig:
    return TmdbConfig(
        api_key="test-key",
        resilience=ResilienceConfig(
            name="tmdb",
            base_url="https://api.tmdb.test/3",
            retry=RetryPolicy(total=0),
            cache=None,
        ),
    )


@pytest.fixture
def export_config(tmp_path: Path) -> ExportConfig:
    return ExportConfig(
        dest_dir=tmp_path / "exports",
        base_url="http://files.tmdb.test/p/exports",
        resilience=ResilienceConfig(name="tmdb-export", retry=RetryPolicy(total=0), cache=None),
    )
