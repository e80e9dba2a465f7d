"""Observability records for external lookups."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class LookupMetric:
    """Outcome of one tracked call against an external source."""

    source: str
    operation: str
    target: str
    success: bool
    response_time_ms: int
    fallback_level: int | None = None
    confidence: float | None = None
    error_type: str | None = None
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict[str, Any])
    recorded_at: datetime = field(default_factory=_utcnow)
