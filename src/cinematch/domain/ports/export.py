"""Ports for acquiring and reading provider ID exports."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import date
    from pathlib import Path

    from cinematch.domain.model import EntityKind, ExportEntry


@runtime_checkable
class ExportRepository(Protocol):
    """Downloads daily exports and streams their entries."""

    def default_path(self, kind: EntityKind, day: date) -> Path: ...

    def download(self, kind: EntityKind, *, day: date | None = None) -> Path: ...

    def stream(
        self,
        path: Path,
        kind: EntityKind,
        *,
        skip_video: bool = True,
        skip_adult: bool = True,
        min_popularity: float | None = None,
    ) -> Iterator[ExportEntry]: ...

    def export_date(self, path: Path) -> date | None: ...
