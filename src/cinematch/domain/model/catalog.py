"""Catalog records exchanged with the external provider."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

_LEADING_YEAR = re.compile(r"^(\d{4})")


class EntityKind(StrEnum):
    MOVIE = "movie"
    PERSON = "person"

    @property
    def plural(self) -> str:
        return "movies" if self is EntityKind.MOVIE else "people"


@dataclass(frozen=True, slots=True)
class CatalogMovie:
    """A movie record as returned by the provider's lookup and search endpoints."""

    id: int
    title: str | None = None
    original_title: str | None = None
    release_date: str | None = None
    popularity: float | None = None

    @property
    def release_year(self) -> int | None:
        return extract_year(self.release_date)


@dataclass(frozen=True, slots=True)
class ExportEntry:
    """A single line of a provider ID export."""

    id: int
    popularity: float = 0.0
    is_video: bool = False
    is_adult: bool = False
    name: str | None = None


def extract_year(release_date: str | None) -> int | None:
    """Return the leading four-digit year of a ``YYYY-MM-DD`` style date, if any."""

    if not release_date:
        return None
    match = _LEADING_YEAR.match(release_date.strip())
    if match is None:
        return None
    return int(match.group(1))
