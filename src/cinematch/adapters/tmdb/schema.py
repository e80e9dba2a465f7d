"""TMDb response schemas for lookups, searches and daily ID exports."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)

type TmdbId = int
type TmdbDate = str  # Format: YYYY-MM-DD, sometimes empty


class TmdbBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.debug(
            "TMDb %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class TmdbMovie(TmdbBaseModel):
    id: TmdbId
    title: str | None = None
    original_title: str | None = None
    original_language: str | None = None
    release_date: TmdbDate | None = None
    overview: str | None = None
    popularity: float | None = None
    vote_average: float | None = None
    vote_count: int | None = None
    adult: bool = False
    video: bool = False
    genre_ids: list[int] = Field(default_factory=list[int])
    poster_path: str | None = None
    backdrop_path: str | None = None

    @field_validator("release_date")
    @classmethod
    def _blank_date_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value


class TmdbPerson(TmdbBaseModel):
    id: TmdbId
    name: str | None = None
    popularity: float | None = None
    adult: bool = False
    known_for_department: str | None = None


class TmdbMovieSearch(TmdbBaseModel):
    page: int = 1
    results: list[TmdbMovie] = Field(default_factory=list["TmdbMovie"])
    total_pages: int | None = None
    total_results: int | None = None


class TmdbFindResponse(TmdbBaseModel):
    movie_results: list[TmdbMovie] = Field(default_factory=list["TmdbMovie"])
    person_results: list[TmdbPerson] = Field(default_factory=list["TmdbPerson"])
    tv_results: list[dict[str, object]] = Field(default_factory=list[dict[str, object]])
    tv_episode_results: list[dict[str, object]] = Field(default_factory=list[dict[str, object]])
    tv_season_results: list[dict[str, object]] = Field(default_factory=list[dict[str, object]])


class TmdbExportLine(BaseModel):
    """One line of a daily ID export (movie_ids_* or person_ids_*)."""

    model_config = ConfigDict(extra="ignore")

    id: TmdbId
    popularity: float | None = None
    adult: bool | None = None
    video: bool | None = None
    original_title: str | None = None
    name: str | None = None
