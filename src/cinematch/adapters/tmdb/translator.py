"""Translate TMDb schema objects into domain records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from cinematch.domain.model import CatalogMovie, ExportEntry

if TYPE_CHECKING:
    from .schema import TmdbExportLine, TmdbMovie


def translate_movie(movie: TmdbMovie) -> CatalogMovie:
    return CatalogMovie(
        id=movie.id,
        title=movie.title,
        original_title=movie.original_title,
        release_date=movie.release_date,
        popularity=movie.popularity,
    )


def translate_export_line(line: TmdbExportLine) -> ExportEntry:
    return ExportEntry(
        id=line.id,
        popularity=line.popularity if line.popularity is not None else 0.0,
        is_video=bool(line.video),
        is_adult=bool(line.adult),
        name=line.original_title or line.name,
    )
