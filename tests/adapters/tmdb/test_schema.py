from __future__ import annotations

import logging

import pytest

from cinematch.adapters.tmdb.schema import TmdbExportLine, TmdbMovie, TmdbMovieSearch
from cinematch.adapters.tmdb.translator import translate_export_line, translate_movie


def test_unmodeled_keys_are_logged_once(caplog: pytest.LogCaptureFixture) -> None:
    payload = {"page": 1, "results": [], "brand_new_field": 1}

    with caplog.at_level(logging.DEBUG, logger="cinematch.adapters.tmdb.schema"):
        TmdbMovieSearch.model_validate(payload)
        TmdbMovieSearch.model_validate(payload)

    messages = [r.getMessage() for r in caplog.records if "brand_new_field" in r.getMessage()]
    assert len(messages) == 1


def test_blank_release_date_becomes_none() -> None:
    movie = TmdbMovie.model_validate({"id": 1, "title": "Untitled", "release_date": "  "})

    assert movie.release_date is None
    assert translate_movie(movie).release_year is None


def test_export_line_translation_defaults() -> None:
    line = TmdbExportLine.model_validate_json('{"id": 287, "name": "Brad Pitt", "adult": false}')

    entry = translate_export_line(line)

    assert entry.id == 287
    assert entry.popularity == 0.0
    assert entry.name == "Brad Pitt"
    assert not entry.is_video
