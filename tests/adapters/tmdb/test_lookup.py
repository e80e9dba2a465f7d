from __future__ import annotations

from cinematch.adapters.tmdb import TmdbMovieLookup
from cinematch.adapters.tmdb.schema import TmdbFindResponse, TmdbMovie, TmdbMovieSearch
from cinematch.domain.model import CatalogMovie
from cinematch.domain.ports.lookup import MovieLookupClient


class _StubTmdbClient:
    def __init__(self) -> None:
        self.find_sources: list[str] = []
        self.search_args: list[tuple[str, int | None]] = []

    def find_by_external_id(
        self, external_id: str, *, external_source: str = "imdb_id"
    ) -> TmdbFindResponse:
        self.find_sources.append(external_source)
        return TmdbFindResponse(
            movie_results=[TmdbMovie(id=603, title="The Matrix", release_date="1999-03-30")]
        )

    def search_movies(
        self, query: str, *, year: int | None = None, page: int | None = None
    ) -> TmdbMovieSearch:
        _ = page
        self.search_args.append((query, year))
        return TmdbMovieSearch(
            results=[
                TmdbMovie(id=949, title="Heat", release_date="1995-12-15", popularity=40.5),
                TmdbMovie(id=1, title=None, release_date=""),
            ]
        )


def test_lookup_translates_schema_objects() -> None:
    stub = _StubTmdbClient()
    lookup = TmdbMovieLookup(stub)

    found = lookup.find_by_external_id("tt0133093")
    searched = lookup.search_movies("Heat", year=1995)

    assert isinstance(lookup, MovieLookupClient)
    assert found == [
        CatalogMovie(id=603, title="The Matrix", release_date="1999-03-30"),
    ]
    assert found[0].release_year == 1999
    assert searched[0].popularity == 40.5
    assert searched[1].release_year is None
    assert stub.find_sources == ["imdb_id"]
    assert stub.search_args == [("Heat", 1995)]
