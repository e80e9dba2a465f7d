"""Domain lookup port backed by the TMDb client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .translator import translate_movie

if TYPE_CHECKING:
    from cinematch.domain.model import CatalogMovie

    from .schema import TmdbFindResponse, TmdbMovieSearch


class TmdbLookupClient(Protocol):
    def find_by_external_id(
        self, external_id: str, *, external_source: str = "imdb_id"
    ) -> TmdbFindResponse: ...

    def search_movies(
        self, query: str, *, year: int | None = None, page: int | None = None
    ) -> TmdbMovieSearch: ...


class TmdbMovieLookup:
    """Adapts :class:`TmdbClient` responses to domain ``CatalogMovie`` lists."""

    def __init__(self, client: TmdbLookupClient, *, external_source: str = "imdb_id") -> None:
        self._client = client
        self._external_source = external_source

    def find_by_external_id(self, external_id: str) -> list[CatalogMovie]:
        response = self._client.find_by_external_id(
            external_id, external_source=self._external_source
        )
        return [translate_movie(movie) for movie in response.movie_results]

    def search_movies(self, query: str, *, year: int | None = None) -> list[CatalogMovie]:
        response = self._client.search_movies(query, year=year)
        return [translate_movie(movie) for movie in response.results]
