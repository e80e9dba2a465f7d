"""TMDb API client."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING
from urllib.parse import quote

from cinematch.adapters.http_resilience import ResilientClient

from .schema import TmdbFindResponse, TmdbMovieSearch

if TYPE_CHECKING:
    from collections.abc import Callable

    from cinematch.config.http_resilience import ResilienceConfig
    from cinematch.config.tmdb import TmdbConfig

log = getLogger(__name__)

DEFAULT_EXTERNAL_SOURCE = "imdb_id"


class TmdbAPIError(RuntimeError):
    """Raised when the TMDb API returns an unexpected response."""


class TmdbClient:
    """Low-level HTTP client for the TMDb v3 API."""

    def __init__(
        self,
        *,
        config: TmdbConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient

    def find_by_external_id(
        self,
        external_id: str,
        *,
        external_source: str = DEFAULT_EXTERNAL_SOURCE,
    ) -> TmdbFindResponse:
        path = f"find/{quote(external_id, safe='')}"
        payload = asyncio.run(self._get_async(path, {"external_source": external_source}))
        return TmdbFindResponse.model_validate(payload)

    def search_movies(
        self,
        query: str,
        *,
        year: int | None = None,
        page: int | None = None,
    ) -> TmdbMovieSearch:
        params: dict[str, str] = {"query": query}
        if year is not None:
            params["year"] = str(year)
        if page is not None:
            params["page"] = str(page)
        payload = asyncio.run(self._get_async("search/movie", params))
        return TmdbMovieSearch.model_validate(payload)

    async def _get_async(self, path: str, params: dict[str, str]) -> dict[str, object]:
        if self._resilience.base_url is None:
            raise TmdbAPIError("Missing TMDb base_url in resilience configuration")
        request_params = {**params, "api_key": self._config.api_key}

        async with self._client_factory(self._resilience) as client:
            response = await client.get(path, params=request_params)
        response.raise_for_status()

        payload = response.json()
        if not isinstance(payload, dict):
            raise TmdbAPIError(f"Unexpected TMDb response payload for {path}")
        log.debug("TMDb %s returned %s keys", path, len(payload))
        return payload
