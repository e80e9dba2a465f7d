"""Async HTTP client composed of httpx-retries, aiolimiter and a hishel cache."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Response as CachedResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import Retry, RetryTransport

from cinematch.config.storage import get_storage_config

if TYPE_CHECKING:
    from types import TracebackType

    from cinematch.config.http_resilience import (
        CacheConfig,
        CachePredicate,
        ResilienceConfig,
        RetryPolicy,
    )

_CACHE_BACKENDS = frozenset({"sqlite", "memory"})


def build_retry(policy: RetryPolicy) -> Retry:
    return Retry(
        total=policy.total,
        backoff_factor=policy.backoff_factor,
        backoff_jitter=policy.backoff_jitter,
        max_backoff_wait=policy.max_backoff_wait,
        respect_retry_after_header=policy.respect_retry_after_header,
        allowed_methods=tuple(policy.allowed_methods),
        status_forcelist=tuple(policy.status_forcelist),
        retry_on_exceptions=policy.retry_on_exceptions,
    )


class _JsonPredicateFilter(BaseFilter[CachedResponse]):
    def __init__(self, predicate: CachePredicate) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: CachedResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if not body:
            return True
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, json.JSONDecodeError):
            return True
        return bool(self._predicate(payload))


def build_cache_storage(config: CacheConfig) -> AsyncSqliteStorage:
    if config.backend not in _CACHE_BACKENDS:
        raise ValueError(f"Unsupported cache backend: {config.backend}")
    if config.backend == "memory":
        database_path = ":memory:"
    else:
        database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
    return AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=config.default_ttl_seconds,
        refresh_ttl_on_access=config.refresh_ttl_on_access,
    )


def _open_client(
    config: ResilienceConfig,
    transport: httpx.AsyncBaseTransport | None,
) -> httpx.AsyncClient:
    options: dict[str, Any] = {
        "timeout": config.timeout_seconds,
        "follow_redirects": True,
        "transport": RetryTransport(transport=transport, retry=build_retry(config.retry)),
    }
    if config.base_url is not None:
        options["base_url"] = config.base_url
    if config.default_headers:
        options["headers"] = dict(config.default_headers)

    cache = config.cache
    if cache is None or not cache.enabled:
        return httpx.AsyncClient(**options)

    storage = build_cache_storage(cache)
    if cache.should_cache is None:
        return AsyncCacheClient(**options, storage=storage)
    policy = FilterPolicy(response_filters=[_JsonPredicateFilter(cache.should_cache)])
    return AsyncCacheClient(**options, storage=storage, policy=policy)


class ResilientClient:
    """Async client that retries transient failures, honours a rate limit and caches responses.

    Use it as an async context manager so the pooled connections are released.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        limit = config.ratelimit
        self._limiter = AsyncLimiter(limit.max_calls, limit.per_seconds) if limit else None
        self._client = _open_client(config, transport)

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._limiter is None:
            return await self._client.request(method, url, **kwargs)
        async with self._limiter:
            return await self._client.request(method, url, **kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", url, **kwargs)
