from __future__ import annotations

import asyncio

import httpx
import pytest

from cinematch.adapters.http_resilience import (
    ResilientClient,
    _JsonPredicateFilter,  # pyright: ignore[reportPrivateUsage]
    build_retry,
)
from cinematch.config.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryPolicy,
)
from cinematch.config.tmdb import cacheable_tmdb_payload


def test_build_retry_maps_policy() -> None:
    retry = build_retry(RetryPolicy(total=2, backoff_factor=0.1))

    assert retry.total == 2
    assert retry.backoff_factor == 0.1


def test_unknown_cache_backend_is_rejected() -> None:
    config = ResilienceConfig(name="tmdb", cache=CacheConfig(backend="redis"))  # type: ignore[arg-type]

    with pytest.raises(ValueError, match="Unsupported cache backend"):
        ResilientClient(config)


def test_client_sends_through_rate_limiter_and_base_url() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(200, json={"ok": True})

    config = ResilienceConfig(
        name="tmdb",
        base_url="https://api.tmdb.test/3",
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        retry=RetryPolicy(total=0),
        cache=None,
        default_headers={"Accept": "application/json"},
    )

    async def run() -> list[int]:
        async with ResilientClient(config, transport=httpx.MockTransport(handler)) as client:
            first = await client.get("search/movie", params={"query": "Heat"})
            second = await client.request("GET", "find/tt0113277")
        return [first.status_code, second.status_code]

    assert asyncio.run(run()) == [200, 200]
    assert seen == [
        "https://api.tmdb.test/3/search/movie?query=Heat",
        "https://api.tmdb.test/3/find/tt0113277",
    ]


def test_tmdb_error_payloads_are_not_cacheable() -> None:
    assert cacheable_tmdb_payload({"results": []})
    assert cacheable_tmdb_payload([1, 2])
    assert not cacheable_tmdb_payload(
        {"success": False, "status_code": 34, "status_message": "Not found."}
    )


def test_json_filter_delegates_only_for_json_bodies() -> None:
    rejected: list[object] = []

    def predicate(payload: object) -> bool:
        rejected.append(payload)
        return False

    response_filter = _JsonPredicateFilter(predicate)

    assert response_filter.needs_body()
    assert response_filter.apply(None, b"not json")  # type: ignore[arg-type]
    assert response_filter.apply(None, None)  # type: ignore[arg-type]
    assert not response_filter.apply(None, b'{"success": false}')  # type: ignore[arg-type]
    assert rejected == [{"success": False}]
