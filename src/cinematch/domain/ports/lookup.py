"""Ports for looking up entities in the external catalog."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping, Sequence

    from cinematch.domain.model import CatalogMovie


@runtime_checkable
class MovieLookupClient(Protocol):
    """Provider lookup and search endpoints used by the resolver."""

    def find_by_external_id(self, external_id: str) -> Sequence[CatalogMovie]: ...

    def search_movies(self, query: str, *, year: int | None = None) -> Sequence[CatalogMovie]: ...


@runtime_checkable
class LookupTracker(Protocol):
    """Records outcome, latency and strategy metadata around an external call.

    Implementations must return ``func()``'s value unchanged and re-raise anything
    it raises.
    """

    def track[T](
        self,
        source: str,
        operation: str,
        target: str,
        func: Callable[[], T],
        *,
        fallback_level: int | None = None,
        confidence: float | None = None,
        metadata: Mapping[str, Any] | None = None,
        is_success: Callable[[T], bool] | None = None,
    ) -> T: ...
