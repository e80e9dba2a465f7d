"""Ports for the locally owned catalog state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from cinematch.domain.model import LookupMetric


@runtime_checkable
class LocalIdRepository(Protocol):
    """Read access to the provider IDs already stored locally for one entity kind."""

    def load_ids(self) -> set[int]: ...

    def count_without_external_id(self) -> int: ...


@runtime_checkable
class ImportStateRepository(Protocol):
    """Key/value state shared with the import scheduler."""

    def set(self, key: str, value: str) -> None: ...

    def get(self, key: str) -> str | None: ...


@runtime_checkable
class LookupMetricRepository(Protocol):
    """Sink for lookup metrics."""

    def add(self, metric: LookupMetric) -> None: ...
