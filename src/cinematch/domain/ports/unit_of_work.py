"""Unit-of-work boundary around the catalog repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from cinematch.domain.model import EntityKind

if TYPE_CHECKING:
    from types import TracebackType

    from cinematch.domain.ports.persistence import (
        ImportStateRepository,
        LocalIdRepository,
        LookupMetricRepository,
    )


@dataclass(slots=True)
class CatalogRepositories:
    """Repositories backing gap analysis and lookup tracking."""

    movie_ids: LocalIdRepository
    person_ids: LocalIdRepository
    import_state: ImportStateRepository
    lookup_metrics: LookupMetricRepository

    def local_ids(self, kind: EntityKind) -> LocalIdRepository:
        return self.movie_ids if kind is EntityKind.MOVIE else self.person_ids


@runtime_checkable
class CatalogUnitOfWork(Protocol):
    """Transaction scope: changes made through ``repositories`` persist only on ``commit``.

    Leaving the context with an exception rolls back.
    """

    @property
    def repositories(self) -> CatalogRepositories: ...

    def __enter__(self) -> CatalogUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
