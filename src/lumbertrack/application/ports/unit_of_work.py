"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from lumbertrack.application.ports.repositories import (
    LoadItemRepository,
    LoadRepository,
    MaintenanceRepository,
    PackRepository,
    SplitRecordRepository,
)


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def loads(self) -> LoadRepository: ...

    @property
    def items(self) -> LoadItemRepository: ...

    @property
    def packs(self) -> PackRepository: ...

    @property
    def split_records(self) -> SplitRecordRepository: ...

    @property
    def maintenance(self) -> MaintenanceRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
