"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg_pool import AsyncConnectionPool

from lumbertrack.infrastructure.persistence.postgres.load_item_repository import (
    PostgresLoadItemRepository,
)
from lumbertrack.infrastructure.persistence.postgres.load_repository import (
    PostgresLoadRepository,
)
from lumbertrack.infrastructure.persistence.postgres.maintenance_repository import (
    PostgresMaintenanceRepository,
)
from lumbertrack.infrastructure.persistence.postgres.pack_repository import (
    PostgresPackRepository,
)
from lumbertrack.infrastructure.persistence.postgres.split_record_repository import (
    PostgresSplitRecordRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._loads = PostgresLoadRepository(self._conn)
        self._items = PostgresLoadItemRepository(self._conn)
        self._packs = PostgresPackRepository(self._conn)
        self._split_records = PostgresSplitRecordRepository(self._conn)
        self._maintenance = PostgresMaintenanceRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def loads(self) -> PostgresLoadRepository:
        return self._loads

    @property
    def items(self) -> PostgresLoadItemRepository:
        return self._items

    @property
    def packs(self) -> PostgresPackRepository:
        return self._packs

    @property
    def split_records(self) -> PostgresSplitRecordRepository:
        return self._split_records

    @property
    def maintenance(self) -> PostgresMaintenanceRepository:
        return self._maintenance

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager).

    Commits when the block exits normally; any exception rolls back every
    write made through the unit of work.
    """

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        async with uow:
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise

    return factory
