"""PostgreSQL maintenance repository - integrity scans and repairs."""

import logging

import psycopg
from psycopg import AsyncConnection, sql

from lumbertrack.application.dto.maintenance_dto import DeletedRow, DuplicatePackGroup
from lumbertrack.infrastructure.persistence.postgres.errors import PACK_ID_CONSTRAINT

logger = logging.getLogger(__name__)


class PostgresMaintenanceRepository:
    """Maintenance repository implementation.

    Works on whatever rows exist, including legacy data written before the
    foreign keys and unique constraint were in place.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_tables(self) -> list[str]:
        """Existing subsystem tables in the public schema."""
        cur = await self._conn.execute(
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = 'public' AND table_type = 'BASE TABLE' "
            "AND table_name LIKE 'lumber\\_%' ORDER BY table_name"
        )
        return [r[0] for r in await cur.fetchall()]

    async def count_rows(self, table: str) -> int:
        cur = await self._conn.execute(
            sql.SQL("SELECT COUNT(*) FROM {}").format(sql.Identifier(table))
        )
        r = await cur.fetchone()
        return r[0]

    async def has_pack_unique_constraint(self) -> bool:
        cur = await self._conn.execute(
            "SELECT 1 FROM information_schema.table_constraints "
            "WHERE table_name = 'lumber_packs' AND constraint_type = 'UNIQUE' "
            "AND constraint_name = %s",
            (PACK_ID_CONSTRAINT,),
        )
        return await cur.fetchone() is not None

    async def find_duplicate_pack_groups(self) -> list[DuplicatePackGroup]:
        """(load, pack_id) pairs held by more than one pack, largest first."""
        cur = await self._conn.execute(
            "SELECT load_id, pack_id, COUNT(*) FROM lumber_packs "
            "GROUP BY load_id, pack_id HAVING COUNT(*) > 1 "
            "ORDER BY COUNT(*) DESC, load_id, pack_id"
        )
        return [
            DuplicatePackGroup(load_id=r[0], pack_id=r[1], count=r[2])
            for r in await cur.fetchall()
        ]

    async def count_orphan_items(self) -> int:
        cur = await self._conn.execute(
            "SELECT COUNT(*) FROM lumber_load_items li "
            "LEFT JOIN lumber_loads l ON li.load_id = l.id WHERE l.id IS NULL"
        )
        r = await cur.fetchone()
        return r[0]

    async def count_orphan_packs(self) -> int:
        cur = await self._conn.execute(
            "SELECT COUNT(*) FROM lumber_packs p "
            "LEFT JOIN lumber_load_items li ON p.load_item_id = li.id WHERE li.id IS NULL"
        )
        r = await cur.fetchone()
        return r[0]

    async def delete_duplicate_packs(self) -> list[DeletedRow]:
        """Delete all but the earliest-created pack of each (load, pack_id)."""
        cur = await self._conn.execute(
            "DELETE FROM lumber_packs WHERE id IN ("
            "  SELECT id FROM ("
            "    SELECT id, ROW_NUMBER() OVER ("
            "      PARTITION BY load_id, pack_id ORDER BY created_at, id"
            "    ) AS rn FROM lumber_packs"
            "  ) ranked WHERE rn > 1"
            ") RETURNING id, load_id, pack_id"
        )
        return [
            DeletedRow(table="lumber_packs", id=r[0], load_id=r[1], pack_id=r[2])
            for r in await cur.fetchall()
        ]

    async def delete_orphan_items(self) -> list[DeletedRow]:
        cur = await self._conn.execute(
            "DELETE FROM lumber_load_items WHERE id IN ("
            "  SELECT li.id FROM lumber_load_items li "
            "  LEFT JOIN lumber_loads l ON li.load_id = l.id WHERE l.id IS NULL"
            ") RETURNING id, load_id"
        )
        return [
            DeletedRow(table="lumber_load_items", id=r[0], load_id=r[1])
            for r in await cur.fetchall()
        ]

    async def delete_orphan_packs(self) -> list[DeletedRow]:
        cur = await self._conn.execute(
            "DELETE FROM lumber_packs WHERE id IN ("
            "  SELECT p.id FROM lumber_packs p "
            "  LEFT JOIN lumber_load_items li ON p.load_item_id = li.id WHERE li.id IS NULL"
            ") RETURNING id, load_id, pack_id"
        )
        return [
            DeletedRow(table="lumber_packs", id=r[0], load_id=r[1], pack_id=r[2])
            for r in await cur.fetchall()
        ]

    async def truncate(self, table: str) -> str | None:
        """Truncate inside a savepoint so a failure leaves the outer transaction usable."""
        try:
            async with self._conn.transaction():
                await self._conn.execute(
                    sql.SQL("TRUNCATE TABLE {} CASCADE").format(sql.Identifier(table))
                )
        except psycopg.Error as e:
            logger.warning("Truncate of %s skipped: %s", table, e)
            return str(e)
        return None
