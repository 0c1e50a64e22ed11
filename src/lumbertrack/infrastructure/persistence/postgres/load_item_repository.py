"""PostgreSQL load item repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from lumbertrack.domain.entities import LoadItem
from lumbertrack.domain.value_objects import Thickness

_COLUMNS = (
    "id, load_id, species, grade, thickness, created_at, updated_at, "
    "estimated_footage, actual_footage, actual_footage_entered_at, price"
)


def _row_to_item(r: tuple) -> LoadItem:
    return LoadItem(
        id=r[0],
        load_id=r[1],
        species=r[2],
        grade=r[3],
        thickness=Thickness(r[4]),
        created_at=r[5],
        updated_at=r[6],
        estimated_footage=r[7],
        actual_footage=r[8],
        actual_footage_entered_at=r[9],
        price=r[10],
    )


class PostgresLoadItemRepository:
    """Load item repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, item_id: UUID) -> LoadItem | None:
        """Get item by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_load_items WHERE id = %s", (item_id,)
        )
        r = await cur.fetchone()
        return _row_to_item(r) if r else None

    async def list_by_load(self, load_id: UUID) -> list[LoadItem]:
        """Items of a load in creation order."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_load_items WHERE load_id = %s "
            "ORDER BY created_at, id",
            (load_id,),
        )
        return [_row_to_item(r) for r in await cur.fetchall()]

    async def list_by_loads(self, load_ids: list[UUID]) -> list[LoadItem]:
        if not load_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_load_items WHERE load_id = ANY(%s) "
            "ORDER BY created_at, id",
            (list(load_ids),),
        )
        return [_row_to_item(r) for r in await cur.fetchall()]

    async def create_batch(self, items: list[LoadItem]) -> list[LoadItem]:
        """Insert items in one round trip."""
        if not items:
            return []
        async with self._conn.cursor() as cur:
            await cur.executemany(
                f"INSERT INTO lumber_load_items ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                [
                    (
                        i.id,
                        i.load_id,
                        i.species,
                        i.grade,
                        i.thickness.value,
                        i.created_at,
                        i.updated_at,
                        i.estimated_footage,
                        i.actual_footage,
                        i.actual_footage_entered_at,
                        i.price,
                    )
                    for i in items
                ],
            )
        return items

    async def update(self, item: LoadItem) -> None:
        """Update item. The owning load never changes."""
        await self._conn.execute(
            "UPDATE lumber_load_items SET species=%s, grade=%s, thickness=%s, "
            "estimated_footage=%s, actual_footage=%s, actual_footage_entered_at=%s, "
            "price=%s, updated_at=%s WHERE id=%s",
            (
                item.species,
                item.grade,
                item.thickness.value,
                item.estimated_footage,
                item.actual_footage,
                item.actual_footage_entered_at,
                item.price,
                item.updated_at,
                item.id,
            ),
        )
