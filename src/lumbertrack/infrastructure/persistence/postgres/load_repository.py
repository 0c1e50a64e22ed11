"""PostgreSQL load repository implementation."""

from __future__ import annotations

from uuid import UUID

from psycopg import AsyncConnection, errors

from lumbertrack.domain.entities import Load
from lumbertrack.domain.services import LoadStageSnapshot, StageFlags
from lumbertrack.domain.value_objects import LumberType, PickupOrDelivery
from lumbertrack.infrastructure.persistence.postgres.errors import unique_violation_error

_COLUMNS = (
    "id, code, supplier_id, created_at, updated_at, supplier_location_id, lumber_type, "
    "pickup_or_delivery, estimated_delivery_date, actual_arrival_date, comments, "
    "pickup_number, plant, pickup_date, invoice_number, invoice_total, invoice_date, "
    "load_quality, is_entered, is_paid, paid_at, po_generated, po_generated_at, "
    "all_packs_tallied, all_packs_finished, created_by"
)

_SNAPSHOT_QUERY = (
    "SELECT l.id, l.code, l.all_packs_tallied, l.all_packs_finished, l.po_generated, "
    "l.is_paid, l.actual_arrival_date, "
    "COALESCE(p.item_count, 0), COALESCE(p.items_with_actual_footage, 0), "
    "COALESCE(p.items_with_packs, 0), COALESCE(p.pack_count, 0), "
    "COALESCE(p.finished_pack_count, 0) "
    "FROM lumber_loads l LEFT JOIN lumber_load_pack_progress p ON p.load_id = l.id"
)


def _value(member: LumberType | PickupOrDelivery | None) -> str | None:
    return member.value if member else None


def _row_to_load(r: tuple) -> Load:
    return Load(
        id=r[0],
        code=r[1],
        supplier_id=r[2],
        created_at=r[3],
        updated_at=r[4],
        supplier_location_id=r[5],
        lumber_type=LumberType(r[6]) if r[6] else None,
        pickup_or_delivery=PickupOrDelivery(r[7]) if r[7] else None,
        estimated_delivery_date=r[8],
        actual_arrival_date=r[9],
        comments=r[10],
        pickup_number=r[11],
        plant=r[12],
        pickup_date=r[13],
        invoice_number=r[14],
        invoice_total=r[15],
        invoice_date=r[16],
        load_quality=r[17],
        is_entered=r[18],
        is_paid=r[19],
        paid_at=r[20],
        po_generated=r[21],
        po_generated_at=r[22],
        all_packs_tallied=r[23],
        all_packs_finished=r[24],
        created_by=r[25],
    )


def _row_to_snapshot(r: tuple) -> LoadStageSnapshot:
    return LoadStageSnapshot(
        load_id=r[0],
        code=r[1],
        all_packs_tallied=r[2],
        all_packs_finished=r[3],
        po_generated=r[4],
        is_paid=r[5],
        actual_arrival_date=r[6],
        item_count=r[7],
        items_with_actual_footage=r[8],
        items_with_packs=r[9],
        pack_count=r[10],
        finished_pack_count=r[11],
    )


class PostgresLoadRepository:
    """Load repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, load_id: UUID) -> Load | None:
        """Get load by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_loads WHERE id = %s", (load_id,)
        )
        r = await cur.fetchone()
        return _row_to_load(r) if r else None

    async def list_by_ids(self, load_ids: list[UUID]) -> list[Load]:
        """Loads for the given ids in one query; missing ids are skipped."""
        if not load_ids:
            return []
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_loads WHERE id = ANY(%s)", (list(load_ids),)
        )
        return [_row_to_load(r) for r in await cur.fetchall()]

    async def get_by_code(self, code: str) -> Load | None:
        """Get load by its unique code."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_loads WHERE code = %s", (code,)
        )
        r = await cur.fetchone()
        return _row_to_load(r) if r else None

    async def list_existing_codes(self, codes: list[str]) -> list[str]:
        """Return the subset of ``codes`` already in use."""
        if not codes:
            return []
        cur = await self._conn.execute(
            "SELECT code FROM lumber_loads WHERE code = ANY(%s) ORDER BY code",
            (list(codes),),
        )
        return [r[0] for r in await cur.fetchall()]

    async def list(
        self,
        *,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Load], str | None]:
        """List loads with cursor pagination."""
        where = ""
        _params: list[object] = []
        if cursor:
            where = " WHERE id > %s"
            _params.append(UUID(cursor))
        params = tuple(_params) + (limit + 1,)
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_loads{where} ORDER BY id LIMIT %s", params
        )
        rows = await cur.fetchall()
        loads = [_row_to_load(r) for r in rows[:limit]]
        next_cursor = str(rows[limit][0]) if len(rows) > limit else None
        return loads, next_cursor

    async def create(self, load: Load) -> Load:
        """Create load."""
        try:
            await self._conn.execute(
                f"INSERT INTO lumber_loads ({_COLUMNS}) VALUES ("
                + ", ".join(["%s"] * 26)
                + ")",
                (
                    load.id,
                    load.code,
                    load.supplier_id,
                    load.created_at,
                    load.updated_at,
                    load.supplier_location_id,
                    _value(load.lumber_type),
                    _value(load.pickup_or_delivery),
                    load.estimated_delivery_date,
                    load.actual_arrival_date,
                    load.comments,
                    load.pickup_number,
                    load.plant,
                    load.pickup_date,
                    load.invoice_number,
                    load.invoice_total,
                    load.invoice_date,
                    load.load_quality,
                    load.is_entered,
                    load.is_paid,
                    load.paid_at,
                    load.po_generated,
                    load.po_generated_at,
                    load.all_packs_tallied,
                    load.all_packs_finished,
                    load.created_by,
                ),
            )
        except errors.UniqueViolation as e:
            domain_error = unique_violation_error(e, code=load.code)
            if domain_error is None:
                raise
            raise domain_error from e
        return load

    async def update(self, load: Load) -> None:
        """Update load. Stage flags are written by ``set_stage_flags`` only."""
        try:
            await self._conn.execute(
                "UPDATE lumber_loads SET code=%s, supplier_id=%s, supplier_location_id=%s, "
                "lumber_type=%s, pickup_or_delivery=%s, estimated_delivery_date=%s, "
                "actual_arrival_date=%s, comments=%s, pickup_number=%s, plant=%s, "
                "pickup_date=%s, invoice_number=%s, invoice_total=%s, invoice_date=%s, "
                "load_quality=%s, is_entered=%s, is_paid=%s, paid_at=%s, po_generated=%s, "
                "po_generated_at=%s, updated_at=%s WHERE id=%s",
                (
                    load.code,
                    load.supplier_id,
                    load.supplier_location_id,
                    _value(load.lumber_type),
                    _value(load.pickup_or_delivery),
                    load.estimated_delivery_date,
                    load.actual_arrival_date,
                    load.comments,
                    load.pickup_number,
                    load.plant,
                    load.pickup_date,
                    load.invoice_number,
                    load.invoice_total,
                    load.invoice_date,
                    load.load_quality,
                    load.is_entered,
                    load.is_paid,
                    load.paid_at,
                    load.po_generated,
                    load.po_generated_at,
                    load.updated_at,
                    load.id,
                ),
            )
        except errors.UniqueViolation as e:
            domain_error = unique_violation_error(e, code=load.code)
            if domain_error is None:
                raise
            raise domain_error from e

    async def delete(self, load_id: UUID) -> None:
        """Delete load with its packs and items."""
        await self._conn.execute("DELETE FROM lumber_packs WHERE load_id = %s", (load_id,))
        await self._conn.execute("DELETE FROM lumber_load_items WHERE load_id = %s", (load_id,))
        await self._conn.execute("DELETE FROM lumber_loads WHERE id = %s", (load_id,))

    async def set_stage_flags(self, load_id: UUID, flags: StageFlags) -> None:
        """Store recomputed stage flags."""
        await self._conn.execute(
            "UPDATE lumber_loads SET all_packs_tallied=%s, all_packs_finished=%s, "
            "updated_at=NOW() WHERE id=%s",
            (flags.all_packs_tallied, flags.all_packs_finished, load_id),
        )

    async def get_stage_snapshot(self, load_id: UUID) -> LoadStageSnapshot | None:
        """Stored flags with live item and pack aggregates of one load."""
        cur = await self._conn.execute(f"{_SNAPSHOT_QUERY} WHERE l.id = %s", (load_id,))
        r = await cur.fetchone()
        return _row_to_snapshot(r) if r else None

    async def list_stage_snapshots(self) -> list[LoadStageSnapshot]:
        """Snapshots of every load, oldest first."""
        cur = await self._conn.execute(f"{_SNAPSHOT_QUERY} ORDER BY l.created_at, l.id")
        return [_row_to_snapshot(r) for r in await cur.fetchall()]
