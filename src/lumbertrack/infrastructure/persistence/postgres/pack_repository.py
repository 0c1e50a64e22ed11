"""PostgreSQL pack repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection, errors

from lumbertrack.domain.entities import Pack
from lumbertrack.domain.exceptions import Conflict, NotFound
from lumbertrack.infrastructure.persistence.postgres.errors import unique_violation_error

_COLUMNS = (
    "id, load_id, load_item_id, pack_id, created_at, updated_at, length, "
    "tally_board_feet, actual_board_feet, rip_yield, rip_comments, is_finished, "
    "finished_at, operator_id, stacker_1_id, stacker_2_id, stacker_3_id, "
    "stacker_4_id, version, created_by"
)


def _row_to_pack(r: tuple) -> Pack:
    return Pack(
        id=r[0],
        load_id=r[1],
        item_id=r[2],
        pack_id=r[3],
        created_at=r[4],
        updated_at=r[5],
        length=r[6],
        tally_board_feet=r[7],
        actual_board_feet=r[8],
        rip_yield=r[9],
        rip_comments=r[10],
        is_finished=r[11],
        finished_at=r[12],
        operator_id=r[13],
        stacker_1_id=r[14],
        stacker_2_id=r[15],
        stacker_3_id=r[16],
        stacker_4_id=r[17],
        version=r[18],
        created_by=r[19],
    )


class PostgresPackRepository:
    """Pack repository implementation.

    (load_id, pack_id) uniqueness is the ``uq_lumber_packs_load_pack_id``
    constraint; of two concurrent writers the second gets DuplicatePackId.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, pack_id: UUID) -> Pack | None:
        """Get pack by row id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_packs WHERE id = %s", (pack_id,)
        )
        r = await cur.fetchone()
        return _row_to_pack(r) if r else None

    async def get_by_pack_id(self, load_id: UUID, pack_id: str) -> Pack | None:
        """Get pack by its human identifier within a load."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_packs WHERE load_id = %s AND pack_id = %s "
            "ORDER BY created_at LIMIT 1",
            (load_id, pack_id),
        )
        r = await cur.fetchone()
        return _row_to_pack(r) if r else None

    async def list_by_load(self, load_id: UUID) -> list[Pack]:
        """Packs of a load in creation order."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM lumber_packs WHERE load_id = %s ORDER BY created_at, id",
            (load_id,),
        )
        return [_row_to_pack(r) for r in await cur.fetchall()]

    async def create(self, pack: Pack) -> Pack:
        """Create pack."""
        try:
            await self._conn.execute(
                f"INSERT INTO lumber_packs ({_COLUMNS}) VALUES ("
                + ", ".join(["%s"] * 20)
                + ")",
                (
                    pack.id,
                    pack.load_id,
                    pack.item_id,
                    pack.pack_id,
                    pack.created_at,
                    pack.updated_at,
                    pack.length,
                    pack.tally_board_feet,
                    pack.actual_board_feet,
                    pack.rip_yield,
                    pack.rip_comments,
                    pack.is_finished,
                    pack.finished_at,
                    pack.operator_id,
                    pack.stacker_1_id,
                    pack.stacker_2_id,
                    pack.stacker_3_id,
                    pack.stacker_4_id,
                    pack.version,
                    pack.created_by,
                ),
            )
        except errors.UniqueViolation as e:
            domain_error = unique_violation_error(e, load_id=pack.load_id, code=pack.pack_id)
            if domain_error is None:
                raise
            raise domain_error from e
        return pack

    async def update(self, pack: Pack, expected_version: int) -> Pack:
        """Write pack fields if the stored version is ``expected_version``.

        Returns the pack with its incremented version.
        """
        try:
            cur = await self._conn.execute(
                "UPDATE lumber_packs SET pack_id=%s, length=%s, tally_board_feet=%s, "
                "actual_board_feet=%s, rip_yield=%s, rip_comments=%s, is_finished=%s, "
                "finished_at=%s, operator_id=%s, stacker_1_id=%s, stacker_2_id=%s, "
                "stacker_3_id=%s, stacker_4_id=%s, updated_at=%s, version = version + 1 "
                "WHERE id=%s AND version=%s RETURNING version",
                (
                    pack.pack_id,
                    pack.length,
                    pack.tally_board_feet,
                    pack.actual_board_feet,
                    pack.rip_yield,
                    pack.rip_comments,
                    pack.is_finished,
                    pack.finished_at,
                    pack.operator_id,
                    pack.stacker_1_id,
                    pack.stacker_2_id,
                    pack.stacker_3_id,
                    pack.stacker_4_id,
                    pack.updated_at,
                    pack.id,
                    expected_version,
                ),
            )
        except errors.UniqueViolation as e:
            domain_error = unique_violation_error(e, load_id=pack.load_id, code=pack.pack_id)
            if domain_error is None:
                raise
            raise domain_error from e

        r = await cur.fetchone()
        if not r:
            current = await self.get_by_id(pack.id)
            if current is None:
                raise NotFound("Pack", str(pack.id))
            raise Conflict(
                f"Pack {current.pack_id} changed since it was read",
                pack_id=current.pack_id,
                expected_version=expected_version,
                current_version=current.version,
            )
        pack.version = r[0]
        return pack

    async def delete(self, pack_id: UUID) -> None:
        """Delete pack."""
        await self._conn.execute("DELETE FROM lumber_packs WHERE id = %s", (pack_id,))
