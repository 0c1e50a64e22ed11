"""PostgreSQL split record repository implementation."""

from psycopg import AsyncConnection

from lumbertrack.domain.entities import SplitRecord


class PostgresSplitRecordRepository:
    """Split record repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_token(self, token: str) -> SplitRecord | None:
        """Get the split completed under an idempotency token."""
        cur = await self._conn.execute(
            "SELECT token, pack_id, remainder_pack_id, finished_board_feet, "
            "remainder_board_feet, created_at, created_by "
            "FROM lumber_split_records WHERE token = %s",
            (token,),
        )
        r = await cur.fetchone()
        if not r:
            return None
        return SplitRecord(
            token=r[0],
            pack_id=r[1],
            remainder_pack_id=r[2],
            finished_board_feet=r[3],
            remainder_board_feet=r[4],
            created_at=r[5],
            created_by=r[6],
        )

    async def create(self, record: SplitRecord) -> SplitRecord:
        """Create split record."""
        await self._conn.execute(
            "INSERT INTO lumber_split_records (token, pack_id, remainder_pack_id, "
            "finished_board_feet, remainder_board_feet, created_at, created_by) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s)",
            (
                record.token,
                record.pack_id,
                record.remainder_pack_id,
                record.finished_board_feet,
                record.remainder_board_feet,
                record.created_at,
                record.created_by,
            ),
        )
        return record
