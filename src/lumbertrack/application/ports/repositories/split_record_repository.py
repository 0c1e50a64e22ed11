"""Split record repository port."""

from typing import Protocol

from lumbertrack.domain.entities import SplitRecord


class SplitRecordRepository(Protocol):
    """Port for completed split lookups by idempotency token."""

    async def get_by_token(self, token: str) -> SplitRecord | None: ...

    async def create(self, record: SplitRecord) -> SplitRecord: ...
