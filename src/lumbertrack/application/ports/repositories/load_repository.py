"""Load repository port."""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from lumbertrack.domain.entities import Load
from lumbertrack.domain.services import LoadStageSnapshot, StageFlags


class LoadRepository(Protocol):
    """Port for load persistence."""

    async def get_by_id(self, load_id: UUID) -> Load | None: ...

    async def list_by_ids(self, load_ids: list[UUID]) -> list[Load]: ...

    async def get_by_code(self, code: str) -> Load | None: ...

    async def list_existing_codes(self, codes: list[str]) -> list[str]: ...

    async def list(
        self,
        *,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Load], str | None]: ...

    async def create(self, load: Load) -> Load: ...

    async def update(self, load: Load) -> None: ...

    async def delete(self, load_id: UUID) -> None: ...

    async def set_stage_flags(self, load_id: UUID, flags: StageFlags) -> None: ...

    async def get_stage_snapshot(self, load_id: UUID) -> LoadStageSnapshot | None: ...

    async def list_stage_snapshots(self) -> list[LoadStageSnapshot]: ...
