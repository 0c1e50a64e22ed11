"""Load item repository port."""

from typing import Protocol
from uuid import UUID

from lumbertrack.domain.entities import LoadItem


class LoadItemRepository(Protocol):
    """Port for load item persistence."""

    async def get_by_id(self, item_id: UUID) -> LoadItem | None: ...

    async def list_by_load(self, load_id: UUID) -> list[LoadItem]: ...

    async def list_by_loads(self, load_ids: list[UUID]) -> list[LoadItem]: ...

    async def create_batch(self, items: list[LoadItem]) -> list[LoadItem]: ...

    async def update(self, item: LoadItem) -> None: ...
