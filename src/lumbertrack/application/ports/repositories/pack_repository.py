"""Pack repository port."""

from typing import Protocol
from uuid import UUID

from lumbertrack.domain.entities import Pack


class PackRepository(Protocol):
    """Port for pack persistence.

    ``create`` and ``update`` raise DuplicatePackId when (load, pack_id) is
    taken; ``update`` raises Conflict when the stored version differs from
    ``expected_version``.
    """

    async def get_by_id(self, pack_id: UUID) -> Pack | None: ...

    async def get_by_pack_id(self, load_id: UUID, pack_id: str) -> Pack | None: ...

    async def list_by_load(self, load_id: UUID) -> list[Pack]: ...

    async def create(self, pack: Pack) -> Pack: ...

    async def update(self, pack: Pack, expected_version: int) -> Pack: ...

    async def delete(self, pack_id: UUID) -> None: ...
