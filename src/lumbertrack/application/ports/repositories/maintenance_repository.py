"""Maintenance repository port - integrity scans and repairs."""

from typing import Protocol

from lumbertrack.application.dto.maintenance_dto import DeletedRow, DuplicatePackGroup


class MaintenanceRepository(Protocol):
    """Port for out-of-band integrity checks across the subsystem tables."""

    async def list_tables(self) -> list[str]: ...

    async def count_rows(self, table: str) -> int: ...

    async def has_pack_unique_constraint(self) -> bool: ...

    async def find_duplicate_pack_groups(self) -> list[DuplicatePackGroup]: ...

    async def count_orphan_items(self) -> int: ...

    async def count_orphan_packs(self) -> int: ...

    async def delete_duplicate_packs(self) -> list[DeletedRow]: ...

    async def delete_orphan_items(self) -> list[DeletedRow]: ...

    async def delete_orphan_packs(self) -> list[DeletedRow]: ...

    async def truncate(self, table: str) -> str | None:
        """Empty ``table``; return the failure reason instead of raising."""
        ...
