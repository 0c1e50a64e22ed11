"""Pytest fixtures for LumberTrack tests."""

from __future__ import annotations

import copy
from collections import Counter
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

import pytest

from lumbertrack.application.dto.maintenance_dto import DeletedRow, DuplicatePackGroup
from lumbertrack.domain.entities import Load, LoadItem, Pack, SplitRecord
from lumbertrack.domain.exceptions import Conflict, DuplicateLoadCode, DuplicatePackId, NotFound
from lumbertrack.domain.services import LoadStageSnapshot, StageFlags
from lumbertrack.domain.value_objects import Thickness

LUMBER_TABLES = [
    "lumber_load_items",
    "lumber_loads",
    "lumber_packs",
    "lumber_split_records",
]


@dataclass
class FakeStore:
    """Shared in-memory tables behind every FakeUnitOfWork of a test.

    ``enforce_unique=False`` lets tests seed legacy duplicates the way rows
    written before the unique constraint look. ``fail_after`` makes an
    operation raise once it has succeeded the given number of times, and
    ``calls`` counts every recorded operation.
    """

    loads: dict[UUID, Load] = field(default_factory=dict)
    items: dict[UUID, LoadItem] = field(default_factory=dict)
    packs: dict[UUID, Pack] = field(default_factory=dict)
    split_records: dict[str, SplitRecord] = field(default_factory=dict)
    enforce_unique: bool = True
    tables: list[str] = field(default_factory=lambda: list(LUMBER_TABLES))
    failing_tables: dict[str, str] = field(default_factory=dict)
    commits: int = 0
    rollbacks: int = 0
    fail_after: dict[str, int] = field(default_factory=dict)
    calls: Counter = field(default_factory=Counter)

    def state(self) -> tuple:
        return copy.deepcopy((self.loads, self.items, self.packs, self.split_records))

    def restore(self, state: tuple) -> None:
        self.loads, self.items, self.packs, self.split_records = state

    def record(self, operation: str) -> None:
        self.calls[operation] += 1
        if operation not in self.fail_after:
            return
        if self.fail_after[operation] <= 0:
            raise RuntimeError(f"{operation} failed")
        self.fail_after[operation] -= 1


# --- Fake repositories ---


class FakeLoadRepository:
    """In-memory load repository."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def get_by_id(self, load_id: UUID) -> Load | None:
        self._store.record("loads.get_by_id")
        load = self._store.loads.get(load_id)
        return replace(load) if load else None

    async def list_by_ids(self, load_ids: list[UUID]) -> list[Load]:
        self._store.record("loads.list_by_ids")
        return [replace(self._store.loads[i]) for i in load_ids if i in self._store.loads]

    async def get_by_code(self, code: str) -> Load | None:
        for load in self._store.loads.values():
            if load.code == code:
                return replace(load)
        return None

    async def list_existing_codes(self, codes: list[str]) -> list[str]:
        stored = {load.code for load in self._store.loads.values()}
        return sorted(set(codes) & stored)

    async def list(
        self,
        *,
        cursor: str | None = None,
        limit: int = 20,
    ) -> tuple[list[Load], str | None]:
        loads = sorted(self._store.loads.values(), key=lambda load: load.id)
        if cursor:
            loads = [load for load in loads if load.id > UUID(cursor)]
        page = loads[: limit + 1]
        next_cursor = str(page[limit].id) if len(page) > limit else None
        return [replace(load) for load in page[:limit]], next_cursor

    async def create(self, load: Load) -> Load:
        self._store.record("loads.create")
        if self._store.enforce_unique and any(
            other.code == load.code for other in self._store.loads.values()
        ):
            raise DuplicateLoadCode([load.code])
        self._store.loads[load.id] = replace(load)
        return load

    async def update(self, load: Load) -> None:
        stored = self._store.loads[load.id]
        self._store.loads[load.id] = replace(
            load,
            all_packs_tallied=stored.all_packs_tallied,
            all_packs_finished=stored.all_packs_finished,
        )

    async def delete(self, load_id: UUID) -> None:
        for pack_id in [p.id for p in self._store.packs.values() if p.load_id == load_id]:
            del self._store.packs[pack_id]
        for item_id in [i.id for i in self._store.items.values() if i.load_id == load_id]:
            del self._store.items[item_id]
        self._store.loads.pop(load_id, None)

    async def set_stage_flags(self, load_id: UUID, flags: StageFlags) -> None:
        load = self._store.loads[load_id]
        load.all_packs_tallied = flags.all_packs_tallied
        load.all_packs_finished = flags.all_packs_finished

    def _snapshot(self, load: Load) -> LoadStageSnapshot:
        items = [i for i in self._store.items.values() if i.load_id == load.id]
        packs = [p for p in self._store.packs.values() if p.load_id == load.id]
        packed_items = {p.item_id for p in packs}
        return LoadStageSnapshot(
            load_id=load.id,
            code=load.code,
            all_packs_tallied=load.all_packs_tallied,
            all_packs_finished=load.all_packs_finished,
            po_generated=load.po_generated,
            is_paid=load.is_paid,
            actual_arrival_date=load.actual_arrival_date,
            item_count=len(items),
            items_with_actual_footage=sum(1 for i in items if i.actual_footage is not None),
            items_with_packs=sum(1 for i in items if i.id in packed_items),
            pack_count=len(packs),
            finished_pack_count=sum(1 for p in packs if p.is_finished),
        )

    async def get_stage_snapshot(self, load_id: UUID) -> LoadStageSnapshot | None:
        load = self._store.loads.get(load_id)
        return self._snapshot(load) if load else None

    async def list_stage_snapshots(self) -> list[LoadStageSnapshot]:
        loads = sorted(self._store.loads.values(), key=lambda load: load.created_at)
        return [self._snapshot(load) for load in loads]


class FakeLoadItemRepository:
    """In-memory load item repository."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def get_by_id(self, item_id: UUID) -> LoadItem | None:
        item = self._store.items.get(item_id)
        return replace(item) if item else None

    async def list_by_load(self, load_id: UUID) -> list[LoadItem]:
        self._store.record("items.list_by_load")
        items = [i for i in self._store.items.values() if i.load_id == load_id]
        return [replace(i) for i in sorted(items, key=lambda i: i.created_at)]

    async def list_by_loads(self, load_ids: list[UUID]) -> list[LoadItem]:
        self._store.record("items.list_by_loads")
        wanted = set(load_ids)
        items = [i for i in self._store.items.values() if i.load_id in wanted]
        return [replace(i) for i in sorted(items, key=lambda i: i.created_at)]

    async def create_batch(self, items: list[LoadItem]) -> list[LoadItem]:
        self._store.record("items.create_batch")
        for item in items:
            self._store.items[item.id] = replace(item)
        return items

    async def update(self, item: LoadItem) -> None:
        self._store.items[item.id] = replace(item)


class FakePackRepository:
    """In-memory pack repository with the (load, pack_id) constraint and versioning."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    def _taken(self, pack: Pack) -> bool:
        return self._store.enforce_unique and any(
            other.load_id == pack.load_id and other.pack_id == pack.pack_id and other.id != pack.id
            for other in self._store.packs.values()
        )

    async def get_by_id(self, pack_id: UUID) -> Pack | None:
        pack = self._store.packs.get(pack_id)
        return replace(pack) if pack else None

    async def get_by_pack_id(self, load_id: UUID, pack_id: str) -> Pack | None:
        matches = [
            p
            for p in self._store.packs.values()
            if p.load_id == load_id and p.pack_id == pack_id
        ]
        if not matches:
            return None
        return replace(min(matches, key=lambda p: p.created_at))

    async def list_by_load(self, load_id: UUID) -> list[Pack]:
        packs = [p for p in self._store.packs.values() if p.load_id == load_id]
        return [replace(p) for p in sorted(packs, key=lambda p: p.created_at)]

    async def create(self, pack: Pack) -> Pack:
        self._store.record("packs.create")
        if self._taken(pack):
            raise DuplicatePackId(pack.load_id, pack.pack_id)
        self._store.packs[pack.id] = replace(pack)
        return pack

    async def update(self, pack: Pack, expected_version: int) -> Pack:
        self._store.record("packs.update")
        stored = self._store.packs.get(pack.id)
        if stored is None:
            raise NotFound("Pack", str(pack.id))
        if stored.version != expected_version:
            raise Conflict(
                f"Pack {stored.pack_id} changed since it was read",
                pack_id=stored.pack_id,
                expected_version=expected_version,
                current_version=stored.version,
            )
        if self._taken(pack):
            raise DuplicatePackId(pack.load_id, pack.pack_id)
        pack.version = stored.version + 1
        self._store.packs[pack.id] = replace(pack)
        return pack

    async def delete(self, pack_id: UUID) -> None:
        self._store.packs.pop(pack_id, None)


class FakeSplitRecordRepository:
    """In-memory split records keyed by token."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    async def get_by_token(self, token: str) -> SplitRecord | None:
        return self._store.split_records.get(token)

    async def create(self, record: SplitRecord) -> SplitRecord:
        self._store.record("split_records.create")
        self._store.split_records[record.token] = record
        return record


class FakeMaintenanceRepository:
    """In-memory integrity scans over the shared store."""

    def __init__(self, store: FakeStore) -> None:
        self._store = store

    def _rows(self, table: str) -> dict:
        return {
            "lumber_loads": self._store.loads,
            "lumber_load_items": self._store.items,
            "lumber_packs": self._store.packs,
            "lumber_split_records": self._store.split_records,
        }[table]

    async def list_tables(self) -> list[str]:
        return sorted(self._store.tables)

    async def count_rows(self, table: str) -> int:
        return len(self._rows(table))

    async def has_pack_unique_constraint(self) -> bool:
        return self._store.enforce_unique

    def _groups(self) -> dict[tuple[UUID, str], list[Pack]]:
        groups: dict[tuple[UUID, str], list[Pack]] = {}
        for pack in self._store.packs.values():
            groups.setdefault((pack.load_id, pack.pack_id), []).append(pack)
        return groups

    async def find_duplicate_pack_groups(self) -> list[DuplicatePackGroup]:
        return [
            DuplicatePackGroup(load_id=load_id, pack_id=pack_id, count=len(packs))
            for (load_id, pack_id), packs in self._groups().items()
            if len(packs) > 1
        ]

    async def count_orphan_items(self) -> int:
        return sum(1 for i in self._store.items.values() if i.load_id not in self._store.loads)

    async def count_orphan_packs(self) -> int:
        return sum(1 for p in self._store.packs.values() if p.item_id not in self._store.items)

    async def delete_duplicate_packs(self) -> list[DeletedRow]:
        deleted = []
        for packs in self._groups().values():
            for pack in sorted(packs, key=lambda p: p.created_at)[1:]:
                del self._store.packs[pack.id]
                deleted.append(
                    DeletedRow("lumber_packs", pack.id, load_id=pack.load_id, pack_id=pack.pack_id)
                )
        return deleted

    async def delete_orphan_items(self) -> list[DeletedRow]:
        orphans = [i for i in self._store.items.values() if i.load_id not in self._store.loads]
        for item in orphans:
            del self._store.items[item.id]
        return [DeletedRow("lumber_load_items", i.id, load_id=i.load_id) for i in orphans]

    async def delete_orphan_packs(self) -> list[DeletedRow]:
        orphans = [p for p in self._store.packs.values() if p.item_id not in self._store.items]
        for pack in orphans:
            del self._store.packs[pack.id]
        return [
            DeletedRow("lumber_packs", p.id, load_id=p.load_id, pack_id=p.pack_id)
            for p in orphans
        ]

    async def truncate(self, table: str) -> str | None:
        if table in self._store.failing_tables:
            return self._store.failing_tables[table]
        self._rows(table).clear()
        return None


class FakeUnitOfWork:
    """In-memory Unit of Work; rollback restores the store as it was on entry."""

    def __init__(self, store: FakeStore | None = None) -> None:
        self.store = store or FakeStore()
        self._state = self.store.state()
        self.loads = FakeLoadRepository(self.store)
        self.items = FakeLoadItemRepository(self.store)
        self.packs = FakePackRepository(self.store)
        self.split_records = FakeSplitRecordRepository(self.store)
        self.maintenance = FakeMaintenanceRepository(self.store)

    async def commit(self) -> None:
        self.store.commits += 1
        self._state = self.store.state()

    async def rollback(self) -> None:
        self.store.rollbacks += 1
        self.store.restore(self._state)


def make_uow_factory(store: FakeStore):
    """Factory over a shared store: commit on success, rollback on any error."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[FakeUnitOfWork]:
        uow = FakeUnitOfWork(store)
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise

    return factory


# --- Seed helpers ---

_CLOCK = datetime(2026, 3, 2, 8, 0, tzinfo=UTC)


def _tick(store: FakeStore) -> datetime:
    rows = len(store.loads) + len(store.items) + len(store.packs)
    return _CLOCK + timedelta(seconds=rows)


def seed_load(store: FakeStore, code: str = "R-1001", **fields) -> Load:
    now = _tick(store)
    load = Load(
        id=uuid4(), code=code, supplier_id=uuid4(), created_at=now, updated_at=now, **fields
    )
    store.loads[load.id] = load
    return load


def seed_item(store: FakeStore, load: Load, **fields) -> LoadItem:
    now = _tick(store)
    values = {"species": "Red Oak", "grade": "FAS", "thickness": Thickness.FOUR_QUARTER}
    values.update(fields)
    item = LoadItem(id=uuid4(), load_id=load.id, created_at=now, updated_at=now, **values)
    store.items[item.id] = item
    return item


def seed_pack(
    store: FakeStore,
    item: LoadItem,
    pack_id: str = "P-1",
    tally: str | None = "500",
    **fields,
) -> Pack:
    now = _tick(store)
    pack = Pack(
        id=uuid4(),
        load_id=item.load_id,
        item_id=item.id,
        pack_id=pack_id,
        tally_board_feet=Decimal(tally) if tally is not None else None,
        created_at=now,
        updated_at=now,
        **fields,
    )
    store.packs[pack.id] = pack
    return pack


# --- Fixtures ---


@pytest.fixture
def store() -> FakeStore:
    """Fresh in-memory tables for each test."""
    return FakeStore()


@pytest.fixture
def uow_factory(store: FakeStore):
    """UoW factory over the test's store."""
    return make_uow_factory(store)


@pytest.fixture
def mock_permission_checker():
    """AsyncMock for PermissionChecker - returns True by default."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    mock.check.return_value = True
    return mock
