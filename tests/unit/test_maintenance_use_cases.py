"""Unit tests for integrity maintenance use cases."""

import pytest

from lumbertrack.application.use_cases.maintenance.check_data_health import (
    CheckDataHealthUseCase,
)
from lumbertrack.application.use_cases.maintenance.purge_lumber_data import (
    PurgeLumberDataUseCase,
)
from lumbertrack.application.use_cases.maintenance.repair_duplicate_packs import (
    RepairDuplicatePacksUseCase,
)
from lumbertrack.application.use_cases.maintenance.repair_orphans import RepairOrphansUseCase
from lumbertrack.domain.exceptions import PermissionDenied, ValidationError
from lumbertrack.domain.value_objects import PermissionAction, Severity

from tests.conftest import seed_item, seed_load, seed_pack

ADMIN = "admin-1"


@pytest.fixture
def legacy_store(store):
    """Rows written before the unique constraint: P-1 stored three times."""
    store.enforce_unique = False
    load = seed_load(store, "R-9001")
    item = seed_item(store, load)
    seed_pack(store, item, "P-1")
    seed_pack(store, item, "P-1")
    seed_pack(store, item, "P-1")
    seed_pack(store, item, "P-2")
    return store


# --- CheckDataHealthUseCase ---


@pytest.mark.asyncio
async def test_health_report_on_clean_data(store, uow_factory, mock_permission_checker) -> None:
    load = seed_load(store)
    seed_pack(store, seed_item(store, load))

    report = await CheckDataHealthUseCase(uow_factory, mock_permission_checker).execute(ADMIN)

    assert report.safe_to_migrate
    assert report.issues == [] and report.warnings == []
    assert report.row_counts["lumber_packs"] == 1
    mock_permission_checker.check.assert_awaited_once_with(ADMIN, PermissionAction.MAINTAIN)


@pytest.mark.asyncio
async def test_health_report_flags_duplicates(legacy_store, uow_factory, mock_permission_checker) -> None:
    report = await CheckDataHealthUseCase(uow_factory, mock_permission_checker).execute(ADMIN)

    assert not report.safe_to_migrate
    [issue] = report.issues
    assert issue.severity is Severity.HIGH
    assert issue.count == 1
    assert issue.details[0]["pack_id"] == "P-1"
    assert issue.details[0]["duplicate_count"] == 3
    [warning] = report.warnings
    assert warning.severity is Severity.MEDIUM


@pytest.mark.asyncio
async def test_health_report_counts_orphans(store, uow_factory, mock_permission_checker) -> None:
    load = seed_load(store)
    item = seed_item(store, load)
    seed_pack(store, item)
    del store.loads[load.id]

    report = await CheckDataHealthUseCase(uow_factory, mock_permission_checker).execute(ADMIN)

    assert report.orphan_items == 1
    assert report.orphan_packs == 0
    assert [w.severity for w in report.warnings] == [Severity.LOW]
    assert report.safe_to_migrate


@pytest.mark.asyncio
async def test_health_report_skips_missing_tables(store, uow_factory, mock_permission_checker) -> None:
    store.tables = ["lumber_loads"]
    report = await CheckDataHealthUseCase(uow_factory, mock_permission_checker).execute(ADMIN)
    assert report.tables == ["lumber_loads"]
    assert report.warnings == []


# --- RepairDuplicatePacksUseCase ---


@pytest.mark.asyncio
async def test_repair_duplicates_keeps_earliest_and_is_idempotent(
    legacy_store, uow_factory, mock_permission_checker
) -> None:
    keeper = min(legacy_store.packs.values(), key=lambda p: p.created_at)
    uc = RepairDuplicatePacksUseCase(uow_factory, mock_permission_checker)

    report = await uc.execute(ADMIN)

    assert report.rows_affected == 2
    assert {row.pack_id for row in report.actions[0].deleted} == {"P-1"}
    assert keeper.id in legacy_store.packs
    assert sorted(p.pack_id for p in legacy_store.packs.values()) == ["P-1", "P-2"]

    again = await uc.execute(ADMIN)
    assert again.rows_affected == 0


# --- RepairOrphansUseCase ---


@pytest.mark.asyncio
async def test_repair_orphans_removes_items_then_their_packs(
    store, uow_factory, mock_permission_checker
) -> None:
    kept = seed_load(store, "R-1")
    seed_pack(store, seed_item(store, kept))
    gone = seed_load(store, "R-2")
    seed_pack(store, seed_item(store, gone), "P-9")
    del store.loads[gone.id]

    report = await RepairOrphansUseCase(uow_factory, mock_permission_checker).execute(ADMIN)

    items_action, packs_action = report.actions
    assert items_action.rows_deleted == 1
    assert packs_action.rows_deleted == 1
    assert packs_action.deleted[0].pack_id == "P-9"
    assert len(store.items) == 1 and len(store.packs) == 1


# --- PurgeLumberDataUseCase ---


@pytest.mark.asyncio
async def test_purge_requires_confirmation(store, uow_factory, mock_permission_checker) -> None:
    seed_load(store)
    uc = PurgeLumberDataUseCase(uow_factory, mock_permission_checker)
    with pytest.raises(ValidationError):
        await uc.execute(ADMIN)
    assert len(store.loads) == 1


@pytest.mark.asyncio
async def test_purge_is_best_effort_per_table(store, uow_factory, mock_permission_checker) -> None:
    load = seed_load(store)
    seed_pack(store, seed_item(store, load))
    store.tables = ["lumber_packs", "lumber_load_items", "lumber_loads"]
    store.failing_tables = {"lumber_load_items": "permission denied for table"}

    report = await PurgeLumberDataUseCase(uow_factory, mock_permission_checker).execute(
        ADMIN, confirm=True
    )

    outcomes = {t.table: (t.status, t.reason) for t in report.tables}
    assert outcomes == {
        "lumber_split_records": ("skipped", "table does not exist"),
        "lumber_packs": ("truncated", None),
        "lumber_load_items": ("skipped", "permission denied for table"),
        "lumber_loads": ("truncated", None),
    }
    assert report.summary == "truncated 2 of 4 tables"
    assert store.packs == {} and store.loads == {}


@pytest.mark.parametrize(
    "use_case",
    [
        CheckDataHealthUseCase,
        RepairDuplicatePacksUseCase,
        RepairOrphansUseCase,
        PurgeLumberDataUseCase,
    ],
)
@pytest.mark.asyncio
async def test_maintenance_requires_permission(
    legacy_store, uow_factory, mock_permission_checker, use_case
) -> None:
    mock_permission_checker.check.return_value = False
    before = legacy_store.state()
    with pytest.raises(PermissionDenied):
        await use_case(uow_factory, mock_permission_checker).execute("clerk-2")
    assert legacy_store.state() == before
