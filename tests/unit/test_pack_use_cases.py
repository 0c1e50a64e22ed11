"""Unit tests for pack use cases: tallies, finish, split, reopen."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from lumbertrack.application.dto.pack_dto import CrewInput, PackTallyInput, PartialFinishInput
from lumbertrack.application.use_cases.pack.create_pack_tallies import CreatePackTalliesUseCase
from lumbertrack.application.use_cases.pack.delete_pack import DeletePackUseCase
from lumbertrack.application.use_cases.pack.finish_pack import FinishPackUseCase
from lumbertrack.application.use_cases.pack.list_packs import ListPacksUseCase
from lumbertrack.application.use_cases.pack.partial_finish_pack import PartialFinishPackUseCase
from lumbertrack.application.use_cases.pack.reopen_pack import ReopenPackUseCase
from lumbertrack.application.use_cases.pack.update_pack import UpdatePackUseCase
from lumbertrack.domain.exceptions import (
    Conflict,
    DuplicatePackId,
    InvalidSplitAmount,
    NotFound,
    PackFinished,
    Unauthorized,
    ValidationError,
)

from tests.conftest import seed_item, seed_load, seed_pack

USER = "ripper-7"


def _split(actual: str, version: int = 1, key: str = "key-1", **fields) -> PartialFinishInput:
    return PartialFinishInput(
        actual_board_feet=Decimal(actual),
        expected_version=version,
        idempotency_key=key,
        **fields,
    )


@pytest.fixture
def tallied(store):
    """Load R-1001 with one item and pack P-1 tallied at 500 board feet."""
    load = seed_load(store, "R-1001")
    item = seed_item(store, load, actual_footage=Decimal("500.00"))
    pack = seed_pack(store, item, "P-1", tally="500")
    return load, item, pack


# --- CreatePackTalliesUseCase ---


@pytest.mark.asyncio
async def test_create_tallies_sets_tallied_flag(store, uow_factory) -> None:
    load = seed_load(store)
    item = seed_item(store, load)
    uc = CreatePackTalliesUseCase(unit_of_work_factory=uow_factory)
    packs = await uc.execute(
        USER,
        item.id,
        [
            PackTallyInput(pack_id="A-1", length=12, tally_board_feet=Decimal("250.00")),
            PackTallyInput(pack_id=" A-2 ", length=10, tally_board_feet=Decimal("180.50")),
        ],
    )
    assert [p.pack_id for p in packs] == ["A-1", "A-2"]
    assert all(p.load_id == load.id and p.item_id == item.id for p in packs)
    assert store.loads[load.id].all_packs_tallied
    assert not store.loads[load.id].all_packs_finished


@pytest.mark.asyncio
async def test_create_tallies_rejects_duplicate_pack_id(store, uow_factory, tallied) -> None:
    load, item, _ = tallied
    uc = CreatePackTalliesUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(DuplicatePackId) as exc_info:
        await uc.execute(
            USER,
            item.id,
            [
                PackTallyInput(pack_id="P-2", length=8, tally_board_feet=Decimal("100")),
                PackTallyInput(pack_id="P-1", length=8, tally_board_feet=Decimal("100")),
            ],
        )
    assert exc_info.value.pack_id == "P-1"
    # P-2 was rolled back with the rest of the batch
    assert [p.pack_id for p in store.packs.values()] == ["P-1"]


@pytest.mark.asyncio
async def test_create_tallies_rejects_repeat_within_batch(store, uow_factory) -> None:
    item = seed_item(store, seed_load(store))
    uc = CreatePackTalliesUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(DuplicatePackId):
        await uc.execute(
            USER,
            item.id,
            [
                PackTallyInput(pack_id="B-1", length=8, tally_board_feet=None),
                PackTallyInput(pack_id="B-1", length=8, tally_board_feet=None),
            ],
        )
    assert store.packs == {}


@pytest.mark.asyncio
async def test_same_pack_id_allowed_in_different_loads(store, uow_factory, tallied) -> None:
    other_item = seed_item(store, seed_load(store, "R-1002"))
    uc = CreatePackTalliesUseCase(unit_of_work_factory=uow_factory)
    packs = await uc.execute(
        USER, other_item.id, [PackTallyInput(pack_id="P-1", length=8, tally_board_feet=None)]
    )
    assert packs[0].pack_id == "P-1"
    assert len(store.packs) == 2


@pytest.mark.asyncio
async def test_create_tallies_unknown_item(uow_factory) -> None:
    uc = CreatePackTalliesUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(NotFound):
        await uc.execute(USER, uuid4(), [PackTallyInput(pack_id="X", length=1, tally_board_feet=None)])


# --- PartialFinishPackUseCase ---


@pytest.mark.asyncio
async def test_partial_finish_splits_and_conserves(store, uow_factory, tallied) -> None:
    load, item, pack = tallied
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)

    result = await uc.execute(
        USER, pack.id, _split("300", crew=CrewInput(operator_id="op-3", stacker_1_id="st-1"))
    )

    finished, remainder = result.finished_pack, result.remainder_pack
    assert not result.replayed
    assert finished.id == pack.id
    assert finished.tally_board_feet == finished.actual_board_feet == Decimal("300")
    assert finished.rip_yield == Decimal("100.00")
    assert finished.is_finished and finished.finished_at == date.today()
    assert finished.operator_id == "op-3" and finished.stacker_1_id == "st-1"
    assert finished.version == 2

    assert remainder.pack_id == "P-1*2"
    assert remainder.load_id == load.id and remainder.item_id == item.id
    assert remainder.tally_board_feet == Decimal("200.00")
    assert not remainder.is_finished
    assert finished.tally_board_feet + remainder.tally_board_feet == Decimal("500")

    record = store.split_records["key-1"]
    assert record.remainder_pack_id == remainder.id
    assert store.loads[load.id].all_packs_tallied
    assert not store.loads[load.id].all_packs_finished


@pytest.mark.asyncio
async def test_partial_finish_lineage_continues(store, uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    first = await uc.execute(USER, pack.id, _split("300", key="k1"))
    second = await uc.execute(USER, first.remainder_pack.id, _split("150", key="k2"))
    assert second.remainder_pack.pack_id == "P-1*3"
    assert second.remainder_pack.tally_board_feet == Decimal("50.00")


@pytest.mark.asyncio
async def test_partial_finish_replays_same_key(store, uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    first = await uc.execute(USER, pack.id, _split("300"))
    again = await uc.execute(USER, pack.id, _split("300"))

    assert again.replayed
    assert again.remainder_pack.id == first.remainder_pack.id
    assert len(store.packs) == 2


@pytest.mark.asyncio
async def test_partial_finish_key_reused_for_other_pack(store, uow_factory, tallied) -> None:
    _, item, pack = tallied
    other = seed_pack(store, item, "P-9", tally="400")
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    await uc.execute(USER, pack.id, _split("300"))
    with pytest.raises(Conflict):
        await uc.execute(USER, other.id, _split("100"))
    assert not store.packs[other.id].is_finished


@pytest.mark.asyncio
async def test_partial_finish_stale_version(store, uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(Conflict) as exc_info:
        await uc.execute(USER, pack.id, _split("300", version=4))
    assert exc_info.value.details["current_version"] == 1
    assert len(store.packs) == 1


@pytest.mark.parametrize("actual", ["0", "-5", "500", "650"])
@pytest.mark.asyncio
async def test_partial_finish_rejects_amounts_outside_tally(
    store, uow_factory, tallied, actual
) -> None:
    _, _, pack = tallied
    before = store.state()
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(InvalidSplitAmount):
        await uc.execute(USER, pack.id, _split(actual))
    assert store.state() == before


@pytest.mark.asyncio
async def test_partial_finish_uses_tally_override(store, uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    result = await uc.execute(
        USER, pack.id, _split("300", tally_board_feet=Decimal("520.00"))
    )
    assert result.remainder_pack.tally_board_feet == Decimal("220.00")


@pytest.mark.asyncio
async def test_partial_finish_without_tally(store, uow_factory) -> None:
    item = seed_item(store, seed_load(store))
    pack = seed_pack(store, item, "N-1", tally=None)
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(InvalidSplitAmount):
        await uc.execute(USER, pack.id, _split("10"))


@pytest.mark.asyncio
async def test_partial_finish_remainder_code_taken(store, uow_factory, tallied) -> None:
    _, item, pack = tallied
    seed_pack(store, item, "P-1*2", tally="10")
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(DuplicatePackId):
        await uc.execute(USER, pack.id, _split("300"))
    assert store.packs[pack.id].tally_board_feet == Decimal("500")


@pytest.mark.asyncio
@pytest.mark.parametrize("failing", ["packs.update", "split_records.create"])
async def test_partial_finish_failure_rolls_back_remainder(
    store, uow_factory, tallied, failing
) -> None:
    load, _, pack = tallied
    store.fail_after[failing] = 0
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)

    with pytest.raises(RuntimeError):
        await uc.execute(USER, pack.id, _split("300"))

    assert list(store.packs) == [pack.id]
    original = store.packs[pack.id]
    assert original.tally_board_feet == Decimal("500")
    assert not original.is_finished
    assert original.version == 1
    assert store.split_records == {}
    assert store.rollbacks == 1
    assert store.commits == 0

    # the same key succeeds once the failure clears
    del store.fail_after[failing]
    result = await uc.execute(USER, pack.id, _split("300"))
    assert result.remainder_pack.tally_board_feet == Decimal("200.00")
    assert not result.replayed
    assert store.loads[load.id].all_packs_tallied


@pytest.mark.asyncio
async def test_partial_finish_requires_key_and_caller(uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(ValidationError):
        await uc.execute(USER, pack.id, _split("300", key=" "))
    with pytest.raises(Unauthorized):
        await uc.execute(None, pack.id, _split("300"))


# --- FinishPackUseCase / ReopenPackUseCase ---


@pytest.mark.asyncio
async def test_finish_defaults_actual_to_tally(store, uow_factory, tallied) -> None:
    load, _, pack = tallied
    uc = FinishPackUseCase(unit_of_work_factory=uow_factory)
    finished = await uc.execute(USER, pack.id, expected_version=1)
    assert finished.actual_board_feet == Decimal("500")
    assert finished.rip_yield == Decimal("100.00")
    assert store.loads[load.id].all_packs_finished


@pytest.mark.asyncio
async def test_finish_computes_yield(store, uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = FinishPackUseCase(unit_of_work_factory=uow_factory)
    finished = await uc.execute(
        USER, pack.id, expected_version=1, actual_board_feet=Decimal("450.00")
    )
    assert finished.rip_yield == Decimal("90.00")


@pytest.mark.asyncio
async def test_finished_pack_is_frozen_until_reopened(store, uow_factory, tallied) -> None:
    load, _, pack = tallied
    await FinishPackUseCase(unit_of_work_factory=uow_factory).execute(
        USER, pack.id, expected_version=1
    )

    update = UpdatePackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(PackFinished):
        await update.execute(USER, pack.id, {"rip_comments": "knots"})
    with pytest.raises(PackFinished):
        await DeletePackUseCase(unit_of_work_factory=uow_factory).execute(USER, pack.id)
    with pytest.raises(PackFinished):
        await PartialFinishPackUseCase(unit_of_work_factory=uow_factory).execute(
            USER, pack.id, _split("100", version=2)
        )

    reopened = await ReopenPackUseCase(unit_of_work_factory=uow_factory).execute(
        USER, pack.id, expected_version=2
    )
    assert not reopened.is_finished and reopened.finished_at is None
    assert not store.loads[load.id].all_packs_finished

    updated = await update.execute(USER, pack.id, {"rip_comments": "knots"})
    assert updated.rip_comments == "knots"


@pytest.mark.asyncio
async def test_reopen_requires_finished_pack(uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = ReopenPackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(ValidationError):
        await uc.execute(USER, pack.id, expected_version=1)


# --- UpdatePackUseCase / DeletePackUseCase / ListPacksUseCase ---


@pytest.mark.asyncio
async def test_update_recomputes_yield_and_bumps_version(store, uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = UpdatePackUseCase(unit_of_work_factory=uow_factory)
    updated = await uc.execute(
        USER, pack.id, {"actual_board_feet": Decimal("400.00")}, expected_version=1
    )
    assert updated.rip_yield == Decimal("80.00")
    assert store.packs[pack.id].version == 2
    with pytest.raises(Conflict):
        await uc.execute(USER, pack.id, {"length": 14}, expected_version=1)


@pytest.mark.asyncio
async def test_update_rename_to_taken_pack_id(store, uow_factory, tallied) -> None:
    _, item, pack = tallied
    seed_pack(store, item, "P-2")
    uc = UpdatePackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(DuplicatePackId):
        await uc.execute(USER, pack.id, {"pack_id": "P-2"})
    assert store.packs[pack.id].pack_id == "P-1"


@pytest.mark.asyncio
async def test_update_marking_finished_stamps_date(store, uow_factory, tallied) -> None:
    load, _, pack = tallied
    uc = UpdatePackUseCase(unit_of_work_factory=uow_factory)
    updated = await uc.execute(USER, pack.id, {"is_finished": True})
    assert updated.finished_at == date.today()
    assert store.loads[load.id].all_packs_finished


@pytest.mark.asyncio
async def test_update_rejects_reparenting(uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = UpdatePackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(ValidationError):
        await uc.execute(USER, pack.id, {"load_id": uuid4()})


@pytest.mark.asyncio
async def test_delete_pack_refreshes_flags(store, uow_factory, tallied) -> None:
    load, _, pack = tallied
    store.loads[load.id].all_packs_tallied = True
    await DeletePackUseCase(unit_of_work_factory=uow_factory).execute(USER, pack.id)
    assert store.packs == {}
    assert not store.loads[load.id].all_packs_tallied


@pytest.mark.asyncio
async def test_list_packs(store, uow_factory, tallied) -> None:
    load, item, _ = tallied
    seed_pack(store, item, "P-2")
    packs = await ListPacksUseCase(unit_of_work_factory=uow_factory).execute(load.id)
    assert [p.pack_id for p in packs] == ["P-1", "P-2"]
    with pytest.raises(NotFound):
        await ListPacksUseCase(unit_of_work_factory=uow_factory).execute(uuid4())


# --- Non-positive board feet ---


@pytest.mark.asyncio
@pytest.mark.parametrize("tally", ["0", "-5"])
async def test_create_tallies_rejects_non_positive_tally(store, uow_factory, tally) -> None:
    item = seed_item(store, seed_load(store))
    uc = CreatePackTalliesUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(ValidationError) as exc_info:
        await uc.execute(
            USER,
            item.id,
            [
                PackTallyInput(pack_id="C-1", length=8, tally_board_feet=Decimal("100")),
                PackTallyInput(pack_id="C-2", length=8, tally_board_feet=Decimal(tally)),
            ],
        )
    assert exc_info.value.field == "tally_board_feet"
    assert store.packs == {}


@pytest.mark.asyncio
async def test_finish_rejects_zero_actual(store, uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = FinishPackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(ValidationError) as exc_info:
        await uc.execute(USER, pack.id, expected_version=1, actual_board_feet=Decimal("0"))
    assert exc_info.value.field == "actual_board_feet"
    assert not store.packs[pack.id].is_finished


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "changes",
    [{"actual_board_feet": Decimal("-1")}, {"tally_board_feet": Decimal("0")}],
)
async def test_update_rejects_non_positive_board_feet(
    store, uow_factory, tallied, changes
) -> None:
    _, _, pack = tallied
    uc = UpdatePackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(ValidationError):
        await uc.execute(USER, pack.id, changes)
    assert store.packs[pack.id].tally_board_feet == Decimal("500")
    assert store.packs[pack.id].actual_board_feet is None


@pytest.mark.asyncio
async def test_partial_finish_idempotency_key_length(store, uow_factory, tallied) -> None:
    _, _, pack = tallied
    uc = PartialFinishPackUseCase(unit_of_work_factory=uow_factory)
    with pytest.raises(ValidationError) as exc_info:
        await uc.execute(USER, pack.id, _split("300", key="k" * 256))
    assert exc_info.value.field == "idempotency_key"

    result = await uc.execute(USER, pack.id, _split("300", key="k" * 255))
    assert store.split_records["k" * 255].remainder_pack_id == result.remainder_pack.id
