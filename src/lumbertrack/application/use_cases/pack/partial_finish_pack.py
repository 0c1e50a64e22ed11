"""Partial finish use case - split a pack into a finished part and a remainder."""

import logging
from datetime import UTC, date, datetime
from decimal import Decimal
from uuid import UUID, uuid4

from lumbertrack.application.dto.pack_dto import (
    CrewInput,
    PartialFinishInput,
    PartialFinishOutput,
)
from lumbertrack.application.guards import require_actor
from lumbertrack.application.use_cases.stage.refresh_stage_flags import (
    refresh_stage_flags,
)
from lumbertrack.domain.entities import Pack, SplitRecord
from lumbertrack.domain.exceptions import (
    Conflict,
    DuplicatePackId,
    NotFound,
    PackFinished,
    ValidationError,
)
from lumbertrack.domain.value_objects import next_pack_code, split_board_feet

logger = logging.getLogger(__name__)

FULL_YIELD = Decimal("100.00")
MAX_IDEMPOTENCY_KEY_LENGTH = 255


class PartialFinishPackUseCase:
    """Finish part of a pack and move the rest into a new remainder pack.

    The original pack collapses to the finished amount (tally equals actual,
    100% yield) and the remainder is created under the same item with the next
    identifier in the pack's lineage. Both writes and the split record share
    one transaction, so the tally before the split always equals finished plus
    remainder.

    The caller's idempotency key makes retries safe: a key already used for
    this pack returns the stored result, a key used for another pack is a
    Conflict.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        user_id: str | None,
        pack_id: UUID,
        input_data: PartialFinishInput,
    ) -> PartialFinishOutput:
        actor = require_actor(user_id)
        token = (input_data.idempotency_key or "").strip()
        if not token:
            raise ValidationError("Idempotency key is required", field="idempotency_key")
        if len(token) > MAX_IDEMPOTENCY_KEY_LENGTH:
            raise ValidationError(
                f"Idempotency key must be at most {MAX_IDEMPOTENCY_KEY_LENGTH} characters",
                field="idempotency_key",
            )

        async with self._uow_factory() as uow:
            record = await uow.split_records.get_by_token(token)
            if record:
                if record.pack_id != pack_id:
                    raise Conflict(
                        "Idempotency key was already used for another pack",
                        idempotency_key=token,
                        pack_id=str(record.pack_id),
                    )
                return await self._replay(uow, record)

            pack = await uow.packs.get_by_id(pack_id)
            if not pack:
                raise NotFound("Pack", str(pack_id))
            if pack.version != input_data.expected_version:
                raise Conflict(
                    f"Pack {pack.pack_id} changed since it was read",
                    pack_id=pack.pack_id,
                    expected_version=input_data.expected_version,
                    current_version=pack.version,
                )
            if pack.is_finished:
                raise PackFinished(pack.pack_id)

            tally = input_data.tally_board_feet
            if tally is None:
                tally = pack.tally_board_feet or Decimal("0")
            finished = input_data.actual_board_feet
            remainder_amount = split_board_feet(tally, finished)

            remainder_code = next_pack_code(pack.pack_id)
            if await uow.packs.get_by_pack_id(pack.load_id, remainder_code):
                raise DuplicatePackId(pack.load_id, remainder_code)

            now = datetime.now(UTC)
            remainder = await uow.packs.create(
                Pack(
                    id=uuid4(),
                    load_id=pack.load_id,
                    item_id=pack.item_id,
                    pack_id=remainder_code,
                    length=pack.length,
                    tally_board_feet=remainder_amount,
                    created_by=actor,
                    created_at=now,
                    updated_at=now,
                )
            )

            pack.tally_board_feet = finished
            pack.actual_board_feet = finished
            pack.rip_yield = FULL_YIELD
            pack.is_finished = True
            pack.finished_at = date.today()
            (input_data.crew or CrewInput()).apply_to(pack)
            pack.updated_at = now
            finished_pack = await uow.packs.update(
                pack, expected_version=input_data.expected_version
            )

            await uow.split_records.create(
                SplitRecord(
                    token=token,
                    pack_id=finished_pack.id,
                    remainder_pack_id=remainder.id,
                    finished_board_feet=finished,
                    remainder_board_feet=remainder_amount,
                    created_at=now,
                    created_by=actor,
                )
            )
            await refresh_stage_flags(uow, pack.load_id)

        logger.info(
            "Pack %s split: %s finished, %s remaining as %s",
            finished_pack.pack_id,
            finished,
            remainder_amount,
            remainder.pack_id,
        )
        return PartialFinishOutput(finished_pack=finished_pack, remainder_pack=remainder)

    async def _replay(self, uow, record: SplitRecord) -> PartialFinishOutput:
        finished_pack = await uow.packs.get_by_id(record.pack_id)
        remainder = await uow.packs.get_by_id(record.remainder_pack_id)
        if not finished_pack or not remainder:
            raise Conflict(
                "Packs of a previous split with this idempotency key no longer exist",
                idempotency_key=record.token,
            )
        return PartialFinishOutput(
            finished_pack=finished_pack, remainder_pack=remainder, replayed=True
        )
