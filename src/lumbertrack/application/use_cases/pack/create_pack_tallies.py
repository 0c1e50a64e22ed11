"""Create pack tallies use case."""

import logging
from datetime import UTC, datetime
from uuid import UUID, uuid4

from lumbertrack.application.dto.pack_dto import PackTallyInput
from lumbertrack.application.guards import require_actor
from lumbertrack.application.use_cases.stage.refresh_stage_flags import (
    refresh_stage_flags,
)
from lumbertrack.domain.entities import Pack
from lumbertrack.domain.exceptions import DuplicatePackId, NotFound, ValidationError
from lumbertrack.domain.value_objects import positive_board_feet

logger = logging.getLogger(__name__)


class CreatePackTalliesUseCase:
    """Create tallied packs under a load item and refresh the load's stage flags."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, user_id: str | None, item_id: UUID, tallies: list[PackTallyInput]
    ) -> list[Pack]:
        actor = require_actor(user_id)
        if not tallies:
            raise ValidationError("At least one tally is required", field="tallies")
        for tally in tallies:
            positive_board_feet(tally.tally_board_feet, "tally_board_feet")

        async with self._uow_factory() as uow:
            item = await uow.items.get_by_id(item_id)
            if not item:
                raise NotFound("LoadItem", str(item_id))

            now = datetime.now(UTC)
            seen: set[str] = set()
            packs: list[Pack] = []
            for tally in tallies:
                pack_id = (tally.pack_id or "").strip()
                if not pack_id:
                    raise ValidationError("pack_id is required", field="pack_id")
                if pack_id in seen or await uow.packs.get_by_pack_id(item.load_id, pack_id):
                    raise DuplicatePackId(item.load_id, pack_id)
                seen.add(pack_id)
                pack = Pack(
                    id=uuid4(),
                    load_id=item.load_id,
                    item_id=item.id,
                    pack_id=pack_id,
                    length=tally.length,
                    tally_board_feet=tally.tally_board_feet,
                    created_by=actor,
                    created_at=now,
                    updated_at=now,
                )
                packs.append(await uow.packs.create(pack))

            await refresh_stage_flags(uow, item.load_id)

        logger.info("Created %d pack(s) on item %s", len(packs), item_id)
        return packs
