"""Reopen pack use case."""

import logging
from datetime import UTC, datetime
from uuid import UUID

from lumbertrack.application.guards import require_actor
from lumbertrack.application.use_cases.stage.refresh_stage_flags import (
    refresh_stage_flags,
)
from lumbertrack.domain.entities import Pack
from lumbertrack.domain.exceptions import Conflict, NotFound, ValidationError

logger = logging.getLogger(__name__)


class ReopenPackUseCase:
    """Unfreeze a finished pack so its rip data can be corrected."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str | None, pack_id: UUID, expected_version: int) -> Pack:
        actor = require_actor(user_id)
        async with self._uow_factory() as uow:
            pack = await uow.packs.get_by_id(pack_id)
            if not pack:
                raise NotFound("Pack", str(pack_id))
            if not pack.is_finished:
                raise ValidationError(f"Pack {pack.pack_id} is not finished", field="is_finished")
            if pack.version != expected_version:
                raise Conflict(
                    f"Pack {pack.pack_id} changed since it was read",
                    pack_id=pack.pack_id,
                    expected_version=expected_version,
                    current_version=pack.version,
                )

            pack.is_finished = False
            pack.finished_at = None
            pack.updated_at = datetime.now(UTC)
            pack = await uow.packs.update(pack, expected_version=expected_version)
            await refresh_stage_flags(uow, pack.load_id)

        logger.info("Pack %s reopened by %s", pack.pack_id, actor)
        return pack
