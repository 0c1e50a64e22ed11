"""Delete pack use case."""

from uuid import UUID

from lumbertrack.application.guards import require_actor
from lumbertrack.application.use_cases.stage.refresh_stage_flags import (
    refresh_stage_flags,
)
from lumbertrack.domain.exceptions import NotFound, PackFinished


class DeletePackUseCase:
    """Delete an unfinished pack."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str | None, pack_id: UUID) -> None:
        require_actor(user_id)
        async with self._uow_factory() as uow:
            pack = await uow.packs.get_by_id(pack_id)
            if not pack:
                raise NotFound("Pack", str(pack_id))
            if pack.is_finished:
                raise PackFinished(pack.pack_id)
            await uow.packs.delete(pack.id)
            await refresh_stage_flags(uow, pack.load_id)
