"""Mark purchase order generated use case."""

from datetime import UTC, datetime
from uuid import UUID

from lumbertrack.application.guards import require_actor
from lumbertrack.domain.entities import Load
from lumbertrack.domain.exceptions import NotFound


class MarkPoGeneratedUseCase:
    """Record that the purchase order document for a load was rendered."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str | None, load_id: UUID) -> Load:
        require_actor(user_id)
        async with self._uow_factory() as uow:
            load = await uow.loads.get_by_id(load_id)
            if not load:
                raise NotFound("Load", str(load_id))
            now = datetime.now(UTC)
            load.po_generated = True
            load.po_generated_at = now
            load.updated_at = now
            await uow.loads.update(load)
        return load
