"""Delete load use case."""

import logging
from uuid import UUID

from lumbertrack.application.guards import require_actor
from lumbertrack.domain.exceptions import NotFound

logger = logging.getLogger(__name__)


class DeleteLoadUseCase:
    """Delete a load together with its items and packs."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str | None, load_id: UUID) -> str:
        """Delete load and return its code."""
        actor = require_actor(user_id)
        async with self._uow_factory() as uow:
            load = await uow.loads.get_by_id(load_id)
            if not load:
                raise NotFound("Load", str(load_id))
            await uow.loads.delete(load.id)

        logger.info("Load %s deleted by %s", load.code, actor)
        return load.code
