"""Sync stage flags use case."""

import logging

from lumbertrack.application.guards import require_permission
from lumbertrack.domain.services import derive_stage_flags
from lumbertrack.domain.value_objects import PermissionAction

logger = logging.getLogger(__name__)


class SyncStageFlagsUseCase:
    """Recompute and store the stage flags of every load."""

    def __init__(self, unit_of_work_factory: type, permission_checker) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def execute(self, user_id: str | None) -> list[str]:
        """Return the codes of loads whose stored flags changed."""
        await require_permission(self._permission_checker, user_id, PermissionAction.MAINTAIN)
        changed: list[str] = []
        async with self._uow_factory() as uow:
            for snapshot in await uow.loads.list_stage_snapshots():
                flags = derive_stage_flags(snapshot)
                if flags != snapshot.flags:
                    await uow.loads.set_stage_flags(snapshot.load_id, flags)
                    changed.append(snapshot.code)
        logger.info("Stage flags synced; %d load(s) changed", len(changed))
        return changed
