"""Duplicate pack repair use case."""

import logging

from lumbertrack.application.dto.maintenance_dto import RepairAction, RepairReport
from lumbertrack.application.guards import require_permission
from lumbertrack.domain.value_objects import PermissionAction

logger = logging.getLogger(__name__)


class RepairDuplicatePacksUseCase:
    """Keep the earliest-created pack per (load, pack_id) and delete the rest.

    Destructive and not reversible. Every deleted row is reported.
    """

    def __init__(self, unit_of_work_factory: type, permission_checker) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def execute(self, user_id: str | None) -> RepairReport:
        actor = await require_permission(
            self._permission_checker, user_id, PermissionAction.MAINTAIN
        )
        async with self._uow_factory() as uow:
            deleted = await uow.maintenance.delete_duplicate_packs()

        report = RepairReport(actions=[RepairAction("Removed duplicate packs", deleted)])
        logger.warning(
            "Duplicate-pack repair by %s deleted %d row(s)", actor, report.rows_affected
        )
        return report
