"""Orphan repair use case."""

import logging

from lumbertrack.application.dto.maintenance_dto import RepairAction, RepairReport
from lumbertrack.application.guards import require_permission
from lumbertrack.domain.value_objects import PermissionAction

logger = logging.getLogger(__name__)


class RepairOrphansUseCase:
    """Delete items without a load, then packs without an item."""

    def __init__(self, unit_of_work_factory: type, permission_checker) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def execute(self, user_id: str | None) -> RepairReport:
        actor = await require_permission(
            self._permission_checker, user_id, PermissionAction.MAINTAIN
        )
        async with self._uow_factory() as uow:
            # Items first: removing them is what orphans their packs.
            items = await uow.maintenance.delete_orphan_items()
            packs = await uow.maintenance.delete_orphan_packs()

        report = RepairReport(
            actions=[
                RepairAction("Removed orphaned load items", items),
                RepairAction("Removed orphaned packs", packs),
            ]
        )
        logger.warning("Orphan repair by %s deleted %d row(s)", actor, report.rows_affected)
        return report
