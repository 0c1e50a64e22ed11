"""Purge use case - empty every table of the subsystem."""

import logging

from lumbertrack.application.dto.maintenance_dto import PurgeReport, TableOutcome
from lumbertrack.application.guards import require_permission
from lumbertrack.domain.exceptions import ValidationError
from lumbertrack.domain.value_objects import PermissionAction

logger = logging.getLogger(__name__)

# Children before parents.
PURGE_TABLES = (
    "lumber_split_records",
    "lumber_packs",
    "lumber_load_items",
    "lumber_loads",
)


class PurgeLumberDataUseCase:
    """Truncate the subsystem tables, best-effort per table."""

    def __init__(self, unit_of_work_factory: type, permission_checker) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def execute(self, user_id: str | None, confirm: bool = False) -> PurgeReport:
        actor = await require_permission(
            self._permission_checker, user_id, PermissionAction.MAINTAIN
        )
        if not confirm:
            raise ValidationError("Purge requires explicit confirmation", field="confirm")

        report = PurgeReport()
        async with self._uow_factory() as uow:
            existing = set(await uow.maintenance.list_tables())
            for table in PURGE_TABLES:
                if table not in existing:
                    report.tables.append(TableOutcome(table, "skipped", "table does not exist"))
                    continue
                reason = await uow.maintenance.truncate(table)
                if reason:
                    report.tables.append(TableOutcome(table, "skipped", reason))
                else:
                    report.tables.append(TableOutcome(table, "truncated"))

        logger.warning("Purge by %s: %s", actor, report.summary)
        return report
