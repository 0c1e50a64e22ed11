"""Data health check use case."""

from lumbertrack.application.dto.maintenance_dto import DataHealthReport
from lumbertrack.application.guards import require_permission
from lumbertrack.domain.value_objects import IntegrityViolation, PermissionAction, Severity

LOADS_TABLE = "lumber_loads"
ITEMS_TABLE = "lumber_load_items"
PACKS_TABLE = "lumber_packs"

# Duplicate groups listed in a finding; the count covers all of them.
MAX_DETAILS = 10


class CheckDataHealthUseCase:
    """Read-only scan for duplicate packs, orphans and a missing constraint."""

    def __init__(self, unit_of_work_factory: type, permission_checker) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def execute(self, user_id: str | None) -> DataHealthReport:
        await require_permission(self._permission_checker, user_id, PermissionAction.MAINTAIN)
        report = DataHealthReport()

        async with self._uow_factory() as uow:
            repo = uow.maintenance
            report.tables = await repo.list_tables()
            for table in report.tables:
                report.row_counts[table] = await repo.count_rows(table)

            if PACKS_TABLE in report.tables:
                report.duplicate_groups = await repo.find_duplicate_pack_groups()
                report.has_unique_constraint = await repo.has_pack_unique_constraint()
            if ITEMS_TABLE in report.tables and LOADS_TABLE in report.tables:
                report.orphan_items = await repo.count_orphan_items()
            if PACKS_TABLE in report.tables and ITEMS_TABLE in report.tables:
                report.orphan_packs = await repo.count_orphan_packs()

        if report.duplicate_groups:
            report.issues.append(
                IntegrityViolation(
                    severity=Severity.HIGH,
                    table=PACKS_TABLE,
                    issue="Duplicate pack_ids found within loads",
                    count=len(report.duplicate_groups),
                    fix="Run the duplicate-pack repair",
                    details=[
                        {
                            "load_id": str(g.load_id),
                            "pack_id": g.pack_id,
                            "duplicate_count": g.count,
                        }
                        for g in report.duplicate_groups[:MAX_DETAILS]
                    ],
                )
            )
        if PACKS_TABLE in report.tables and not report.has_unique_constraint:
            report.warnings.append(
                IntegrityViolation(
                    severity=Severity.MEDIUM,
                    table=PACKS_TABLE,
                    issue="Missing unique constraint on (load_id, pack_id)",
                    count=1,
                    fix="Run the database migrations",
                )
            )
        if report.orphan_items:
            report.warnings.append(
                IntegrityViolation(
                    severity=Severity.LOW,
                    table=ITEMS_TABLE,
                    issue=f"Found {report.orphan_items} orphaned load items (no parent load)",
                    count=report.orphan_items,
                    fix="Run the orphan repair",
                )
            )
        if report.orphan_packs:
            report.warnings.append(
                IntegrityViolation(
                    severity=Severity.LOW,
                    table=PACKS_TABLE,
                    issue=f"Found {report.orphan_packs} orphaned packs (no parent load item)",
                    count=report.orphan_packs,
                    fix="Run the orphan repair",
                )
            )
        return report
