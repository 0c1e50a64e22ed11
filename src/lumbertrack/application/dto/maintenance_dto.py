"""Maintenance report DTOs."""

from dataclasses import dataclass, field
from uuid import UUID

from lumbertrack.domain.value_objects import IntegrityViolation


@dataclass
class DuplicatePackGroup:
    """Packs sharing one (load, pack_id)."""

    load_id: UUID
    pack_id: str
    count: int


@dataclass
class DeletedRow:
    """Identity of a row removed by a repair."""

    table: str
    id: UUID
    load_id: UUID | None = None
    pack_id: str | None = None


@dataclass
class DataHealthReport:
    """Read-only scan of the subsystem tables."""

    tables: list[str] = field(default_factory=list)
    row_counts: dict[str, int] = field(default_factory=dict)
    duplicate_groups: list[DuplicatePackGroup] = field(default_factory=list)
    orphan_items: int = 0
    orphan_packs: int = 0
    has_unique_constraint: bool = True
    issues: list[IntegrityViolation] = field(default_factory=list)
    warnings: list[IntegrityViolation] = field(default_factory=list)

    @property
    def safe_to_migrate(self) -> bool:
        return not self.duplicate_groups


@dataclass
class RepairAction:
    """One step of a repair and the rows it removed."""

    action: str
    deleted: list[DeletedRow] = field(default_factory=list)

    @property
    def rows_deleted(self) -> int:
        return len(self.deleted)


@dataclass
class RepairReport:
    """Outcome of a duplicate or orphan repair."""

    actions: list[RepairAction] = field(default_factory=list)

    @property
    def rows_affected(self) -> int:
        return sum(a.rows_deleted for a in self.actions)


@dataclass
class TableOutcome:
    """Per-table status of a best-effort purge."""

    table: str
    status: str
    reason: str | None = None


@dataclass
class PurgeReport:
    """Outcome of truncating the subsystem tables."""

    tables: list[TableOutcome] = field(default_factory=list)

    @property
    def truncated(self) -> int:
        return sum(1 for t in self.tables if t.status == "truncated")

    @property
    def summary(self) -> str:
        return f"truncated {self.truncated} of {len(self.tables)} tables"
