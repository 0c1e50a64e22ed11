"""Stage classifier - which operational queues a load belongs to.

Every queue predicate is evaluated independently, so a load can sit in several
queues at once. Each membership carries the conditions that were checked and
whether they held, which is what operators read when a load is missing from a
screen they expect it on.
"""

from dataclasses import dataclass, replace
from datetime import date
from uuid import UUID

from lumbertrack.domain.value_objects import StageQueue


@dataclass(frozen=True)
class LoadStageSnapshot:
    """Load flags plus item and pack aggregates read in one pass."""

    load_id: UUID
    code: str
    all_packs_tallied: bool
    all_packs_finished: bool
    po_generated: bool
    is_paid: bool
    actual_arrival_date: date | None
    item_count: int
    items_with_actual_footage: int
    items_with_packs: int
    pack_count: int
    finished_pack_count: int

    @property
    def has_actual_footage(self) -> bool:
        return self.items_with_actual_footage > 0

    @property
    def flags(self) -> "StageFlags":
        return StageFlags(self.all_packs_tallied, self.all_packs_finished)

    def with_flags(self, flags: "StageFlags") -> "LoadStageSnapshot":
        """Copy of the snapshot with the given stage flags."""
        return replace(
            self,
            all_packs_tallied=flags.all_packs_tallied,
            all_packs_finished=flags.all_packs_finished,
        )


@dataclass(frozen=True)
class StageFlags:
    """Stored-but-derivable pack progress flags of a load."""

    all_packs_tallied: bool
    all_packs_finished: bool


@dataclass(frozen=True)
class Condition:
    """One predicate term and whether it held."""

    description: str
    satisfied: bool


@dataclass(frozen=True)
class QueueMembership:
    """Membership of a load in one queue with the conditions behind it."""

    queue: StageQueue
    member: bool
    conditions: tuple[Condition, ...]

    @property
    def reasons(self) -> list[str]:
        """Conditions that kept the load out, or all of them when it is in."""
        if self.member:
            return [c.description for c in self.conditions]
        return [c.description for c in self.conditions if not c.satisfied]


@dataclass(frozen=True)
class StageClassification:
    """Membership of one load in every queue."""

    load_id: UUID
    code: str
    memberships: dict[StageQueue, QueueMembership]

    @property
    def queues(self) -> list[StageQueue]:
        return [q for q, m in self.memberships.items() if m.member]

    def __contains__(self, queue: StageQueue) -> bool:
        return self.memberships[queue].member


def derive_stage_flags(snapshot: LoadStageSnapshot) -> StageFlags:
    """Recompute stage flags from live item and pack counts."""
    tallied = snapshot.item_count > 0 and snapshot.items_with_packs >= snapshot.item_count
    finished = (
        snapshot.pack_count > 0 and snapshot.finished_pack_count >= snapshot.pack_count
    )
    return StageFlags(all_packs_tallied=tallied, all_packs_finished=finished)


def _flag(name: str, value: bool, wanted: bool) -> Condition:
    return Condition(f"{name} is {'TRUE' if value else 'FALSE'}", value == wanted)


def _membership(queue: StageQueue, *conditions: Condition) -> QueueMembership:
    return QueueMembership(
        queue=queue,
        member=all(c.satisfied for c in conditions),
        conditions=conditions,
    )


def classify_load(snapshot: LoadStageSnapshot) -> StageClassification:
    """Classify a load into the tally, rip, inventory, PO and paid queues."""
    if snapshot.has_actual_footage:
        footage = Condition("has items with actual_footage set", True)
    else:
        footage = Condition("no items with actual_footage set", False)
    tallied = _flag("all_packs_tallied", snapshot.all_packs_tallied, wanted=True)
    not_tallied = _flag("all_packs_tallied", snapshot.all_packs_tallied, wanted=False)
    not_finished = _flag("all_packs_finished", snapshot.all_packs_finished, wanted=False)
    po_pending = Condition(
        "purchase order not generated" if not snapshot.po_generated
        else "purchase order already generated",
        not snapshot.po_generated,
    )
    paid = Condition(
        "load is paid" if snapshot.is_paid else "load is not paid",
        snapshot.is_paid,
    )
    arrived = Condition(
        "actual_arrival_date is set" if snapshot.actual_arrival_date
        else "actual_arrival_date is not set",
        snapshot.actual_arrival_date is not None,
    )

    memberships = {
        StageQueue.TALLY_ENTRY: _membership(
            StageQueue.TALLY_ENTRY, footage, not_tallied, not_finished
        ),
        StageQueue.RIP_ENTRY: _membership(StageQueue.RIP_ENTRY, tallied, not_finished),
        StageQueue.INVENTORY: _membership(StageQueue.INVENTORY, footage, not_finished),
        StageQueue.PO_NEEDED: _membership(StageQueue.PO_NEEDED, po_pending),
        StageQueue.PAID: _membership(StageQueue.PAID, paid, arrived),
    }
    return StageClassification(
        load_id=snapshot.load_id,
        code=snapshot.code,
        memberships=memberships,
    )
