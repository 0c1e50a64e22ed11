"""Pack DTOs."""

from dataclasses import dataclass
from decimal import Decimal

from lumbertrack.domain.entities import Pack

PACK_UPDATABLE_FIELDS = frozenset(
    {
        "pack_id",
        "length",
        "tally_board_feet",
        "actual_board_feet",
        "rip_comments",
        "is_finished",
        "finished_at",
        "operator_id",
        "stacker_1_id",
        "stacker_2_id",
        "stacker_3_id",
        "stacker_4_id",
    }
)


@dataclass
class PackTallyInput:
    """One tallied pack to create under a load item."""

    pack_id: str
    length: int | None
    tally_board_feet: Decimal | None


@dataclass
class CrewInput:
    """Operator and stacker references recorded when a pack is finished."""

    operator_id: str | None = None
    stacker_1_id: str | None = None
    stacker_2_id: str | None = None
    stacker_3_id: str | None = None
    stacker_4_id: str | None = None

    def apply_to(self, pack: Pack) -> None:
        pack.operator_id = self.operator_id
        pack.stacker_1_id = self.stacker_1_id
        pack.stacker_2_id = self.stacker_2_id
        pack.stacker_3_id = self.stacker_3_id
        pack.stacker_4_id = self.stacker_4_id


@dataclass
class PartialFinishInput:
    """Input for splitting a pack into a finished part and a remainder."""

    actual_board_feet: Decimal
    expected_version: int
    idempotency_key: str
    tally_board_feet: Decimal | None = None
    crew: CrewInput | None = None


@dataclass
class PartialFinishOutput:
    """Both halves of a split; ``replayed`` when served from a prior token."""

    finished_pack: Pack
    remainder_pack: Pack
    replayed: bool = False
