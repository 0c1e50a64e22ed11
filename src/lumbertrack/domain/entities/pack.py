"""Pack entity - a physical bundle of boards tracked through tally and rip."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID


@dataclass
class Pack:
    """Pack - unit of physical handling, unique by ``pack_id`` within its load."""

    id: UUID
    load_id: UUID
    item_id: UUID
    pack_id: str
    created_at: datetime
    updated_at: datetime
    length: int | None = None
    tally_board_feet: Decimal | None = None
    actual_board_feet: Decimal | None = None
    rip_yield: Decimal | None = None
    rip_comments: str | None = None
    is_finished: bool = False
    finished_at: date | None = None
    operator_id: str | None = None
    stacker_1_id: str | None = None
    stacker_2_id: str | None = None
    stacker_3_id: str | None = None
    stacker_4_id: str | None = None
    version: int = 1
    created_by: str | None = None
