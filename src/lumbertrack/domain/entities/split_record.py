"""Split record entity - completed partial finish keyed by idempotency token."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID


@dataclass
class SplitRecord:
    """Result of one partial finish, replayed when the same token is resubmitted."""

    token: str
    pack_id: UUID
    remainder_pack_id: UUID
    finished_board_feet: Decimal
    remainder_board_feet: Decimal
    created_at: datetime
    created_by: str | None = None
