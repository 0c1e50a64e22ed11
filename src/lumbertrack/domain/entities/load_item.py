"""Load item entity - one species/grade/thickness/price line of a load."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from uuid import UUID

from lumbertrack.domain.value_objects import Thickness


@dataclass
class LoadItem:
    """Line item owned by exactly one load."""

    id: UUID
    load_id: UUID
    species: str
    grade: str
    thickness: Thickness
    created_at: datetime
    updated_at: datetime
    estimated_footage: Decimal | None = None
    actual_footage: Decimal | None = None
    actual_footage_entered_at: datetime | None = None
    price: Decimal | None = None
