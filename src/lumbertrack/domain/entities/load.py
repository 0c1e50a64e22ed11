"""Load entity - one purchase of lumber from a supplier location."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from lumbertrack.domain.value_objects import LumberType, PickupOrDelivery


@dataclass
class Load:
    """Purchased lumber load identified by a unique human-assigned code."""

    id: UUID
    code: str
    supplier_id: UUID
    created_at: datetime
    updated_at: datetime
    supplier_location_id: UUID | None = None
    lumber_type: LumberType | None = None
    pickup_or_delivery: PickupOrDelivery | None = None
    estimated_delivery_date: date | None = None
    actual_arrival_date: date | None = None
    comments: str | None = None
    pickup_number: str | None = None
    plant: str | None = None
    pickup_date: date | None = None
    invoice_number: str | None = None
    invoice_total: Decimal | None = None
    invoice_date: date | None = None
    load_quality: int | None = None
    is_entered: bool = False
    is_paid: bool = False
    paid_at: datetime | None = None
    po_generated: bool = False
    po_generated_at: datetime | None = None
    # Cached derivations of pack state; recomputed inside every pack mutation.
    all_packs_tallied: bool = False
    all_packs_finished: bool = False
    created_by: str | None = None
