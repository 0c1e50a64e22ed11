"""Load DTOs."""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from lumbertrack.domain.entities import Load, LoadItem
from lumbertrack.domain.value_objects import LumberType, PickupOrDelivery, Thickness

# Load fields a partial update may touch. Stage flags and PO state have
# their own operations.
LOAD_UPDATABLE_FIELDS = frozenset(
    {
        "code",
        "supplier_id",
        "supplier_location_id",
        "lumber_type",
        "pickup_or_delivery",
        "estimated_delivery_date",
        "comments",
        "actual_arrival_date",
        "pickup_number",
        "plant",
        "pickup_date",
        "invoice_number",
        "invoice_total",
        "invoice_date",
        "load_quality",
        "is_entered",
        "is_paid",
    }
)

ITEM_UPDATABLE_FIELDS = frozenset(
    {"species", "grade", "thickness", "estimated_footage", "actual_footage", "price"}
)


@dataclass
class LoadItemInput:
    """One species/grade/thickness line of a new load."""

    species: str
    grade: str
    thickness: Thickness
    estimated_footage: Decimal | None = None
    price: Decimal | None = None


@dataclass
class LoadCreateInput:
    """Input for creating a load with its items."""

    code: str
    supplier_id: UUID
    items: list[LoadItemInput]
    supplier_location_id: UUID | None = None
    lumber_type: LumberType | None = None
    pickup_or_delivery: PickupOrDelivery | None = None
    estimated_delivery_date: date | None = None
    comments: str | None = None


@dataclass
class BulkLoadSharedFields:
    """Fields copied onto every load of a bulk creation."""

    supplier_id: UUID
    supplier_location_id: UUID | None = None
    lumber_type: LumberType | None = None
    pickup_or_delivery: PickupOrDelivery | None = None
    estimated_delivery_date: date | None = None
    comments: str | None = None


@dataclass
class BulkLoadRow:
    """One load of a bulk creation: its code and single item."""

    code: str
    species: str
    grade: str
    thickness: Thickness
    estimated_footage: Decimal | None = None
    price: Decimal | None = None


@dataclass
class LoadDetails:
    """Load with its items."""

    load: Load
    items: list[LoadItem] = field(default_factory=list)
