"""Domain value objects."""

from lumbertrack.domain.value_objects.board_feet import (
    positive_board_feet,
    rip_yield,
    split_board_feet,
    to_board_feet,
)
from lumbertrack.domain.value_objects.integrity_violation import (
    IntegrityViolation,
    Severity,
)
from lumbertrack.domain.value_objects.lumber_attributes import (
    LumberType,
    PickupOrDelivery,
    Thickness,
)
from lumbertrack.domain.value_objects.pack_code import next_pack_code
from lumbertrack.domain.value_objects.permission_action import PermissionAction
from lumbertrack.domain.value_objects.stage_queue import StageQueue

__all__ = [
    "IntegrityViolation",
    "LumberType",
    "PermissionAction",
    "PickupOrDelivery",
    "Severity",
    "StageQueue",
    "Thickness",
    "next_pack_code",
    "positive_board_feet",
    "rip_yield",
    "split_board_feet",
    "to_board_feet",
]
