"""Pure domain services."""

from lumbertrack.domain.services.stage_classifier import (
    Condition,
    LoadStageSnapshot,
    QueueMembership,
    StageClassification,
    StageFlags,
    classify_load,
    derive_stage_flags,
)

__all__ = [
    "Condition",
    "LoadStageSnapshot",
    "QueueMembership",
    "StageClassification",
    "StageFlags",
    "classify_load",
    "derive_stage_flags",
]
