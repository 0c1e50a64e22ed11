"""Stage diagnosis DTOs."""

from dataclasses import dataclass, field

from lumbertrack.application.dto.load_dto import LoadDetails
from lumbertrack.domain.services import LoadStageSnapshot, StageClassification, StageFlags
from lumbertrack.domain.value_objects import StageQueue


@dataclass
class LoadDiagnosis:
    """Queue membership from stored flags and from live pack data."""

    snapshot: LoadStageSnapshot
    stored: StageClassification
    live: StageClassification
    live_flags: StageFlags

    @property
    def stale(self) -> bool:
        return self.snapshot.flags != self.live_flags


@dataclass
class StageQueuePage:
    """Loads of one queue, paged by offset."""

    queue: StageQueue
    loads: list[LoadDetails] = field(default_factory=list)
    total: int = 0
