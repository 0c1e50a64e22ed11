"""Domain entities."""

from lumbertrack.domain.entities.load import Load
from lumbertrack.domain.entities.load_item import LoadItem
from lumbertrack.domain.entities.pack import Pack
from lumbertrack.domain.entities.split_record import SplitRecord

__all__ = [
    "Load",
    "LoadItem",
    "Pack",
    "SplitRecord",
]
