"""Repository ports."""

from lumbertrack.application.ports.repositories.load_item_repository import (
    LoadItemRepository,
)
from lumbertrack.application.ports.repositories.load_repository import LoadRepository
from lumbertrack.application.ports.repositories.maintenance_repository import (
    MaintenanceRepository,
)
from lumbertrack.application.ports.repositories.pack_repository import PackRepository
from lumbertrack.application.ports.repositories.split_record_repository import (
    SplitRecordRepository,
)

__all__ = [
    "LoadItemRepository",
    "LoadRepository",
    "MaintenanceRepository",
    "PackRepository",
    "SplitRecordRepository",
]
