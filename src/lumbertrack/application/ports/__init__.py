"""Application ports - interfaces for external adapters."""

from lumbertrack.application.ports.permission_checker import PermissionChecker
from lumbertrack.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "PermissionChecker",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
