"""Permission actions for the lumber pipeline."""

from enum import StrEnum


class PermissionAction(StrEnum):
    """Actions a caller can be allowed to perform."""

    READ = "read"
    WRITE = "write"
    MAINTAIN = "maintain"
