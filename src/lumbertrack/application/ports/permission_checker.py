"""Permission checker port."""

from typing import Protocol

from lumbertrack.domain.value_objects import PermissionAction


class PermissionChecker(Protocol):
    """Port for checking whether a caller may perform an action."""

    async def check(self, user_id: str, action: PermissionAction) -> bool: ...
