"""Permission checker implementation - settings-driven maintenance access."""

from lumbertrack.domain.value_objects import PermissionAction


class SettingsPermissionChecker:
    """Any identified user may read and write; maintenance needs an allow-listed id."""

    def __init__(self, maintenance_admins: list[str]) -> None:
        self._maintenance_admins = frozenset(maintenance_admins)

    async def check(self, user_id: str, action: PermissionAction) -> bool:
        if action is PermissionAction.MAINTAIN:
            return user_id in self._maintenance_admins
        return bool(user_id)
