"""Caller identity and permission guards shared by use cases."""

from lumbertrack.application.ports import PermissionChecker
from lumbertrack.domain.exceptions import PermissionDenied, Unauthorized
from lumbertrack.domain.value_objects import PermissionAction


def require_actor(user_id: str | None) -> str:
    """Return the caller id or raise Unauthorized when none was supplied."""
    if not user_id or not user_id.strip():
        raise Unauthorized()
    return user_id


async def require_permission(
    permission_checker: PermissionChecker,
    user_id: str | None,
    action: PermissionAction,
) -> str:
    """Require a caller identity that is allowed to perform ``action``."""
    actor = require_actor(user_id)
    if not await permission_checker.check(actor, action):
        raise PermissionDenied(
            f"User does not have {action.value} access",
            user_id=actor,
            action=action.value,
        )
    return actor
