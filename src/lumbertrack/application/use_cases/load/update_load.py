"""Update load use case."""

from datetime import UTC, datetime
from uuid import UUID

from lumbertrack.application.dto.load_dto import LOAD_UPDATABLE_FIELDS
from lumbertrack.application.guards import require_actor
from lumbertrack.domain.entities import Load
from lumbertrack.domain.exceptions import DuplicateLoadCode, NotFound, ValidationError


class UpdateLoadUseCase:
    """Partial update of allow-listed load fields."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, user_id: str | None, load_id: UUID, changes: dict[str, object]
    ) -> Load:
        """Apply only the supplied fields."""
        require_actor(user_id)
        if not changes:
            raise ValidationError("No fields to update")
        unknown = sorted(set(changes) - LOAD_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(unknown)}", field=unknown[0]
            )

        async with self._uow_factory() as uow:
            load = await uow.loads.get_by_id(load_id)
            if not load:
                raise NotFound("Load", str(load_id))

            now = datetime.now(UTC)
            if "code" in changes:
                code = str(changes["code"] or "").strip()
                if not code:
                    raise ValidationError("Load code is required", field="code")
                if code != load.code:
                    if await uow.loads.get_by_code(code):
                        raise DuplicateLoadCode([code])
                changes = {**changes, "code": code}

            if "is_paid" in changes:
                if changes["is_paid"] and not load.paid_at:
                    load.paid_at = now
                elif not changes["is_paid"]:
                    load.paid_at = None

            for field, value in changes.items():
                setattr(load, field, value)
            load.updated_at = now
            await uow.loads.update(load)

        return load
