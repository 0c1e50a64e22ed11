"""Update load item use case."""

from datetime import UTC, datetime
from uuid import UUID

from lumbertrack.application.dto.load_dto import ITEM_UPDATABLE_FIELDS
from lumbertrack.application.guards import require_actor
from lumbertrack.domain.entities import LoadItem
from lumbertrack.domain.exceptions import NotFound, ValidationError


class UpdateLoadItemUseCase:
    """Partial update of a load item; stamps when actual footage is first entered."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, user_id: str | None, item_id: UUID, changes: dict[str, object]
    ) -> LoadItem:
        require_actor(user_id)
        if not changes:
            raise ValidationError("No fields to update")
        unknown = sorted(set(changes) - ITEM_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(unknown)}", field=unknown[0]
            )

        async with self._uow_factory() as uow:
            item = await uow.items.get_by_id(item_id)
            if not item:
                raise NotFound("LoadItem", str(item_id))

            now = datetime.now(UTC)
            for field, value in changes.items():
                setattr(item, field, value)
            if changes.get("actual_footage") is not None and not item.actual_footage_entered_at:
                item.actual_footage_entered_at = now
            item.updated_at = now
            await uow.items.update(item)

        return item
