"""Create load use case."""

import logging
from datetime import UTC, datetime
from uuid import uuid4

from lumbertrack.application.dto.load_dto import LoadCreateInput, LoadDetails
from lumbertrack.application.guards import require_actor
from lumbertrack.domain.entities import Load, LoadItem
from lumbertrack.domain.exceptions import DuplicateLoadCode, ValidationError

logger = logging.getLogger(__name__)


class CreateLoadUseCase:
    """Create a load and its items in one transaction."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, user_id: str | None, input_data: LoadCreateInput) -> LoadDetails:
        """Create load. Fails with DuplicateLoadCode if the code is taken."""
        actor = require_actor(user_id)
        code = (input_data.code or "").strip()
        if not code:
            raise ValidationError("Load code is required", field="code")
        if not input_data.items:
            raise ValidationError("At least one item is required", field="items")

        async with self._uow_factory() as uow:
            if await uow.loads.get_by_code(code):
                raise DuplicateLoadCode([code])

            now = datetime.now(UTC)
            load = Load(
                id=uuid4(),
                code=code,
                supplier_id=input_data.supplier_id,
                supplier_location_id=input_data.supplier_location_id,
                lumber_type=input_data.lumber_type,
                pickup_or_delivery=input_data.pickup_or_delivery,
                estimated_delivery_date=input_data.estimated_delivery_date,
                comments=input_data.comments,
                created_by=actor,
                created_at=now,
                updated_at=now,
            )
            await uow.loads.create(load)

            items = [
                LoadItem(
                    id=uuid4(),
                    load_id=load.id,
                    species=item.species,
                    grade=item.grade,
                    thickness=item.thickness,
                    estimated_footage=item.estimated_footage,
                    price=item.price,
                    created_at=now,
                    updated_at=now,
                )
                for item in input_data.items
            ]
            await uow.items.create_batch(items)

        logger.info("Load %s created by %s with %d item(s)", code, actor, len(items))
        return LoadDetails(load=load, items=items)
