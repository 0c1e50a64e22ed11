"""Bulk create loads use case."""

import logging
from collections import Counter
from datetime import UTC, datetime
from uuid import uuid4

from lumbertrack.application.dto.load_dto import (
    BulkLoadRow,
    BulkLoadSharedFields,
    LoadDetails,
)
from lumbertrack.application.guards import require_actor
from lumbertrack.domain.entities import Load, LoadItem
from lumbertrack.domain.exceptions import DuplicateLoadCode, ValidationError

logger = logging.getLogger(__name__)


class BulkCreateLoadsUseCase:
    """Create many single-item loads sharing supplier and delivery fields.

    All or nothing: any code repeated in the batch or already stored
    rejects the whole batch before a single row is written.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        user_id: str | None,
        shared: BulkLoadSharedFields,
        rows: list[BulkLoadRow],
    ) -> list[LoadDetails]:
        actor = require_actor(user_id)
        if not rows:
            raise ValidationError("At least one load is required", field="items")

        codes = [(row.code or "").strip() for row in rows]
        if not all(codes):
            raise ValidationError("Each load must have a code", field="load_id")

        repeated = [code for code, n in Counter(codes).items() if n > 1]
        if repeated:
            raise DuplicateLoadCode(repeated)

        created: list[LoadDetails] = []
        async with self._uow_factory() as uow:
            existing = await uow.loads.list_existing_codes(codes)
            if existing:
                raise DuplicateLoadCode(existing)

            now = datetime.now(UTC)
            for code, row in zip(codes, rows, strict=True):
                load = Load(
                    id=uuid4(),
                    code=code,
                    supplier_id=shared.supplier_id,
                    supplier_location_id=shared.supplier_location_id,
                    lumber_type=shared.lumber_type,
                    pickup_or_delivery=shared.pickup_or_delivery,
                    estimated_delivery_date=shared.estimated_delivery_date,
                    comments=shared.comments,
                    created_by=actor,
                    created_at=now,
                    updated_at=now,
                )
                item = LoadItem(
                    id=uuid4(),
                    load_id=load.id,
                    species=row.species,
                    grade=row.grade,
                    thickness=row.thickness,
                    estimated_footage=row.estimated_footage,
                    price=row.price,
                    created_at=now,
                    updated_at=now,
                )
                await uow.loads.create(load)
                await uow.items.create_batch([item])
                created.append(LoadDetails(load=load, items=[item]))

        logger.info("Bulk created %d load(s) for %s", len(created), actor)
        return created
