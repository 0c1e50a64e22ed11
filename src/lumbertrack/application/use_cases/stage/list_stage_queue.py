"""List stage queue use case."""

from collections import defaultdict
from uuid import UUID

from lumbertrack.application.dto.load_dto import LoadDetails
from lumbertrack.application.dto.stage_dto import StageQueuePage
from lumbertrack.domain.entities import LoadItem
from lumbertrack.domain.services import classify_load, derive_stage_flags
from lumbertrack.domain.value_objects import StageQueue


class ListStageQueueUseCase:
    """List the loads currently in a named queue.

    Membership is evaluated on live flags so a stale stored flag never hides
    a load from the screen it belongs on.
    """

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self, queue: StageQueue, *, limit: int = 50, offset: int = 0
    ) -> StageQueuePage:
        async with self._uow_factory() as uow:
            snapshots = await uow.loads.list_stage_snapshots()
            members = [
                s
                for s in snapshots
                if queue in classify_load(s.with_flags(derive_stage_flags(s)))
            ]
            load_ids = [s.load_id for s in members[offset : offset + limit]]
            page: list[LoadDetails] = []
            if load_ids:
                loads = {load.id: load for load in await uow.loads.list_by_ids(load_ids)}
                items: dict[UUID, list[LoadItem]] = defaultdict(list)
                for item in await uow.items.list_by_loads(load_ids):
                    items[item.load_id].append(item)
                page = [
                    LoadDetails(load=loads[load_id], items=items[load_id])
                    for load_id in load_ids
                    if load_id in loads
                ]
        return StageQueuePage(queue=queue, loads=page, total=len(members))
