"""Get load use case."""

from uuid import UUID

from lumbertrack.application.dto.load_dto import LoadDetails
from lumbertrack.domain.exceptions import NotFound


class GetLoadUseCase:
    """Get a load with its items by id or by code."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, load_id: UUID) -> LoadDetails:
        async with self._uow_factory() as uow:
            load = await uow.loads.get_by_id(load_id)
            if not load:
                raise NotFound("Load", str(load_id))
            items = await uow.items.list_by_load(load.id)
        return LoadDetails(load=load, items=items)

    async def by_code(self, code: str) -> LoadDetails:
        async with self._uow_factory() as uow:
            load = await uow.loads.get_by_code(code)
            if not load:
                raise NotFound("Load", code)
            items = await uow.items.list_by_load(load.id)
        return LoadDetails(load=load, items=items)
