"""List packs use case."""

from uuid import UUID

from lumbertrack.domain.entities import Pack
from lumbertrack.domain.exceptions import NotFound


class ListPacksUseCase:
    """Packs of a load ordered as the store returns them."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, load_id: UUID) -> list[Pack]:
        async with self._uow_factory() as uow:
            load = await uow.loads.get_by_id(load_id)
            if not load:
                raise NotFound("Load", str(load_id))
            return await uow.packs.list_by_load(load_id)
