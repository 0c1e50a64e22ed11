"""Diagnose load use case."""

from uuid import UUID

from lumbertrack.application.dto.stage_dto import LoadDiagnosis
from lumbertrack.domain.exceptions import NotFound
from lumbertrack.domain.services import classify_load, derive_stage_flags


class DiagnoseLoadUseCase:
    """Explain which queues a load is in, from stored and from live flags."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, load_id: UUID) -> LoadDiagnosis:
        async with self._uow_factory() as uow:
            snapshot = await uow.loads.get_stage_snapshot(load_id)
        if snapshot is None:
            raise NotFound("Load", str(load_id))

        live_flags = derive_stage_flags(snapshot)
        return LoadDiagnosis(
            snapshot=snapshot,
            stored=classify_load(snapshot),
            live=classify_load(snapshot.with_flags(live_flags)),
            live_flags=live_flags,
        )
