"""Integrity maintenance API resources."""

import falcon.asgi

from lumbertrack.application.use_cases.maintenance.check_data_health import (
    CheckDataHealthUseCase,
)
from lumbertrack.application.use_cases.maintenance.purge_lumber_data import (
    PurgeLumberDataUseCase,
)
from lumbertrack.application.use_cases.maintenance.repair_duplicate_packs import (
    RepairDuplicatePacksUseCase,
)
from lumbertrack.application.use_cases.maintenance.repair_orphans import RepairOrphansUseCase
from lumbertrack.application.use_cases.stage.sync_stage_flags import SyncStageFlagsUseCase
from lumbertrack.interfaces.api.parsing import read_body, user_id_of
from lumbertrack.interfaces.api.serializers import (
    health_report_to_dict,
    purge_report_to_dict,
    repair_report_to_dict,
)


class MaintenanceResource:
    """/v1/maintenance/* - operator-triggered scans and repairs."""

    def __init__(
        self,
        check_data_health: CheckDataHealthUseCase,
        repair_duplicate_packs: RepairDuplicatePacksUseCase,
        repair_orphans: RepairOrphansUseCase,
        sync_stage_flags: SyncStageFlagsUseCase,
        purge_lumber_data: PurgeLumberDataUseCase,
    ) -> None:
        self._check_data_health = check_data_health
        self._repair_duplicate_packs = repair_duplicate_packs
        self._repair_orphans = repair_orphans
        self._sync_stage_flags = sync_stage_flags
        self._purge_lumber_data = purge_lumber_data

    async def on_get_report(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/maintenance/report - read-only data health check."""
        report = await self._check_data_health.execute(user_id_of(req))
        resp.media = health_report_to_dict(report)
        resp.status = falcon.HTTP_200

    async def on_post_duplicates(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        report = await self._repair_duplicate_packs.execute(user_id_of(req))
        resp.media = repair_report_to_dict(report)
        resp.status = falcon.HTTP_200

    async def on_post_orphans(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        report = await self._repair_orphans.execute(user_id_of(req))
        resp.media = repair_report_to_dict(report)
        resp.status = falcon.HTTP_200

    async def on_post_stage_flags(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response
    ) -> None:
        changed = await self._sync_stage_flags.execute(user_id_of(req))
        resp.media = {"changed": changed, "count": len(changed)}
        resp.status = falcon.HTTP_200

    async def on_post_purge(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """POST /v1/maintenance/purge - body must carry {"confirm": true}."""
        body = await read_body(req)
        report = await self._purge_lumber_data.execute(
            user_id_of(req), confirm=body.get("confirm") is True
        )
        resp.media = purge_report_to_dict(report)
        resp.status = falcon.HTTP_200
