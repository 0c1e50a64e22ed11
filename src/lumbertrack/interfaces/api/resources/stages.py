"""Stage queue API resources."""

import falcon.asgi

from lumbertrack.application.use_cases.stage.diagnose_load import DiagnoseLoadUseCase
from lumbertrack.application.use_cases.stage.list_stage_queue import ListStageQueueUseCase
from lumbertrack.domain.exceptions import Unauthorized
from lumbertrack.domain.value_objects import StageQueue
from lumbertrack.interfaces.api.parsing import optional_enum, parse_uuid, user_id_of
from lumbertrack.interfaces.api.serializers import diagnosis_to_dict, stage_page_to_dict


class StageQueueResource:
    """GET /v1/stages/{queue} - loads currently in a queue."""

    def __init__(self, list_stage_queue: ListStageQueueUseCase) -> None:
        self._list_stage_queue = list_stage_queue

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, queue: str
    ) -> None:
        if not user_id_of(req):
            raise Unauthorized()
        stage = optional_enum(StageQueue, queue.replace("-", "_"), "queue")
        limit = min(max(req.get_param_as_int("limit") or 50, 1), 200)
        offset = max(req.get_param_as_int("offset") or 0, 0)
        page = await self._list_stage_queue.execute(stage, limit=limit, offset=offset)
        resp.media = stage_page_to_dict(page)
        resp.status = falcon.HTTP_200


class LoadStagesResource:
    """GET /v1/loads/{load_id}/stages - why a load is or is not in each queue."""

    def __init__(self, diagnose_load: DiagnoseLoadUseCase) -> None:
        self._diagnose_load = diagnose_load

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, load_id: str
    ) -> None:
        if not user_id_of(req):
            raise Unauthorized()
        diagnosis = await self._diagnose_load.execute(parse_uuid(load_id, "load_id"))
        resp.media = diagnosis_to_dict(diagnosis)
        resp.status = falcon.HTTP_200
