"""Pack API resources."""

import falcon.asgi

from lumbertrack.application.dto.pack_dto import PartialFinishInput
from lumbertrack.application.use_cases.pack.delete_pack import DeletePackUseCase
from lumbertrack.application.use_cases.pack.finish_pack import FinishPackUseCase
from lumbertrack.application.use_cases.pack.list_packs import ListPacksUseCase
from lumbertrack.application.use_cases.pack.partial_finish_pack import (
    PartialFinishPackUseCase,
)
from lumbertrack.application.use_cases.pack.reopen_pack import ReopenPackUseCase
from lumbertrack.application.use_cases.pack.update_pack import UpdatePackUseCase
from lumbertrack.domain.exceptions import Unauthorized, ValidationError
from lumbertrack.interfaces.api.parsing import (
    CREW_FIELDS,
    idempotency_key,
    optional_bool,
    optional_date,
    optional_decimal,
    optional_int,
    optional_str,
    parse_crew,
    parse_uuid,
    read_body,
    require,
    user_id_of,
)
from lumbertrack.interfaces.api.serializers import pack_to_dict, split_to_dict

PACK_FIELD_PARSERS = {
    "pack_id": lambda v, f: optional_str(v),
    "length": optional_int,
    "tally_board_feet": optional_decimal,
    "actual_board_feet": optional_decimal,
    "rip_comments": lambda v, f: optional_str(v),
    "is_finished": optional_bool,
    "finished_at": optional_date,
    **{f: (lambda v, f: optional_str(v)) for f in CREW_FIELDS},
}


def _expected_version(body: dict) -> int:
    return optional_int(require(body, "version"), "version")


class LoadPacksResource:
    """GET /v1/loads/{load_id}/packs."""

    def __init__(self, list_packs: ListPacksUseCase) -> None:
        self._list_packs = list_packs

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, load_id: str
    ) -> None:
        if not user_id_of(req):
            raise Unauthorized()
        packs = await self._list_packs.execute(parse_uuid(load_id, "load_id"))
        resp.media = {"items": [pack_to_dict(p) for p in packs]}
        resp.status = falcon.HTTP_200


class PackResource:
    """PATCH/DELETE /v1/packs/{pack_id} and POST .../finish|partial-finish|reopen.

    Every state change takes the ``version`` the caller read; PATCH may omit it.
    """

    def __init__(
        self,
        update_pack: UpdatePackUseCase,
        delete_pack: DeletePackUseCase,
        finish_pack: FinishPackUseCase,
        partial_finish_pack: PartialFinishPackUseCase,
        reopen_pack: ReopenPackUseCase,
    ) -> None:
        self._update_pack = update_pack
        self._delete_pack = delete_pack
        self._finish_pack = finish_pack
        self._partial_finish_pack = partial_finish_pack
        self._reopen_pack = reopen_pack

    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, pack_id: str
    ) -> None:
        body = await read_body(req)
        expected_version = optional_int(body.pop("version", None), "version")
        unknown = sorted(set(body) - set(PACK_FIELD_PARSERS))
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(unknown)}", field=unknown[0]
            )
        changes = {f: PACK_FIELD_PARSERS[f](v, f) for f, v in body.items()}
        pack = await self._update_pack.execute(
            user_id_of(req), parse_uuid(pack_id, "pack_id"), changes, expected_version
        )
        resp.media = pack_to_dict(pack)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, pack_id: str
    ) -> None:
        await self._delete_pack.execute(user_id_of(req), parse_uuid(pack_id, "pack_id"))
        resp.status = falcon.HTTP_204

    async def on_post_finish(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, pack_id: str
    ) -> None:
        body = await read_body(req)
        pack = await self._finish_pack.execute(
            user_id_of(req),
            parse_uuid(pack_id, "pack_id"),
            expected_version=_expected_version(body),
            actual_board_feet=optional_decimal(
                body.get("actual_board_feet"), "actual_board_feet"
            ),
            crew=parse_crew(body),
        )
        resp.media = pack_to_dict(pack)
        resp.status = falcon.HTTP_200

    async def on_post_partial_finish(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, pack_id: str
    ) -> None:
        """Split the pack; the idempotency key comes from the header or the body."""
        body = await read_body(req)
        input_data = PartialFinishInput(
            actual_board_feet=optional_decimal(
                require(body, "actual_board_feet"), "actual_board_feet"
            ),
            expected_version=_expected_version(body),
            idempotency_key=idempotency_key(req, body),
            tally_board_feet=optional_decimal(body.get("tally_board_feet"), "tally_board_feet"),
            crew=parse_crew(body),
        )
        result = await self._partial_finish_pack.execute(
            user_id_of(req), parse_uuid(pack_id, "pack_id"), input_data
        )
        resp.media = split_to_dict(result)
        resp.status = falcon.HTTP_200 if result.replayed else falcon.HTTP_201

    async def on_post_reopen(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, pack_id: str
    ) -> None:
        body = await read_body(req)
        pack = await self._reopen_pack.execute(
            user_id_of(req), parse_uuid(pack_id, "pack_id"), _expected_version(body)
        )
        resp.media = pack_to_dict(pack)
        resp.status = falcon.HTTP_200
