"""Load item API resources."""

import falcon.asgi

from lumbertrack.application.dto.pack_dto import PackTallyInput
from lumbertrack.application.use_cases.load.update_load_item import UpdateLoadItemUseCase
from lumbertrack.application.use_cases.pack.create_pack_tallies import (
    CreatePackTalliesUseCase,
)
from lumbertrack.domain.exceptions import ValidationError
from lumbertrack.domain.value_objects import Thickness
from lumbertrack.interfaces.api.parsing import (
    optional_decimal,
    optional_enum,
    optional_int,
    optional_str,
    parse_uuid,
    read_body,
    require,
    user_id_of,
)
from lumbertrack.interfaces.api.serializers import item_to_dict, pack_to_dict

ITEM_FIELD_PARSERS = {
    "species": lambda v, f: str(require({f: v}, f)).strip(),
    "grade": lambda v, f: str(require({f: v}, f)).strip(),
    "thickness": lambda v, f: optional_enum(Thickness, require({f: v}, f), f),
    "estimated_footage": optional_decimal,
    "actual_footage": optional_decimal,
    "price": optional_decimal,
}


class ItemResource:
    """PATCH /v1/items/{item_id} - partial update, including actual footage."""

    def __init__(self, update_item: UpdateLoadItemUseCase) -> None:
        self._update_item = update_item

    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        body = await read_body(req)
        unknown = sorted(set(body) - set(ITEM_FIELD_PARSERS))
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(unknown)}", field=unknown[0]
            )
        changes = {f: ITEM_FIELD_PARSERS[f](v, f) for f, v in body.items()}
        item = await self._update_item.execute(
            user_id_of(req), parse_uuid(item_id, "item_id"), changes
        )
        resp.media = item_to_dict(item)
        resp.status = falcon.HTTP_200


class ItemPacksResource:
    """POST /v1/items/{item_id}/packs - record pack tallies for an item."""

    def __init__(self, create_pack_tallies: CreatePackTalliesUseCase) -> None:
        self._create_pack_tallies = create_pack_tallies

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, item_id: str
    ) -> None:
        body = await read_body(req)
        raw_packs = body.get("packs") or []
        if not isinstance(raw_packs, list) or not all(isinstance(p, dict) for p in raw_packs):
            raise ValidationError("packs must be a list of objects", field="packs")

        tallies = [
            PackTallyInput(
                pack_id=optional_str(p.get("pack_id")) or "",
                length=optional_int(p.get("length"), "length"),
                tally_board_feet=optional_decimal(p.get("tally_board_feet"), "tally_board_feet"),
            )
            for p in raw_packs
        ]
        packs = await self._create_pack_tallies.execute(
            user_id_of(req), parse_uuid(item_id, "item_id"), tallies
        )
        resp.media = {"items": [pack_to_dict(p) for p in packs]}
        resp.status = falcon.HTTP_201
