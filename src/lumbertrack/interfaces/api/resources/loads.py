"""Load API resources."""

import falcon.asgi

from lumbertrack.application.dto.load_dto import (
    BulkLoadRow,
    BulkLoadSharedFields,
    LoadCreateInput,
    LoadItemInput,
)
from lumbertrack.application.use_cases.load.bulk_create_loads import BulkCreateLoadsUseCase
from lumbertrack.application.use_cases.load.create_load import CreateLoadUseCase
from lumbertrack.application.use_cases.load.delete_load import DeleteLoadUseCase
from lumbertrack.application.use_cases.load.get_load import GetLoadUseCase
from lumbertrack.application.use_cases.load.mark_po_generated import MarkPoGeneratedUseCase
from lumbertrack.application.use_cases.load.update_load import UpdateLoadUseCase
from lumbertrack.domain.exceptions import Unauthorized, ValidationError
from lumbertrack.domain.value_objects import LumberType, PickupOrDelivery, Thickness
from lumbertrack.interfaces.api.parsing import (
    optional_bool,
    optional_date,
    optional_decimal,
    optional_enum,
    optional_int,
    optional_str,
    optional_uuid,
    parse_uuid,
    read_body,
    require,
    user_id_of,
)
from lumbertrack.interfaces.api.serializers import load_details_to_dict, load_to_dict

LOAD_FIELD_PARSERS = {
    "code": lambda v, f: optional_str(v),
    "supplier_id": parse_uuid,
    "supplier_location_id": optional_uuid,
    "lumber_type": lambda v, f: optional_enum(LumberType, v, f),
    "pickup_or_delivery": lambda v, f: optional_enum(PickupOrDelivery, v, f),
    "estimated_delivery_date": optional_date,
    "actual_arrival_date": optional_date,
    "comments": lambda v, f: optional_str(v),
    "pickup_number": lambda v, f: optional_str(v),
    "plant": lambda v, f: optional_str(v),
    "pickup_date": optional_date,
    "invoice_number": lambda v, f: optional_str(v),
    "invoice_total": optional_decimal,
    "invoice_date": optional_date,
    "load_quality": optional_int,
    "is_entered": optional_bool,
    "is_paid": optional_bool,
}


def _parse_item(raw: object) -> LoadItemInput:
    if not isinstance(raw, dict):
        raise ValidationError("Each item must be an object", field="items")
    return LoadItemInput(
        species=str(require(raw, "species")).strip(),
        grade=str(require(raw, "grade")).strip(),
        thickness=optional_enum(Thickness, require(raw, "thickness"), "thickness"),
        estimated_footage=optional_decimal(raw.get("estimated_footage"), "estimated_footage"),
        price=optional_decimal(raw.get("price"), "price"),
    )


class LoadsResource:
    """GET/POST /v1/loads - list and create loads."""

    def __init__(self, create_load: CreateLoadUseCase, unit_of_work_factory: type) -> None:
        self._create_load = create_load
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List loads with cursor pagination."""
        if not user_id_of(req):
            raise Unauthorized()

        cursor = req.get_param("cursor")
        if cursor:
            parse_uuid(cursor, "cursor")
        limit = req.get_param_as_int("limit") or 20
        limit = min(max(limit, 1), 100)

        async with self._uow_factory() as uow:
            loads, next_cursor = await uow.loads.list(cursor=cursor, limit=limit)

        resp.media = {
            "items": [load_to_dict(load) for load in loads],
            "next_cursor": next_cursor,
        }
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create load with its items."""
        body = await read_body(req)
        raw_items = body.get("items") or []
        if not isinstance(raw_items, list):
            raise ValidationError("items must be a list", field="items")

        input_data = LoadCreateInput(
            code=str(require(body, "code")),
            supplier_id=parse_uuid(require(body, "supplier_id"), "supplier_id"),
            items=[_parse_item(raw) for raw in raw_items],
            supplier_location_id=optional_uuid(
                body.get("supplier_location_id"), "supplier_location_id"
            ),
            lumber_type=optional_enum(LumberType, body.get("lumber_type"), "lumber_type"),
            pickup_or_delivery=optional_enum(
                PickupOrDelivery, body.get("pickup_or_delivery"), "pickup_or_delivery"
            ),
            estimated_delivery_date=optional_date(
                body.get("estimated_delivery_date"), "estimated_delivery_date"
            ),
            comments=optional_str(body.get("comments")),
        )
        result = await self._create_load.execute(user_id_of(req), input_data)
        resp.media = load_details_to_dict(result)
        resp.status = falcon.HTTP_201


class BulkLoadsResource:
    """POST /v1/loads/bulk - create many single-item loads at once."""

    def __init__(self, bulk_create_loads: BulkCreateLoadsUseCase) -> None:
        self._bulk_create_loads = bulk_create_loads

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_body(req)
        raw_loads = body.get("loads") or []
        if not isinstance(raw_loads, list):
            raise ValidationError("loads must be a list", field="loads")

        shared = BulkLoadSharedFields(
            supplier_id=parse_uuid(require(body, "supplier_id"), "supplier_id"),
            supplier_location_id=optional_uuid(
                body.get("supplier_location_id"), "supplier_location_id"
            ),
            lumber_type=optional_enum(LumberType, body.get("lumber_type"), "lumber_type"),
            pickup_or_delivery=optional_enum(
                PickupOrDelivery, body.get("pickup_or_delivery"), "pickup_or_delivery"
            ),
            estimated_delivery_date=optional_date(
                body.get("estimated_delivery_date"), "estimated_delivery_date"
            ),
            comments=optional_str(body.get("comments")),
        )
        rows = []
        for raw in raw_loads:
            item = _parse_item(raw)
            rows.append(
                BulkLoadRow(
                    code=str(require(raw, "code")),
                    species=item.species,
                    grade=item.grade,
                    thickness=item.thickness,
                    estimated_footage=item.estimated_footage,
                    price=item.price,
                )
            )

        created = await self._bulk_create_loads.execute(user_id_of(req), shared, rows)
        resp.media = {"items": [load_details_to_dict(d) for d in created], "count": len(created)}
        resp.status = falcon.HTTP_201


class LoadResource:
    """GET/PATCH/DELETE /v1/loads/{load_id}."""

    def __init__(
        self,
        get_load: GetLoadUseCase,
        update_load: UpdateLoadUseCase,
        delete_load: DeleteLoadUseCase,
    ) -> None:
        self._get_load = get_load
        self._update_load = update_load
        self._delete_load = delete_load

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, load_id: str
    ) -> None:
        if not user_id_of(req):
            raise Unauthorized()
        result = await self._get_load.execute(parse_uuid(load_id, "load_id"))
        resp.media = load_details_to_dict(result)
        resp.status = falcon.HTTP_200

    async def on_patch(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, load_id: str
    ) -> None:
        """Update only the fields present in the body."""
        body = await read_body(req)
        unknown = sorted(set(body) - set(LOAD_FIELD_PARSERS))
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(unknown)}", field=unknown[0]
            )
        changes = {f: LOAD_FIELD_PARSERS[f](v, f) for f, v in body.items()}
        load = await self._update_load.execute(
            user_id_of(req), parse_uuid(load_id, "load_id"), changes
        )
        resp.media = load_to_dict(load)
        resp.status = falcon.HTTP_200

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, load_id: str
    ) -> None:
        code = await self._delete_load.execute(user_id_of(req), parse_uuid(load_id, "load_id"))
        resp.media = {"deleted": True, "code": code}
        resp.status = falcon.HTTP_200


class LoadByCodeResource:
    """GET /v1/loads/by-code/{code}."""

    def __init__(self, get_load: GetLoadUseCase) -> None:
        self._get_load = get_load

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, code: str
    ) -> None:
        if not user_id_of(req):
            raise Unauthorized()
        result = await self._get_load.by_code(code)
        resp.media = load_details_to_dict(result)
        resp.status = falcon.HTTP_200


class LoadPoGeneratedResource:
    """POST /v1/loads/{load_id}/po-generated - record the rendered purchase order."""

    def __init__(self, mark_po_generated: MarkPoGeneratedUseCase) -> None:
        self._mark_po_generated = mark_po_generated

    async def on_post(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, load_id: str
    ) -> None:
        load = await self._mark_po_generated.execute(
            user_id_of(req), parse_uuid(load_id, "load_id")
        )
        resp.media = load_to_dict(load)
        resp.status = falcon.HTTP_200
