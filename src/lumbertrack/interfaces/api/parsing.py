"""Request body parsing into typed values.

Malformed values raise ValidationError naming the offending field, which the
app answers with 400.
"""

from datetime import date
from decimal import Decimal
from enum import StrEnum
from uuid import UUID

import falcon.asgi

from lumbertrack.application.dto.pack_dto import CrewInput
from lumbertrack.domain.exceptions import ValidationError
from lumbertrack.domain.value_objects import to_board_feet

CREW_FIELDS = ("operator_id", "stacker_1_id", "stacker_2_id", "stacker_3_id", "stacker_4_id")


async def read_body(req: falcon.asgi.Request) -> dict:
    """JSON object body, or ValidationError."""
    try:
        body = await req.get_media(default_when_empty=None)
    except falcon.MediaMalformedError as e:
        raise ValidationError("Request body is not valid JSON") from e
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def user_id_of(req: falcon.asgi.Request) -> str | None:
    user = getattr(req.context, "user", None)
    return user.user_id if user else None


def parse_uuid(value: object, field: str) -> UUID:
    try:
        return UUID(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid {field}", field=field) from e


def optional_uuid(value: object, field: str) -> UUID | None:
    return parse_uuid(value, field) if value not in (None, "") else None


def require(body: dict, field: str) -> object:
    value = body.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required", field=field)
    return value


def optional_decimal(value: object, field: str) -> Decimal | None:
    return to_board_feet(value, field) if value not in (None, "") else None


def optional_date(value: object, field: str) -> date | None:
    if value in (None, ""):
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"{field} must be an ISO date", field=field) from e


def optional_int(value: object, field: str) -> int | None:
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be an integer", field=field)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field} must be an integer", field=field) from e


def optional_bool(value: object, field: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{field} must be true or false", field=field)
    return value


def optional_enum(enum_type: type[StrEnum], value: object, field: str) -> StrEnum | None:
    if value in (None, ""):
        return None
    try:
        return enum_type(value)
    except ValueError as e:
        allowed = ", ".join(m.value for m in enum_type)
        raise ValidationError(f"{field} must be one of: {allowed}", field=field) from e


def optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def idempotency_key(req: falcon.asgi.Request, body: dict) -> str:
    """The Idempotency-Key header, falling back to ``idempotency_key`` in the body."""
    return (
        optional_str(req.get_header("Idempotency-Key"))
        or optional_str(body.get("idempotency_key"))
        or ""
    )


def parse_crew(body: dict) -> CrewInput | None:
    if not any(f in body for f in CREW_FIELDS):
        return None
    return CrewInput(**{f: optional_str(body.get(f)) for f in CREW_FIELDS})
