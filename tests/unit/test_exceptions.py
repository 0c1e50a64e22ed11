"""Unit tests for domain exceptions."""

from decimal import Decimal
from uuid import uuid4

import pytest

from lumbertrack.domain.exceptions import (
    Conflict,
    DuplicateLoadCode,
    DuplicatePackId,
    InvalidSplitAmount,
    LumberTrackError,
    NotFound,
    PackFinished,
    PermissionDenied,
    Unauthorized,
    ValidationError,
)


@pytest.mark.parametrize(
    "error_type",
    [
        NotFound,
        DuplicateLoadCode,
        DuplicatePackId,
        InvalidSplitAmount,
        Unauthorized,
        PermissionDenied,
        Conflict,
        PackFinished,
        ValidationError,
    ],
)
def test_errors_inherit_lumbertrack_error(error_type) -> None:
    assert issubclass(error_type, LumberTrackError)


def test_not_found_message_and_details() -> None:
    err = NotFound("Pack", "abc")
    assert str(err) == "Pack not found: abc"
    assert err.details == {"entity": "Pack", "identifier": "abc"}


def test_duplicate_load_code_lists_every_code_once_sorted() -> None:
    err = DuplicateLoadCode(["R-2002", "R-2001", "R-2002"])
    assert err.codes == ["R-2001", "R-2002"]
    assert "R-2001, R-2002" in err.message
    assert err.details["field"] == "code"


def test_duplicate_pack_id_carries_load_and_pack() -> None:
    load_id = uuid4()
    err = DuplicatePackId(load_id, "P-1")
    assert err.pack_id == "P-1"
    assert err.details["load_id"] == str(load_id)
    assert err.details["table"] == "lumber_packs"


def test_invalid_split_amount_keeps_reason_and_amounts() -> None:
    err = InvalidSplitAmount("too much", tally=Decimal("500.00"), finished=Decimal("600.00"))
    assert err.reason == "too much"
    assert err.details["tally_board_feet"] == "500.00"
    assert err.details["actual_board_feet"] == "600.00"


def test_validation_error_field() -> None:
    err = ValidationError("Invalid", field="code")
    assert err.field == "code"
    assert err.details == {"field": "code"}


def test_unauthorized_default_message() -> None:
    assert Unauthorized().message == "Caller identity required"


def test_pack_finished_message_names_pack() -> None:
    assert "P-7" in PackFinished("P-7").message
