"""Board-feet arithmetic at the stored decimal precision."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from lumbertrack.domain.exceptions import InvalidSplitAmount, ValidationError

BOARD_FEET_QUANTUM = Decimal("0.01")
YIELD_QUANTUM = Decimal("0.01")


def to_board_feet(value: object, field: str = "board_feet") -> Decimal:
    """Parse a quantity into a Decimal with two decimal places."""
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{field} must be a number", field=field) from e
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return amount.quantize(BOARD_FEET_QUANTUM, rounding=ROUND_HALF_UP)


def positive_board_feet(value: Decimal | None, field: str) -> Decimal | None:
    """Reject zero and negative quantities; None passes through."""
    if value is not None and value <= 0:
        raise ValidationError(f"{field} must be greater than 0", field=field)
    return value


def rip_yield(tally: Decimal | None, actual: Decimal | None) -> Decimal | None:
    """Actual over tally as a percentage; None when it cannot be computed."""
    if tally is None or actual is None or tally <= 0:
        return None
    return (actual / tally * 100).quantize(YIELD_QUANTUM, rounding=ROUND_HALF_UP)


def split_board_feet(tally: Decimal, finished: Decimal) -> Decimal:
    """Return the remainder of a partial finish.

    Raises InvalidSplitAmount unless 0 < finished < tally. The result plus
    ``finished`` always equals ``tally`` exactly.
    """
    if tally <= 0:
        raise InvalidSplitAmount(
            "Tally board feet must be greater than 0 for partial finish",
            tally=tally,
            finished=finished,
        )
    if finished <= 0:
        raise InvalidSplitAmount(
            "Actual board feet must be greater than 0 for partial finish",
            tally=tally,
            finished=finished,
        )
    if finished >= tally:
        raise InvalidSplitAmount(
            "Actual board feet must be less than tally board feet for partial finish",
            tally=tally,
            finished=finished,
        )
    return tally - finished
