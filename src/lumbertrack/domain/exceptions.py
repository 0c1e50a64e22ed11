"""Domain exceptions."""

from decimal import Decimal


class LumberTrackError(Exception):
    """Base exception for the lumber pipeline.

    ``details`` carries the structured context (entity, field, identifiers)
    returned to the operator alongside the message.
    """

    def __init__(self, message: str, **details: object) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(LumberTrackError):
    """Referenced load, item or pack does not exist."""

    def __init__(self, entity: str, identifier: str) -> None:
        super().__init__(
            f"{entity} not found: {identifier}",
            entity=entity,
            identifier=identifier,
        )


class DuplicateLoadCode(LumberTrackError):
    """One or more load codes already exist (or repeat within a batch)."""

    def __init__(self, codes: list[str]) -> None:
        self.codes = sorted(set(codes))
        super().__init__(
            f"Load code(s) already exist: {', '.join(self.codes)}",
            table="lumber_loads",
            field="code",
            codes=self.codes,
        )


class DuplicatePackId(LumberTrackError):
    """Pack id is already used by another pack of the same load."""

    def __init__(self, load_id: object, pack_id: str) -> None:
        self.pack_id = pack_id
        super().__init__(
            f"Pack {pack_id} already exists in load {load_id}",
            table="lumber_packs",
            field="pack_id",
            load_id=str(load_id),
            pack_id=pack_id,
        )


class InvalidSplitAmount(LumberTrackError):
    """Partial finish amounts violate the conservation precondition."""

    def __init__(self, reason: str, tally: Decimal, finished: Decimal) -> None:
        self.reason = reason
        super().__init__(
            reason,
            field="actual_board_feet",
            tally_board_feet=str(tally),
            actual_board_feet=str(finished),
        )


class Unauthorized(LumberTrackError):
    """No caller identity was supplied."""

    def __init__(self, message: str = "Caller identity required") -> None:
        super().__init__(message)


class PermissionDenied(LumberTrackError):
    """Caller is not allowed to perform the requested action."""

    pass


class Conflict(LumberTrackError):
    """Record changed since the caller read it, or an idempotency key was reused."""

    pass


class PackFinished(LumberTrackError):
    """Finished packs are frozen until reopened."""

    def __init__(self, pack_id: str) -> None:
        super().__init__(
            f"Pack {pack_id} is finished; reopen it before changing it",
            table="lumber_packs",
            pack_id=pack_id,
        )


class ValidationError(LumberTrackError):
    """Validation failed for input data."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, field=field)
        self.field = field
