"""Translation of constraint violations into domain errors."""

from psycopg import errors

from lumbertrack.domain.exceptions import DuplicateLoadCode, DuplicatePackId, LumberTrackError

LOAD_CODE_CONSTRAINT = "uq_lumber_loads_code"
PACK_ID_CONSTRAINT = "uq_lumber_packs_load_pack_id"


def unique_violation_error(
    exc: errors.UniqueViolation, *, load_id: object = None, code: str = ""
) -> LumberTrackError | None:
    """Domain error for a known unique constraint, None for any other."""
    constraint = exc.diag.constraint_name
    if constraint == LOAD_CODE_CONSTRAINT:
        return DuplicateLoadCode([code])
    if constraint == PACK_ID_CONSTRAINT:
        return DuplicatePackId(load_id, code)
    return None
