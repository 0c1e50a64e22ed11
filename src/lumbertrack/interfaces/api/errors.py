"""Mapping of domain errors to HTTP responses."""

import logging

import falcon
import falcon.asgi

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

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: list[tuple[type[LumberTrackError], str]] = [
    (NotFound, falcon.HTTP_404),
    (DuplicateLoadCode, falcon.HTTP_409),
    (DuplicatePackId, falcon.HTTP_409),
    (InvalidSplitAmount, falcon.HTTP_422),
    (Unauthorized, falcon.HTTP_401),
    (PermissionDenied, falcon.HTTP_403),
    (Conflict, falcon.HTTP_409),
    (PackFinished, falcon.HTTP_409),
    (ValidationError, falcon.HTTP_400),
]


def status_for(error: LumberTrackError) -> str:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return falcon.HTTP_400


async def handle_domain_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: LumberTrackError, params
) -> None:
    """Answer a domain error with its status, message and details."""
    resp.status = status_for(ex)
    resp.media = {
        "error": type(ex).__name__,
        "message": ex.message,
        "details": {k: v for k, v in ex.details.items() if v is not None},
    }


async def handle_unexpected_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params
) -> None:
    """Log the traceback and answer 500."""
    logger.error("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}
