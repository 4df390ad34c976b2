from __future__ import annotations

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class DormServiceError(Exception):
    """
    Base class for every error the service reports to a caller.

    `kind` is the stable machine-readable name, `message` is safe to show
    to the end user, `status_code` is the HTTP status used at the boundary.
    """

    kind = "DormServiceError"
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(DormServiceError):
    kind = "NotFound"
    status_code = 404
    default_message = "Not found"


class OrphanReference(NotFound):
    """A stored room reference points at a room that no longer exists."""

    default_message = "Assigned room not found"


class CapacityExceeded(DormServiceError):
    kind = "CapacityExceeded"
    status_code = 400
    default_message = "Room is already full"


class NotAssigned(DormServiceError):
    kind = "NotAssigned"
    status_code = 400
    default_message = "You are not currently assigned to any room"


class InvalidCredentials(DormServiceError):
    kind = "InvalidCredentials"
    status_code = 401
    default_message = "Invalid email or password"


class Unauthorized(DormServiceError):
    kind = "Unauthorized"
    status_code = 401
    default_message = "Unauthorized"


class ConflictError(DormServiceError):
    kind = "ConflictError"
    status_code = 409
    default_message = "The record was modified concurrently, please retry"


async def dorm_service_error_handler(request: Request, exc: DormServiceError):
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.kind, request.method, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthorized) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.kind, "message": exc.message},
        headers=headers,
    )
