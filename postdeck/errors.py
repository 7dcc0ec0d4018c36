"""Error taxonomy shared by the repository, the renderer and both front-ends.

Every failure that crosses into the HTTP layer is an AppError. The HTTP status is
not stored on the error: it is derived from the error kind through a StatusMap,
so each front-end can decide how a missing post is reported.
"""

from dataclasses import dataclass
from enum import Enum
from http import HTTPStatus
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


@dataclass(frozen=True)
class StatusMap:
    """Maps error kinds to HTTP status codes.

    Validation and internal failures always map to 400 and 500. The not-found
    status differs between front-ends: the admin API reports a missing post as
    400, the public site as 404.
    """

    not_found_status: HTTPStatus = HTTPStatus.BAD_REQUEST

    def status_for(self, kind: ErrorKind) -> HTTPStatus:
        if kind is ErrorKind.VALIDATION:
            return HTTPStatus.BAD_REQUEST
        if kind is ErrorKind.NOT_FOUND:
            return self.not_found_status
        return HTTPStatus.INTERNAL_SERVER_ERROR


ADMIN_STATUS_MAP = StatusMap(not_found_status=HTTPStatus.BAD_REQUEST)
SITE_STATUS_MAP = StatusMap(not_found_status=HTTPStatus.NOT_FOUND)


class AppError(Exception):
    """Base exception for every failure surfaced by postdeck."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def status(self, status_map: StatusMap = ADMIN_STATUS_MAP) -> HTTPStatus:
        return status_map.status_for(self.kind)

    def to_response(self, status_map: StatusMap = ADMIN_STATUS_MAP) -> dict[str, Any]:
        """Serialize as the JSON error body returned by both front-ends."""
        return {
            "err_msg": self.message,
            "status_code": int(self.status(status_map)),
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r})"


class ValidationError(AppError):
    """Malformed or missing input: empty fields, negative pagination."""

    kind = ErrorKind.VALIDATION


class NotFoundError(AppError):
    """Lookup or delete on an id that has no row."""

    kind = ErrorKind.NOT_FOUND


class InternalError(AppError):
    """Store, pool, filesystem or template failure."""

    kind = ErrorKind.INTERNAL
