"""Domain error kinds raised by services and mapped to HTTP status codes in main."""

from fastapi import status


class PlannerError(Exception):
    """Base class for every expected failure of a planner operation."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PlannerError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(PlannerError):
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(PlannerError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(PlannerError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(PlannerError):
    status_code = status.HTTP_409_CONFLICT


class ImportFailedError(PlannerError):
    """The import transaction was rolled back; nothing was changed."""

    status_code = status.HTTP_400_BAD_REQUEST


class RateLimitError(PlannerError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS


NOTHING_TO_UPDATE = "Keine Änderungen angegeben"
