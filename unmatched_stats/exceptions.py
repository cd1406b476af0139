"""Service-level errors and the HTTP status each one maps to"""

from fastapi import status


class StatsError(Exception):
    """Base class for errors reported to API clients"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StatsError):
    """Malformed or missing input"""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(StatsError):
    """Entity does not exist (or is not visible to the caller)"""
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(StatsError):
    """A unique field is already taken"""
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidCredentialsError(StatsError):
    """Unknown user or wrong password; the two are not distinguished"""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class AuthenticationError(StatsError):
    """Missing, malformed or expired bearer token"""
    status_code = status.HTTP_401_UNAUTHORIZED


class InternalError(StatsError):
    """Unexpected storage failure"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
