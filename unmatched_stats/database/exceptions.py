"""Errors raised by the storage layer"""

from typing import Optional
from azure.cosmos.exceptions import CosmosHttpResponseError


class DatabaseError(Exception):
    """Base exception for database operations"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class StoreUnavailableError(DatabaseError):
    """The account could not be reached or returned a server error"""


class ItemNotFoundError(DatabaseError):
    pass


class DuplicateItemError(DatabaseError):
    """An item with the same id (or unique field) is already stored"""


class RateLimitError(DatabaseError):
    """Request units exhausted (HTTP 429)"""


_STATUS_ERRORS = {
    404: (ItemNotFoundError, "Item not found"),
    409: (DuplicateItemError, "Item already exists"),
    429: (RateLimitError, "Rate limit exceeded"),
    500: (StoreUnavailableError, "Store unavailable"),
    502: (StoreUnavailableError, "Store unavailable"),
    503: (StoreUnavailableError, "Store unavailable"),
    504: (StoreUnavailableError, "Store unavailable"),
}


def handle_cosmos_error(error: CosmosHttpResponseError) -> DatabaseError:
    """Map a Cosmos status code onto the matching DatabaseError subclass"""
    error_class, prefix = _STATUS_ERRORS.get(
        error.status_code, (DatabaseError, "Database operation failed")
    )
    return error_class(f"{prefix}: {error}", error)
