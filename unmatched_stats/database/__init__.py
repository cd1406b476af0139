"""Database connection and utilities for Azure Cosmos DB"""

from .connection import CosmosDBConnection
from .exceptions import (
    DatabaseError,
    StoreUnavailableError,
    ItemNotFoundError,
    DuplicateItemError,
    RateLimitError,
    handle_cosmos_error,
)

__all__ = [
    "CosmosDBConnection",
    "DatabaseError",
    "StoreUnavailableError",
    "ItemNotFoundError",
    "DuplicateItemError",
    "RateLimitError",
    "handle_cosmos_error",
]
