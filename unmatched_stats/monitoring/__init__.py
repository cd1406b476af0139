from .logging_config import (
    setup_logging,
    get_logger,
    set_correlation_id,
    get_correlation_id,
    CorrelationFilter,
    JSONFormatter,
)
from .middleware import RequestLoggingMiddleware

__all__ = [
    "setup_logging",
    "get_logger",
    "set_correlation_id",
    "get_correlation_id",
    "CorrelationFilter",
    "JSONFormatter",
    "RequestLoggingMiddleware",
]
