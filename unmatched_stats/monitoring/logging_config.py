"""
Logging setup for the API and the management CLI.

Every record carries the correlation id of the request that produced it;
output is one JSON object per line, or a plain single-line format locally.
"""

import json
import logging
import logging.config
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

correlation_id: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# Attributes present on every LogRecord; anything else arrived through ``extra``
_STANDARD_ATTRS = set(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {
    'message', 'asctime', 'correlation_id',
}

PLAIN_FORMAT = '%(asctime)s %(levelname)-7s [%(correlation_id)s] %(name)s: %(message)s'

# Third-party loggers and the level they are capped at
LIBRARY_LEVELS = {
    'uvicorn': 'INFO',
    'uvicorn.access': 'WARNING',
    'azure': 'WARNING',
}


class CorrelationFilter(logging.Filter):
    """Stamp the current correlation id onto each record."""

    def filter(self, record):
        record.correlation_id = correlation_id.get() or '-'
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record, including any ``extra`` fields."""

    def format(self, record):
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'correlation_id': getattr(record, 'correlation_id', '-'),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(
            (key, value) for key, value in vars(record).items() if key not in _STANDARD_ATTRS
        )

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry['exception'] = {
                'type': exc_type.__name__,
                'message': str(exc_value),
                'traceback': traceback.format_exception(*record.exc_info),
            }

        return json.dumps(entry, default=str)


def _logger_config(level: str) -> Dict[str, Any]:
    return {'level': level, 'handlers': ['console'], 'propagate': False}


def setup_logging(log_level: str = "INFO", enable_json: bool = True) -> None:
    """
    Configure the console handler for the app and its libraries.

    Args:
        log_level: Level for the ``unmatched_stats`` loggers and the root logger
        enable_json: JSON lines when true, ``PLAIN_FORMAT`` otherwise
    """
    loggers = {name: _logger_config(level) for name, level in LIBRARY_LEVELS.items()}
    loggers['unmatched_stats'] = _logger_config(log_level)

    logging.config.dictConfig({
        'version': 1,
        'disable_existing_loggers': False,
        'filters': {'correlation': {'()': CorrelationFilter}},
        'formatters': {
            'json': {'()': JSONFormatter},
            'plain': {'format': PLAIN_FORMAT},
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'stream': 'ext://sys.stdout',
                'filters': ['correlation'],
                'formatter': 'json' if enable_json else 'plain',
            },
        },
        'loggers': loggers,
        'root': {'level': log_level, 'handlers': ['console']},
    })


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"unmatched_stats.{name}")


def set_correlation_id(request_id: Optional[str] = None) -> str:
    """Bind a correlation id to the current context, generating one if needed."""
    request_id = request_id or str(uuid.uuid4())
    correlation_id.set(request_id)
    return request_id


def get_correlation_id() -> Optional[str]:
    return correlation_id.get()
