import json
import logging
import os
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

# Context variable for tagging log records with the deck being generated
deck_id_var: ContextVar[Optional[str]] = ContextVar('deck_id', default=None)

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
    'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname', 'process',
    'processName', 'relativeCreated', 'thread', 'threadName', 'exc_info',
    'exc_text', 'stack_info', 'taskName',
}


class StructuredFormatter(logging.Formatter):
    """JSON structured log formatter"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        deck_id = deck_id_var.get()
        if deck_id:
            log_data['deck_id'] = deck_id

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Anything passed through `extra=` ends up on the record
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_data:
                log_data[key] = value

        return json.dumps(log_data, default=str)


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """Minimal logging setup used by the server, the CLI and the services.

    - Sets root logger level (``LOG_LEVEL`` when not given)
    - Ensures a single StreamHandler is attached
    - ``LOG_FORMAT=json`` switches to structured output
    """
    level = level or os.getenv('LOG_LEVEL', 'INFO')
    fmt = fmt or os.getenv('LOG_FORMAT', 'text')

    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler()
        if fmt == 'json':
            handler.setFormatter(StructuredFormatter())
        else:
            handler.setFormatter(logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ))
        root.addHandler(handler)
    try:
        root.setLevel(getattr(logging, level.upper()))
    except (AttributeError, TypeError):
        root.setLevel(logging.INFO)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger after ensuring logging is initialized."""
    if not logging.getLogger().handlers:
        setup_logging()
    return logging.getLogger(name)
