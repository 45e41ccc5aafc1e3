"""One-line JSON rendering of plugin log records."""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any

# Attributes every LogRecord carries; anything else came in through ``extra``
STANDARD_FIELDS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage',
    'exc_info', 'exc_text', 'stack_info', 'taskName', 'message', 'asctime'
})


class StructuredFormatter(logging.Formatter):
    """Formats a record as a JSON object on a single line.

    Audit events put their fields under ``extra``, so a CI log scraper can
    filter on ``extra.event_type`` without parsing the message.
    """

    def __init__(self, include_extra: bool = True):
        super().__init__()
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'source': f"{record.module}:{record.funcName}:{record.lineno}",
            'pid': record.process,
        }

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)

        extra = extract_extra_fields(record) if self.include_extra else {}
        if extra:
            entry['extra'] = extra

        return json.dumps(entry, ensure_ascii=False, separators=(',', ':'), default=str)


def extract_extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """Fields passed through ``extra``; values JSON cannot encode become strings."""
    fields = {}
    for key, value in record.__dict__.items():
        if key in STANDARD_FIELDS or key.startswith('_'):
            continue
        try:
            json.dumps(value)
        except (TypeError, ValueError):
            value = str(value)
        fields[key] = value
    return fields
