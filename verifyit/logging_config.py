"""
Logging setup for the service and the CLI.

LOG_FORMAT=json emits one object per line (timestamp, level, logger, message,
exception, plus any per-verification context passed via `extra=`); anything
else gives the human-readable text format. LOG_LEVEL defaults to INFO.
"""
import json
import logging
import os
import sys
from datetime import datetime, timezone

TEXT_FORMAT = '[%(asctime)s] %(levelname)s %(name)s — %(message)s'

# Context attached with logger.info(..., extra={...}) that the JSON output keeps
CONTEXT_FIELDS = ('platform', 'analysis_id', 'attempt')

_NOISY_LOGGERS = [
    'urllib3',
    'requests',
    'redis',
    'werkzeug',
    'PIL',
    'fontTools',
]


class JSONFormatter(logging.Formatter):
    """Single-line JSON records."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info and record.exc_info[0] is not None:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def _resolve_level(name):
    level = logging.getLevelName((name or 'INFO').upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(app=None):
    """
    (Re)build the root handler from LOG_LEVEL / LOG_FORMAT.

    When a Flask app is given its own logger is routed through the root
    handler instead of Flask's default one.
    """
    level = _resolve_level(os.getenv('LOG_LEVEL', 'INFO'))
    use_json = os.getenv('LOG_FORMAT', 'text').lower() == 'json'

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if use_json else logging.Formatter(TEXT_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if app is not None:
        app.logger.handlers.clear()
        app.logger.propagate = True
        app.logger.setLevel(level)
