"""
Logging Configuration
Custom JSON Logger implementation for local tooling.

Provides:
- CustomJsonFormatter: one JSON object per log line, request id aware
- setup_logging: YAML dictConfig loader with ${VAR} substitution
"""

import json
import logging
import logging.config
import os
import string
from datetime import datetime, timezone

import yaml

from .request_context import get_request_id


# LogRecord attributes that are never copied into the JSON payload.
_STANDARD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class CustomJsonFormatter(logging.Formatter):
    """
    JSON Formatter.

    Fields:
      - _time: ISO8601 timestamp (millisecond precision)
      - level: Log level
      - logger: Logger name (e.g. uvicorn.access, sqs_invoke.resolver)
      - message: Log message
      - request_id: Request ID of the inbound SendMessage call, if any
    """

    def format(self, record: logging.LogRecord) -> str:
        request_id = getattr(record, "request_id", None) or get_request_id()

        log_data = {
            "_time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if request_id:
            log_data["request_id"] = request_id

        # Include extra fields
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_logging(config_path: str = "logging.yml"):
    """
    Load the YAML config, substitute environment variables, and initialize logging.

    Supports ${LOG_LEVEL} and ${LOG_FORMAT} (console | json) placeholders.
    """
    if not os.path.exists(config_path):
        logging.basicConfig(
            level=os.environ.get("LOG_LEVEL", "INFO"),
            format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        )
        return

    with open(config_path, "r", encoding="utf-8") as f:
        # Substitute environment variables using string.Template.
        template = string.Template(f.read())

        # Default values.
        mapping = os.environ.copy()
        mapping.setdefault("LOG_LEVEL", "INFO")
        mapping.setdefault("LOG_FORMAT", "console")

        content = template.safe_substitute(mapping)
        config = yaml.safe_load(content)
        logging.config.dictConfig(config)
