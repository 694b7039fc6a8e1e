"""
Logging configuration for stackaudit.

The diagnostic log goes to stderr and is separate from the [INFO]/[WARNING]/
[ERROR] status lines printed by stackaudit.console. Records pass through the
same redaction as console evidence, and are kept to one line each because
they often quote scanner output.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any

from stackaudit.utils.sanitizer import redact_secrets

LOGGER_NAMESPACE = "stackaudit"

# Record attributes copied into JSON output when a caller passes them in `extra`
STRUCTURED_FIELDS = ("stage", "command", "returncode")


class SecretFilter(logging.Filter):
    """Redacts secret-looking values from the message and its arguments."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = redact_secrets(record.msg)

        if isinstance(record.args, tuple):
            record.args = tuple(
                redact_secrets(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        elif isinstance(record.args, dict):
            record.args = {
                k: redact_secrets(v) if isinstance(v, str) else v
                for k, v in record.args.items()
            }

        return True


def _single_line(text: str) -> str:
    text = SanitizingFormatter.CONTROL_CHARS.sub("", text)
    return text.replace("\r", "\\r").replace("\n", "\\n")


class SanitizingFormatter(logging.Formatter):
    """Text formatter that keeps every record on one line."""

    CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

    def format(self, record: logging.LogRecord) -> str:
        return _single_line(super().format(record))


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record, for CI log collectors.

    Keys: timestamp (UTC, ISO 8601), level, logger, message, plus any of
    stage/command/returncode the record carries and the formatted traceback
    under "exception".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in STRUCTURED_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                entry[name] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    no_color: bool = False,
) -> logging.Logger:
    """
    Set up logging for the stackaudit namespace.

    Calling it again replaces the previous handler.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: If True, output structured JSON logs
        no_color: If True, disable colored output

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(SecretFilter())

    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        if no_color:
            fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        else:
            fmt = "\033[90m%(asctime)s\033[0m [\033[1m%(levelname)s\033[0m] %(name)s: %(message)s"
        handler.setFormatter(SanitizingFormatter(fmt, datefmt="%H:%M:%S"))

    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str) -> logging.Logger:
    """Logger under the stackaudit namespace, e.g. get_logger("cli")."""
    if not name.startswith(LOGGER_NAMESPACE):
        name = f"{LOGGER_NAMESPACE}.{name}"
    return logging.getLogger(name)
