"""Logging setup: JSON lines in production, plain text elsewhere.

Every handler installed here carries ``SensitiveDataFilter``. Session tokens,
passwords, the billing key and subscriber phone numbers in query strings
never reach the log output.
"""

import json
import logging
import re
import sys
from datetime import UTC, datetime

REDACTED = "[REDACTED]"

_REDACTIONS = [
    (re.compile(r"(Authorization:\s*Bearer\s+)\S+", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"(\btoken=)[^\s;&]+", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"(X-Billing-Key[\"':\s]+)[^\s\"',]+", re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r'((?:password|secret|api[_-]?key)["\s:=]+)[^\s&"\']+', re.IGNORECASE), rf"\1{REDACTED}"),
    (re.compile(r"(\bphone=)\+?\d+(\d{3})\b", re.IGNORECASE), r"\1***\2"),
    (re.compile(r"\beyJ[\w-]+\.[\w-]+\.[\w-]+"), "[REDACTED_JWT]"),
]

# LogRecord attributes copied into JSON output when set via ``extra=``
EXTRA_FIELDS = ("request_id", "method", "path", "status_code", "duration_ms", "user_id", "article_id")


def _scrub(value):
    if not isinstance(value, str):
        return value
    for pattern, replacement in _REDACTIONS:
        value = pattern.sub(replacement, value)
    return value


def mask_phone(phone: str | None) -> str:
    """Keep the last three digits of a phone number."""
    if not phone:
        return ""
    if len(phone) <= 3:
        return "***"
    return "*" * (len(phone) - 3) + phone[-3:]


class SensitiveDataFilter(logging.Filter):
    """Scrubs the message template and its string arguments in place."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = _scrub(record.msg)
        if isinstance(record.args, tuple):
            record.args = tuple(_scrub(arg) for arg in record.args)
        elif isinstance(record.args, dict):
            record.args = {key: _scrub(arg) for key, arg in record.args.items()}
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({key: getattr(record, key) for key in EXTRA_FIELDS if hasattr(record, key)})
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(json_output: bool = False, level: str = "INFO") -> None:
    """
    Replace the root handlers with a single stdout handler.

    Args:
        json_output: One JSON object per line (production) instead of text.
        level: Root log level name.
    """
    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s", datefmt="%H:%M:%S")
        )
    handler.addFilter(SensitiveDataFilter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # uvicorn access lines include query strings, so they pass through the filter too
    logging.getLogger("uvicorn.access").handlers.clear()
    logging.getLogger("uvicorn.access").propagate = True
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
