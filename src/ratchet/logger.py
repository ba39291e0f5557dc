"""PHI-safe logging for the Ratchet MCP server.

All output goes to stderr so it never corrupts the MCP stdio stream.
Structured context is attached with ``extra={"data": {...}}`` and is passed
through :func:`sanitize` before it is written, so names, contact details,
diagnoses, notes and patient identifiers never reach the log.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from datetime import datetime, timezone
from typing import Any

LOGGER_NAME = "ratchet"
AUDIT_LOGGER_NAME = "ratchet.audit"

SENSITIVE_FIELDS = frozenset(
    {
        "name",
        "firstname",
        "lastname",
        "patientname",
        "phone",
        "phonenumber",
        "email",
        "address",
        "ssn",
        "socialsecurity",
        "dob",
        "dateofbirth",
        "diagnosis",
        "condition",
        "medication",
        "note",
        "notes",
    }
)

_PATIENT_ID_RE = re.compile(r"PT-\d+")

_audit_logger = logging.getLogger(AUDIT_LOGGER_NAME)
# Pinned so LOG_LEVEL=warn|error never drops audit lines
_audit_logger.setLevel(logging.INFO)

# LOG_LEVEL uses "warn"; logging wants WARNING
_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()


def sanitize(data: Any) -> Any:
    """Return a copy of *data* with PHI masked."""
    if data is None:
        return None
    if isinstance(data, str):
        return _PATIENT_ID_RE.sub("PT-[REDACTED]", data)
    if isinstance(data, (list, tuple)):
        return [sanitize(item) for item in data]
    if isinstance(data, dict):
        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            normalized = _normalize_key(str(key))
            if normalized in SENSITIVE_FIELDS:
                sanitized[key] = "[REDACTED]"
            elif "patient" in normalized and isinstance(value, (dict, list)):
                sanitized[key] = "[PATIENT_DATA_REDACTED]"
            else:
                sanitized[key] = sanitize(value)
        return sanitized
    return data


class RedactingFormatter(logging.Formatter):
    """Formats ``[timestamp] [RATCHET] [LEVEL] message {data}`` with PHI removed."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(
            timespec="milliseconds"
        )
        message = sanitize(record.getMessage())
        line = f"[{timestamp}] [RATCHET] [{record.levelname}] {message}"

        data = getattr(record, "data", None)
        if data is not None:
            line += " " + json.dumps(sanitize(data), default=str)

        if record.exc_info:
            # Only the exception type; its message may carry PHI
            exc_type = record.exc_info[0]
            if exc_type is not None:
                line += f" [{exc_type.__name__}]"
        return line


def resolve_level(level: str) -> int:
    return _LEVELS.get(level.lower(), logging.INFO)


def configure_logging(level: str = "info") -> logging.Logger:
    """Install the redacting stderr handler on the ``ratchet`` logger.

    Safe to call more than once; the handler is replaced, not duplicated.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_ratchet_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(RedactingFormatter())
    handler._ratchet_handler = True  # type: ignore[attr-defined]

    logger.addHandler(handler)
    logger.setLevel(resolve_level(level))
    logger.propagate = False
    return logger


def audit(operation: str, success: bool, duration_ms: float | None = None) -> None:
    """Log an operation outcome with no data attached.

    Audit lines go to the ``ratchet.audit`` logger, which stays at INFO
    whatever ``LOG_LEVEL`` is set to.

    Args:
        operation: Service operation name, e.g. ``search_patient``.
        success: Whether the operation completed.
        duration_ms: Elapsed time, if measured.
    """
    msg = f"AUDIT: {operation} - {'SUCCESS' if success else 'FAILURE'}"
    if duration_ms is not None:
        msg += f" ({duration_ms:.0f}ms)"
    _audit_logger.info(msg)
