"""
Structured logging for service-binding lookups.

Events are emitted as single-line JSON on the "cf_services" logger. The
library stays silent (NullHandler) until the application calls
setup_logging(). Credential values never enter an event: payloads carry
service names, counts and error summaries only, and any mapping passed in
goes through _sanitize() first.

Event types:
  env       — environment variable read (loaded / missing / not_unicode)
  catalog   — catalog parse (parsed / rejected)
  lookup    — credential lookup (found / missing)
"""

import json
import logging
import time
from typing import Any, Optional

from cf_services import config

_logger = logging.getLogger(config.LOGGER_NAME)
_logger.addHandler(logging.NullHandler())

# Sensitive key patterns to redact
_SENSITIVE_KEYS = {
    "password", "token", "secret", "api_key", "apikey", "api_secret",
    "client_secret", "licensekey", "license_key", "uri", "jdbcurl", "url",
}

# Max length for truncated fields
_MAX_FIELD_LEN = 200


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------
class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": record.created,
            "level": record.levelname,
            "message": record.getMessage(),
        }
        if hasattr(record, "structured_data"):
            entry.update(record.structured_data)
        return json.dumps(entry, default=str)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------
def setup_logging(level: Optional[str] = None, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """Attach a JSON handler to the library logger. Call once at startup.

    Args:
        level: Level name ("DEBUG", "INFO", ...). Defaults to
            CF_SERVICES_LOG_LEVEL, then INFO.
        handler: Handler to attach. Defaults to a stderr StreamHandler.

    Returns:
        The configured logger.
    """
    level_name = (level or config.LOG_LEVEL).upper()
    _logger.setLevel(getattr(logging, level_name, logging.INFO))

    # Avoid duplicate handlers on repeated calls
    if not any(isinstance(h.formatter, JSONFormatter) for h in _logger.handlers):
        handler = handler or logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        _logger.addHandler(handler)
    _logger.propagate = False
    return _logger


def get_logger() -> logging.Logger:
    return _logger


# ---------------------------------------------------------------------------
# Sanitization helpers
# ---------------------------------------------------------------------------
def _sanitize(params: dict) -> dict:
    """Redact sensitive keys from a mapping (shallow copy, recursive on dicts)."""
    if not params:
        return params
    result = {}
    for k, v in params.items():
        if str(k).lower() in _SENSITIVE_KEYS:
            result[k] = "***REDACTED***"
        elif isinstance(v, dict):
            result[k] = _sanitize(v)
        else:
            result[k] = v
    return result


def _truncate(value: Any, max_len: int = _MAX_FIELD_LEN) -> Any:
    """Truncate string values beyond max_len, preserving non-strings."""
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "..."
    return value


# ---------------------------------------------------------------------------
# Internal emit
# ---------------------------------------------------------------------------
def _emit(event_type: str, data: dict, level: int = logging.DEBUG) -> str:
    """Log a structured event. Returns the JSON string that was built."""
    entry = {
        "event_type": event_type,
        "timestamp": time.time(),
    }
    entry.update(data)
    json_str = json.dumps(entry, default=str)

    if _logger.isEnabledFor(level):
        record = _logger.makeRecord(
            _logger.name, level, "", 0, json_str, (), None,
        )
        record.structured_data = entry
        _logger.handle(record)

    return json_str


# ---------------------------------------------------------------------------
# Public event emitters
# ---------------------------------------------------------------------------
def log_env_read(var_name: str, status: str, length: int = 0, **extra) -> str:
    """Log an environment variable read (loaded, missing, not_unicode)."""
    data = {"var_name": var_name, "status": status}
    if status == "loaded":
        data["length"] = length
    data.update(_sanitize(extra))
    level = logging.DEBUG if status == "loaded" else logging.WARNING
    return _emit("env", data, level)


def log_catalog_parse(status: str, services: Optional[list] = None, errors: Optional[list] = None, **extra) -> str:
    """Log a catalog parse outcome (parsed, rejected)."""
    data = {"status": status}
    if services is not None:
        data["services"] = sorted(services)
        data["service_count"] = len(services)
    if errors:
        data["errors"] = [_truncate(e) for e in errors[:10]]
        data["error_count"] = len(errors)
    data.update(_sanitize(extra))
    level = logging.DEBUG if status == "parsed" else logging.WARNING
    return _emit("catalog", data, level)


def log_lookup(service_name: str, status: str, binding_count: int = 0, **extra) -> str:
    """Log a credential lookup (found, missing)."""
    data = {"service_name": _truncate(service_name), "status": status}
    if status == "found":
        data["binding_count"] = binding_count
    data.update(_sanitize(extra))
    level = logging.DEBUG if status == "found" else logging.INFO
    return _emit("lookup", data, level)
