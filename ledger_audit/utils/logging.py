"""Structured logging configuration"""

import logging
import json
import os
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import Any, Dict

# Fields attached to every log line emitted inside a log_context() block
_log_context: ContextVar[Dict[str, Any]] = ContextVar("ledger_audit_log_context", default={})


@contextmanager
def log_context(**fields):
    """
    Attach fields (analysis_run_id, supplier_id, ...) to every log line in the block.

    Nested blocks add to the outer fields and restore them on exit.
    """
    token = _log_context.set({**_log_context.get(), **fields})
    try:
        yield
    finally:
        _log_context.reset(token)


class StructuredLogger:
    """Structured JSON logger for the ledger engine"""

    def __init__(self, name: str, level: str = "INFO"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))

        # get_logger() is called once per module; keep a single handler
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def log(self, level: str, message: str, exc_info: bool = False, **kwargs):
        """Log message; keyword arguments become top-level JSON fields"""
        getattr(self.logger, level.lower())(message, exc_info=exc_info, extra={"fields": kwargs})

    def info(self, message: str, **kwargs):
        self.log("info", message, **kwargs)

    def warning(self, message: str, **kwargs):
        self.log("warning", message, **kwargs)

    def error(self, message: str, **kwargs):
        self.log("error", message, **kwargs)

    def debug(self, message: str, **kwargs):
        self.log("debug", message, **kwargs)

    def exception(self, message: str, **kwargs):
        self.log("error", message, exc_info=True, **kwargs)


class JSONFormatter(logging.Formatter):
    """One JSON object per line: envelope, bound context, then call-site fields"""

    def format(self, record):
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(_log_context.get())
        log_data.update(getattr(record, "fields", {}))

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Decimal balances and datetimes render as strings
        return json.dumps(log_data, default=str)


def get_logger(name: str) -> StructuredLogger:
    """Get or create structured logger"""
    log_level = os.getenv("LOG_LEVEL", "INFO")
    return StructuredLogger(name, log_level)
