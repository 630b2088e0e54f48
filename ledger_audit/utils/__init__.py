"""Utility modules"""

from .config_loader import load_config, save_config, build_analysis_config
from .errors import (
    LedgerAuditError,
    ConfigurationError,
    RecordValidationError,
    ReconciliationError
)

__all__ = [
    "load_config",
    "save_config",
    "build_analysis_config",
    "LedgerAuditError",
    "ConfigurationError",
    "RecordValidationError",
    "ReconciliationError"
]
