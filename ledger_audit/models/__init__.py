"""Data models for the ledger and risk engine"""

from .config import AnalysisConfig
from .transaction import Transaction, FinancialSummary, RecordWarning
from .ledger_entry import (
    LedgerEntry,
    LedgerWarning,
    NormalizedLedger,
    LedgerLine,
    LedgerStatement,
    ReconciliationResult,
    SupplierBalance,
    format_balance,
)
from .audit_record import AuditRecord
from .anomaly import Anomaly
from .compliance_report import (
    ComplianceReport,
    ComplianceMetrics,
    RegulatoryRequirements,
    RecordRetention,
    Recommendation,
    ReportPeriod,
)
from .analysis_event import AnalysisEvent, AnalysisResult

__all__ = [
    "AnalysisConfig",
    "Transaction",
    "FinancialSummary",
    "RecordWarning",
    "LedgerEntry",
    "LedgerWarning",
    "NormalizedLedger",
    "LedgerLine",
    "LedgerStatement",
    "ReconciliationResult",
    "SupplierBalance",
    "format_balance",
    "AuditRecord",
    "Anomaly",
    "ComplianceReport",
    "ComplianceMetrics",
    "RegulatoryRequirements",
    "RecordRetention",
    "Recommendation",
    "ReportPeriod",
    "AnalysisEvent",
    "AnalysisResult",
]
