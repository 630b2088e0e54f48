"""Constants and enums for the ledger and risk engine"""

from enum import Enum


class EntryKind(str, Enum):
    """Supplier ledger entry kinds"""
    OPENING = "opening"
    PURCHASE = "purchase"
    PAYMENT = "payment"


class OpeningBalanceType(str, Enum):
    """Declared direction of a supplier opening balance"""
    DEBIT = "debit"
    CREDIT = "credit"


class TransactionType(str, Enum):
    """Known business transaction types"""
    SALE_RETAIL = "sale-retail"
    SALE_WHOLESALE = "sale-wholesale"
    PURCHASE = "purchase"
    PAYMENT_RECEIVED = "payment-received"
    PAYMENT_SENT = "payment-sent"


class TransactionCategory(str, Enum):
    """Cash-flow direction of a transaction type"""
    INCOME = "income"
    EXPENSE = "expense"
    NEUTRAL = "neutral"


class ComplianceFlag(str, Enum):
    """Compliance flags attached to audit records"""
    LARGE_TRANSACTION = "LARGE_TRANSACTION"
    CTR_REPORTING_REQUIRED = "CTR_REPORTING_REQUIRED"
    INSUFFICIENT_DOCUMENTATION = "INSUFFICIENT_DOCUMENTATION"


class RiskLevel(str, Enum):
    """Risk buckets, also used as anomaly severity"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class AnomalyType(str, Enum):
    """Anomaly detector categories"""
    HIGH_VELOCITY = "HIGH_VELOCITY"
    UNUSUAL_AMOUNT = "UNUSUAL_AMOUNT"
    POTENTIAL_DUPLICATE = "POTENTIAL_DUPLICATE"
    OFF_HOURS_ACTIVITY = "OFF_HOURS_ACTIVITY"


class ComplianceMode(str, Enum):
    """Compliance strictness modes"""
    BASIC = "basic"
    STANDARD = "standard"
    STRICT = "strict"


INCOME_TYPES = (
    TransactionType.SALE_RETAIL.value,
    TransactionType.SALE_WHOLESALE.value,
    TransactionType.PAYMENT_RECEIVED.value,
)
EXPENSE_TYPES = (
    TransactionType.PURCHASE.value,
    TransactionType.PAYMENT_SENT.value,
)

# Statement document codes
DOC_TYPE_OPENING = "OP"
DOC_TYPE_PURCHASE = "PUR"
DOC_TYPE_PAYMENT = "PAY"

# Default configuration values
DEFAULT_LARGE_TRANSACTION_THRESHOLD = 1000.0
DEFAULT_VELOCITY_ALERT_MINUTES = 30
DEFAULT_COMPLIANCE_MODE = ComplianceMode.STANDARD

# Regulatory thresholds (fixed, not configurable)
CTR_THRESHOLD = 10000.0
MIN_DESCRIPTION_LENGTH = 5

# Risk scoring
RISK_AMOUNT_TIERS = (
    (10000.0, 30),
    (5000.0, 20),
    (1000.0, 10),
)
OFF_HOURS_RISK_POINTS = 15
LARGE_PAYMENT_SENT_THRESHOLD = 5000.0
LARGE_PAYMENT_SENT_RISK_POINTS = 20
HIGH_RISK_SCORE = 50
MEDIUM_RISK_SCORE = 25

# Business hours: activity before 06:00 or after 22:59 is off-hours
BUSINESS_HOURS_START = 6
BUSINESS_HOURS_END = 22

# Anomaly detection
HIGH_VELOCITY_COUNT = 10
UNUSUAL_AMOUNT_MULTIPLIER = 2

# Compliance reporting
DOCUMENTATION_TARGET_PCT = 80.0
HIGH_RISK_TOLERANCE = 0.05
RECORD_RETENTION_PERIOD = "7 years"

# Analysis event log size
EVENT_LOG_LIMIT = 100
