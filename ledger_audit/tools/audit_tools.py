"""Audit trail tools: checksums, compliance flags and risk scoring"""

import zlib
from typing import List, Optional, Sequence
from ledger_audit.constants import (
    ComplianceFlag,
    RiskLevel,
    TransactionType,
    CTR_THRESHOLD,
    MIN_DESCRIPTION_LENGTH,
    RISK_AMOUNT_TIERS,
    OFF_HOURS_RISK_POINTS,
    LARGE_PAYMENT_SENT_THRESHOLD,
    LARGE_PAYMENT_SENT_RISK_POINTS,
    HIGH_RISK_SCORE,
    MEDIUM_RISK_SCORE,
    BUSINESS_HOURS_START,
    BUSINESS_HOURS_END,
)
from ledger_audit.models import Transaction, AuditRecord, AnalysisConfig
from ledger_audit.utils.logging import get_logger

logger = get_logger(__name__)


def generate_checksum(transaction: Transaction) -> str:
    """
    Tamper-evidence checksum for a transaction.

    Non-cryptographic and stable across runs: CRC-32 and Adler-32 of
    id + type + amount + date + description, as 16 hex characters.
    """
    data = (
        f"{transaction.id}{transaction.type}{transaction.amount}"
        f"{transaction.date.isoformat()}{transaction.description or ''}"
    ).encode("utf-8")
    return f"{zlib.crc32(data):08x}{zlib.adler32(data):08x}"


def verify_checksum(transaction: Transaction, record: AuditRecord) -> bool:
    """Check a transaction against the checksum stored in its audit record"""
    return (
        record.transaction_id == transaction.id
        and record.checksum == generate_checksum(transaction)
    )


def is_documented(description: Optional[str]) -> bool:
    return bool(description) and len(description) >= MIN_DESCRIPTION_LENGTH


def is_off_hours(transaction: Transaction) -> bool:
    hour = transaction.date.hour
    return hour < BUSINESS_HOURS_START or hour > BUSINESS_HOURS_END


def generate_compliance_flags(
    transaction: Transaction,
    large_transaction_threshold: float
) -> List[ComplianceFlag]:
    """
    Compliance flags for one transaction (additive, non-exclusive)

    Args:
        transaction: Transaction to check
        large_transaction_threshold: Amount above which LARGE_TRANSACTION applies

    Returns:
        Flags in rule order
    """
    flags = []

    if transaction.amount > large_transaction_threshold:
        flags.append(ComplianceFlag.LARGE_TRANSACTION)

    # Currency Transaction Report
    if transaction.type == TransactionType.PAYMENT_RECEIVED.value and transaction.amount > CTR_THRESHOLD:
        flags.append(ComplianceFlag.CTR_REPORTING_REQUIRED)

    if not is_documented(transaction.description):
        flags.append(ComplianceFlag.INSUFFICIENT_DOCUMENTATION)

    return flags


def calculate_risk_score(transaction: Transaction) -> int:
    """
    Cumulative risk points for one transaction

    Scoring:
    - Amount > 10000: +30, else > 5000: +20, else > 1000: +10
    - Hour before 06:00 or after 22:59: +15
    - payment-sent over 5000: +20
    """
    score = 0

    for threshold, points in RISK_AMOUNT_TIERS:
        if transaction.amount > threshold:
            score += points
            break

    if is_off_hours(transaction):
        score += OFF_HOURS_RISK_POINTS

    if (transaction.type == TransactionType.PAYMENT_SENT.value
            and transaction.amount > LARGE_PAYMENT_SENT_THRESHOLD):
        score += LARGE_PAYMENT_SENT_RISK_POINTS

    return score


def calculate_risk_level(score: int) -> RiskLevel:
    if score >= HIGH_RISK_SCORE:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def generate_audit_record(transaction: Transaction, config: AnalysisConfig) -> AuditRecord:
    score = calculate_risk_score(transaction)
    return AuditRecord(
        transaction_id=transaction.id,
        timestamp=transaction.date,
        checksum=generate_checksum(transaction),
        compliance_flags=generate_compliance_flags(transaction, config.large_transaction_threshold),
        risk_score=score,
        risk_level=calculate_risk_level(score)
    )


def generate_audit_trail(
    transactions: Sequence[Transaction],
    config: Optional[AnalysisConfig] = None
) -> List[AuditRecord]:
    """
    Derive one audit record per transaction

    Args:
        transactions: Transactions to audit
        config: Analysis thresholds (defaults apply when None)

    Returns:
        Audit records in input order
    """
    config = config or AnalysisConfig()
    records = [generate_audit_record(txn, config) for txn in transactions]

    high_risk = sum(1 for r in records if r.risk_level == RiskLevel.HIGH)
    flagged = sum(1 for r in records if r.is_flagged)
    logger.info(
        f"Generated {len(records)} audit records",
        high_risk=high_risk,
        flagged=flagged
    )
    return records
