"""Anomaly detection tools for transaction batches"""

import pandas as pd
from datetime import datetime, timedelta
from typing import List, Optional, Sequence
from ledger_audit.constants import (
    AnomalyType,
    RiskLevel,
    HIGH_VELOCITY_COUNT,
    UNUSUAL_AMOUNT_MULTIPLIER,
)
from ledger_audit.models import Transaction, Anomaly, AnalysisConfig
from ledger_audit.tools.audit_tools import is_off_hours
from ledger_audit.tools.record_parsing import coerce_date
from ledger_audit.utils.logging import get_logger

logger = get_logger(__name__)

DUPLICATE_KEY = ['type', 'amount', 'day']


def detect_high_velocity(
    transactions: Sequence[Transaction],
    velocity_alert_minutes: int,
    now: datetime
) -> List[Anomaly]:
    """
    Flag bursts of activity: more than 10 transactions in the look-back window.

    A transaction counts as recent when `now - date` is at most
    `velocity_alert_minutes` (future-dated transactions count too).

    Returns:
        Zero or one HIGH_VELOCITY anomaly referencing every recent transaction
    """
    now = coerce_date(now)
    window = timedelta(minutes=velocity_alert_minutes)
    recent = [txn for txn in transactions if now - txn.date <= window]

    if len(recent) <= HIGH_VELOCITY_COUNT:
        return []

    logger.warning(f"High velocity: {len(recent)} transactions in {velocity_alert_minutes} minutes")
    return [Anomaly(
        type=AnomalyType.HIGH_VELOCITY,
        severity=RiskLevel.HIGH,
        description=f"{len(recent)} transactions in {velocity_alert_minutes} minutes",
        timestamp=now,
        affected_transactions=[txn.id for txn in recent],
        recommendation="Review transaction patterns and verify authenticity"
    )]


def detect_unusual_amounts(
    transactions: Sequence[Transaction],
    large_transaction_threshold: float
) -> List[Anomaly]:
    """
    One UNUSUAL_AMOUNT anomaly per transaction above twice the large threshold
    """
    limit = large_transaction_threshold * UNUSUAL_AMOUNT_MULTIPLIER

    return [
        Anomaly(
            type=AnomalyType.UNUSUAL_AMOUNT,
            severity=RiskLevel.MEDIUM,
            description=f"Transaction amount {txn.amount:,.2f} exceeds normal patterns",
            timestamp=txn.date,
            affected_transactions=[txn.id],
            recommendation="Verify transaction legitimacy and documentation"
        )
        for txn in transactions
        if txn.amount > limit
    ]


def find_duplicate_groups(transactions: Sequence[Transaction]) -> List[List[Transaction]]:
    """
    Group transactions sharing type, amount and calendar day

    Returns:
        Groups with more than one member, in order of first appearance;
        members keep input order
    """
    if not transactions:
        return []

    df = pd.DataFrame({
        'position': range(len(transactions)),
        'type': [txn.type for txn in transactions],
        'amount': [txn.amount for txn in transactions],
        'day': [txn.date.date() for txn in transactions],
    })

    duplicates = df[df.duplicated(subset=DUPLICATE_KEY, keep=False)]
    if duplicates.empty:
        return []

    return [
        [transactions[int(position)] for position in group['position']]
        for _, group in duplicates.groupby(DUPLICATE_KEY, sort=False)
    ]


def detect_duplicates(transactions: Sequence[Transaction], now: datetime) -> List[Anomaly]:
    """One POTENTIAL_DUPLICATE anomaly per duplicate group"""
    return [
        Anomaly(
            type=AnomalyType.POTENTIAL_DUPLICATE,
            severity=RiskLevel.MEDIUM,
            description=f"{len(group)} potentially duplicate transactions detected",
            timestamp=now,
            affected_transactions=[txn.id for txn in group],
            recommendation="Review for unintentional duplicate processing"
        )
        for group in find_duplicate_groups(transactions)
    ]


def detect_off_hours_activity(transactions: Sequence[Transaction], now: datetime) -> List[Anomaly]:
    """
    Zero or one OFF_HOURS_ACTIVITY anomaly covering every transaction
    dated before 06:00 or after 22:59
    """
    off_hours = [txn for txn in transactions if is_off_hours(txn)]

    if not off_hours:
        return []

    return [Anomaly(
        type=AnomalyType.OFF_HOURS_ACTIVITY,
        severity=RiskLevel.LOW,
        description=f"{len(off_hours)} transactions processed outside business hours",
        timestamp=now,
        affected_transactions=[txn.id for txn in off_hours],
        recommendation="Review authorization for off-hours transactions"
    )]


def detect_anomalies(
    transactions: Sequence[Transaction],
    now: datetime,
    config: Optional[AnalysisConfig] = None
) -> List[Anomaly]:
    """
    Run all four detectors over the same batch

    Args:
        transactions: Transaction batch
        now: Reference time for the velocity detector and batch anomalies
        config: Analysis thresholds (defaults apply when None)

    Returns:
        Velocity, unusual amount, duplicate and off-hours anomalies, concatenated
    """
    config = config or AnalysisConfig()
    now = coerce_date(now)

    anomalies = (
        detect_high_velocity(transactions, config.velocity_alert_minutes, now)
        + detect_unusual_amounts(transactions, config.large_transaction_threshold)
        + detect_duplicates(transactions, now)
        + detect_off_hours_activity(transactions, now)
    )

    logger.info(
        f"Anomaly detection complete: {len(anomalies)} anomalies",
        transactions=len(transactions)
    )
    return anomalies
