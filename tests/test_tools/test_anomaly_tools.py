"""Unit tests for anomaly detection"""

from datetime import datetime, timedelta, timezone
from ledger_audit.constants import AnomalyType, RiskLevel
from ledger_audit.models import AnalysisConfig
from ledger_audit.tools.record_parsing import parse_transactions
from ledger_audit.tools.anomaly_tools import (
    detect_high_velocity,
    detect_unusual_amounts,
    find_duplicate_groups,
    detect_duplicates,
    detect_off_hours_activity,
    detect_anomalies,
)


def test_high_velocity_needs_more_than_ten_recent(make_transaction, now):
    recent = [
        make_transaction(f"v{i}", 10, date=now - timedelta(minutes=i))
        for i in range(10)
    ]

    assert detect_high_velocity(recent, 30, now) == []

    burst = recent + [make_transaction("v10", 10, date=now - timedelta(minutes=29))]
    anomalies = detect_high_velocity(burst, 30, now)

    assert len(anomalies) == 1
    assert anomalies[0].type == AnomalyType.HIGH_VELOCITY
    assert anomalies[0].severity == RiskLevel.HIGH
    assert anomalies[0].description == "11 transactions in 30 minutes"
    assert len(anomalies[0].affected_transactions) == 11


def test_high_velocity_ignores_old_transactions(make_transaction, now):
    old = [
        make_transaction(f"o{i}", 10, date=now - timedelta(minutes=31))
        for i in range(15)
    ]

    assert detect_high_velocity(old, 30, now) == []
    assert len(detect_high_velocity(old, 60, now)) == 1


def test_high_velocity_counts_future_dated(make_transaction, now):
    future = [
        make_transaction(f"f{i}", 10, date=now + timedelta(hours=2))
        for i in range(11)
    ]

    assert len(detect_high_velocity(future, 30, now)) == 1


def test_unusual_amounts(make_transaction):
    transactions = [
        make_transaction("small", 2000),
        make_transaction("big", 2000.5),
    ]

    anomalies = detect_unusual_amounts(transactions, 1000)

    assert [a.affected_transactions for a in anomalies] == [["big"]]
    assert anomalies[0].severity == RiskLevel.MEDIUM
    assert anomalies[0].timestamp == transactions[1].date


def test_two_same_day_purchases_are_potential_duplicates(make_transaction, now):
    transactions = [
        make_transaction("p1", 1000, "purchase", datetime(2025, 3, 10, 9, 0)),
        make_transaction("s1", 1000, "sale-retail", datetime(2025, 3, 10, 9, 30)),
        make_transaction("p2", 1000, "purchase", datetime(2025, 3, 10, 17, 45)),
    ]

    anomalies = detect_duplicates(transactions, now)

    assert len(anomalies) == 1
    assert anomalies[0].type == AnomalyType.POTENTIAL_DUPLICATE
    assert anomalies[0].affected_transactions == ["p1", "p2"]
    assert anomalies[0].description == "2 potentially duplicate transactions detected"


def test_duplicates_require_same_calendar_day(make_transaction):
    transactions = [
        make_transaction("p1", 1000, "purchase", datetime(2025, 3, 10, 23, 59)),
        make_transaction("p2", 1000, "purchase", datetime(2025, 3, 11, 0, 1)),
    ]

    assert find_duplicate_groups(transactions) == []


def test_duplicate_groups_in_first_appearance_order(make_transaction):
    day = datetime(2025, 3, 10, 12)
    transactions = [
        make_transaction("b1", 50, "purchase", day),
        make_transaction("a1", 75, "sale-retail", day),
        make_transaction("b2", 50, "purchase", day),
        make_transaction("a2", 75, "sale-retail", day),
        make_transaction("b3", 50, "purchase", day),
    ]

    groups = find_duplicate_groups(transactions)

    assert [[t.id for t in group] for group in groups] == [["b1", "b2", "b3"], ["a1", "a2"]]


def test_off_hours_activity(make_transaction, now):
    transactions = [
        make_transaction("early", 10, date=datetime(2025, 3, 10, 5, 59)),
        make_transaction("open", 10, date=datetime(2025, 3, 10, 6, 0)),
        make_transaction("late", 10, date=datetime(2025, 3, 10, 23, 0)),
    ]

    anomalies = detect_off_hours_activity(transactions, now)

    assert len(anomalies) == 1
    assert anomalies[0].severity == RiskLevel.LOW
    assert anomalies[0].affected_transactions == ["early", "late"]
    assert anomalies[0].timestamp == now


def test_no_off_hours_activity(make_transaction, now):
    assert detect_off_hours_activity([make_transaction()], now) == []


def test_detect_anomalies_fixture_batch(transaction_records, now):
    transactions, _ = parse_transactions(transaction_records)

    anomalies = detect_anomalies(transactions, now, AnalysisConfig())

    by_type = {}
    for anomaly in anomalies:
        by_type.setdefault(anomaly.type, []).append(anomaly)

    assert set(by_type) == {
        AnomalyType.UNUSUAL_AMOUNT,
        AnomalyType.POTENTIAL_DUPLICATE,
        AnomalyType.OFF_HOURS_ACTIVITY,
    }
    assert sorted(a.affected_transactions[0] for a in by_type[AnomalyType.UNUSUAL_AMOUNT]) == [
        "t-1001", "t-1004", "t-1005"
    ]
    assert by_type[AnomalyType.POTENTIAL_DUPLICATE][0].affected_transactions == ["t-1002", "t-1003"]
    assert by_type[AnomalyType.OFF_HOURS_ACTIVITY][0].affected_transactions == ["t-1004"]


def test_detect_anomalies_empty_batch(now):
    assert detect_anomalies([], now) == []


def test_aware_reference_time_compares_with_naive_dates(make_transaction, now):
    aware_now = now.replace(tzinfo=timezone.utc)
    burst = [
        make_transaction(f"v{i}", 10, date=now - timedelta(minutes=i))
        for i in range(11)
    ]

    anomalies = detect_high_velocity(burst, 30, aware_now)

    assert len(anomalies) == 1
    assert anomalies[0].timestamp == now


def test_detect_anomalies_accepts_aware_reference_time(transaction_records, now):
    transactions, _ = parse_transactions(transaction_records)

    aware = detect_anomalies(transactions, now.replace(tzinfo=timezone.utc))

    assert [a.type for a in aware] == [a.type for a in detect_anomalies(transactions, now)]
