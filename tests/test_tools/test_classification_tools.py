"""Unit tests for transaction classification, summaries and list filtering"""

import pytest
from datetime import datetime
from ledger_audit.constants import TransactionCategory
from ledger_audit.tools.record_parsing import parse_transactions
from ledger_audit.tools.classification_tools import (
    classify_transaction,
    summarize_transactions,
    filter_transactions,
    sort_transactions,
)


@pytest.mark.parametrize("txn_type, expected", [
    ("sale-retail", TransactionCategory.INCOME),
    ("sale-wholesale", TransactionCategory.INCOME),
    ("payment-received", TransactionCategory.INCOME),
    ("purchase", TransactionCategory.EXPENSE),
    ("payment-sent", TransactionCategory.EXPENSE),
    ("refund", TransactionCategory.NEUTRAL),
    ("", TransactionCategory.NEUTRAL),
])
def test_classify_transaction(txn_type, expected):
    assert classify_transaction(txn_type) == expected


def test_summarize_transactions(transaction_records):
    transactions, _ = parse_transactions(transaction_records)

    summary = summarize_transactions(transactions)

    assert summary.total_income == 14500.0
    assert summary.total_expenses == 8000.0
    assert summary.net_flow == 6500.0
    assert summary.total_transactions == 6
    assert summary.counts_by_type == {
        "sale-retail": 0,
        "sale-wholesale": 1,
        "purchase": 2,
        "payment-received": 1,
        "payment-sent": 1,
        "refund": 1,
    }


def test_counts_sum_to_total_with_unknown_types(make_transaction):
    transactions = [
        make_transaction("a", 10, "sale-retail"),
        make_transaction("b", 20, "mystery"),
        make_transaction("c", 30, "mystery"),
        make_transaction("d", 40, "purchase"),
    ]

    summary = summarize_transactions(transactions)

    assert sum(summary.counts_by_type.values()) == summary.total_transactions == 4
    assert summary.counts_by_type["mystery"] == 2
    # Unknown types count toward the total only
    assert summary.total_income == 10.0
    assert summary.total_expenses == 40.0


def test_summarize_empty_batch():
    summary = summarize_transactions([])

    assert summary.total_income == 0.0
    assert summary.total_expenses == 0.0
    assert summary.net_flow == 0.0
    assert summary.total_transactions == 0
    assert set(summary.counts_by_type.values()) == {0}
    assert len(summary.counts_by_type) == 5


@pytest.fixture
def screen_transactions(make_transaction):
    return [
        make_transaction("1", 250.0, "sale-retail", datetime(2025, 3, 1, 10), "Walk-in customer"),
        make_transaction("2", 1200.0, "purchase", datetime(2025, 3, 3, 10), "Steel rods"),
        make_transaction("3", 75.5, "payment-sent", datetime(2025, 3, 2, 10), None),
        make_transaction("4", 3000.0, "sale-wholesale", datetime(2025, 3, 4, 10), "Order for Ali Traders"),
    ]


def test_filter_by_search_term(screen_transactions):
    assert [t.id for t in filter_transactions(screen_transactions, search_term="ALI")] == ["4"]
    assert [t.id for t in filter_transactions(screen_transactions, search_term="purchase")] == ["2"]
    assert [t.id for t in filter_transactions(screen_transactions, search_term="1200")] == ["2"]
    assert [t.id for t in filter_transactions(screen_transactions, search_term="2025-03-02")] == ["3"]


def test_filter_by_amount_range_and_types(screen_transactions):
    in_range = filter_transactions(screen_transactions, min_amount=100, max_amount=1200)
    assert [t.id for t in in_range] == ["1", "2"]

    sales = filter_transactions(screen_transactions, types=["sale-retail", "sale-wholesale"])
    assert [t.id for t in sales] == ["1", "4"]


def test_filter_without_criteria_keeps_everything(screen_transactions):
    assert filter_transactions(screen_transactions, search_term="  ") == screen_transactions


def test_sort_transactions(screen_transactions):
    assert [t.id for t in sort_transactions(screen_transactions)] == ["4", "2", "3", "1"]
    assert [t.id for t in sort_transactions(screen_transactions, "amount", descending=False)] == ["3", "1", "2", "4"]
    assert [t.id for t in sort_transactions(screen_transactions, "description", descending=False)] == ["3", "4", "2", "1"]


def test_sort_unknown_field_falls_back_to_date(screen_transactions):
    assert sort_transactions(screen_transactions, "vendor") == sort_transactions(screen_transactions, "date")
