"""Transaction classification, financial summary and list filtering tools"""

import pandas as pd
from typing import Iterable, List, Optional, Sequence
from ledger_audit.constants import (
    TransactionType,
    TransactionCategory,
    INCOME_TYPES,
    EXPENSE_TYPES,
)
from ledger_audit.models import Transaction, FinancialSummary
from ledger_audit.utils.logging import get_logger

logger = get_logger(__name__)

SORT_FIELDS = ('date', 'amount', 'type', 'description')


def classify_transaction(transaction_type: str) -> TransactionCategory:
    """
    Map a transaction type to its cash-flow category.

    Unrecognized type strings are neutral: they count toward the total
    but never toward income or expenses.
    """
    if transaction_type in INCOME_TYPES:
        return TransactionCategory.INCOME
    if transaction_type in EXPENSE_TYPES:
        return TransactionCategory.EXPENSE
    return TransactionCategory.NEUTRAL


def summarize_transactions(transactions: Sequence[Transaction]) -> FinancialSummary:
    """
    Aggregate income, expenses and net cash flow for a reporting period

    Args:
        transactions: Transactions in the period

    Returns:
        FinancialSummary; counts_by_type always lists the five known types
        (0 when absent) plus any unrecognized type strings seen
    """
    counts = {txn_type.value: 0 for txn_type in TransactionType}

    if not transactions:
        return FinancialSummary(counts_by_type=counts)

    df = pd.DataFrame([{'type': t.type, 'amount': t.amount} for t in transactions])
    df['category'] = df['type'].map(lambda t: classify_transaction(t).value)

    totals = df.groupby('category')['amount'].sum()
    total_income = float(totals.get(TransactionCategory.INCOME.value, 0.0))
    total_expenses = float(totals.get(TransactionCategory.EXPENSE.value, 0.0))

    for txn_type, count in df['type'].value_counts(sort=False).items():
        counts[txn_type] = int(count)

    neutral = int((df['category'] == TransactionCategory.NEUTRAL.value).sum())
    if neutral:
        logger.warning(f"{neutral} transactions with unrecognized type excluded from income/expense totals")

    summary = FinancialSummary(
        total_income=total_income,
        total_expenses=total_expenses,
        net_flow=total_income - total_expenses,
        total_transactions=len(df),
        counts_by_type=counts
    )

    logger.info(
        f"Summarized {summary.total_transactions} transactions",
        total_income=summary.total_income,
        total_expenses=summary.total_expenses,
        net_flow=summary.net_flow
    )
    return summary


def _amount_text(amount: float) -> str:
    return str(int(amount)) if float(amount).is_integer() else str(amount)


def filter_transactions(
    transactions: Iterable[Transaction],
    search_term: Optional[str] = None,
    min_amount: Optional[float] = None,
    max_amount: Optional[float] = None,
    types: Optional[Iterable[str]] = None
) -> List[Transaction]:
    """
    Filter a transaction list the way the transaction screen does

    Args:
        transactions: Transactions to filter
        search_term: Case-insensitive match on description, type, amount or date
        min_amount: Inclusive lower bound
        max_amount: Inclusive upper bound
        types: Keep only these type strings (empty/None keeps all)

    Returns:
        Matching transactions in input order
    """
    term = search_term.strip().lower() if search_term else None
    wanted_types = set(types) if types else None

    matched = []
    for txn in transactions:
        if wanted_types is not None and txn.type not in wanted_types:
            continue
        if min_amount is not None and txn.amount < min_amount:
            continue
        if max_amount is not None and txn.amount > max_amount:
            continue
        if term:
            haystack = (
                (txn.description or '').lower(),
                txn.type.lower(),
                _amount_text(txn.amount),
                txn.date.isoformat(),
            )
            if not any(term in field for field in haystack):
                continue
        matched.append(txn)

    return matched


def sort_transactions(
    transactions: Iterable[Transaction],
    sort_by: str = 'date',
    descending: bool = True
) -> List[Transaction]:
    """
    Sort transactions by date, amount, type or description.

    Unknown sort fields fall back to date.
    """
    if sort_by not in SORT_FIELDS:
        logger.warning(f"Unknown sort field '{sort_by}', sorting by date")
        sort_by = 'date'

    if sort_by == 'description':
        key = lambda t: t.description or ''
    else:
        key = lambda t: getattr(t, sort_by)

    return sorted(transactions, key=key, reverse=descending)
