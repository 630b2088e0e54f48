"""Coercion of raw API records into typed values and models"""

import pandas as pd
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Tuple, Union
from pydantic import ValidationError
from ledger_audit.models import Transaction, RecordWarning
from ledger_audit.utils.logging import get_logger

logger = get_logger(__name__)


def coerce_date(value: Any) -> Optional[datetime]:
    """
    Parse a record date into a naive datetime.

    Accepts datetimes, dates and ISO-like strings. Timezone-aware values
    keep their wall-clock time and drop the offset, so hour-based rules
    see the hour the record was entered at.

    Returns:
        datetime, or None when the value is missing or unparseable
    """
    if value is None or value is pd.NaT:
        return None

    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()

    if isinstance(value, datetime):
        return value.replace(tzinfo=None)

    if isinstance(value, date):
        return datetime.combine(value, time())

    if not isinstance(value, str) or not value.strip():
        return None

    parsed = pd.to_datetime(value.strip(), errors='coerce')
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime().replace(tzinfo=None)


def coerce_amount(value: Any) -> Optional[Decimal]:
    """
    Parse a monetary amount.

    Returns:
        Decimal, or None for missing, unparseable, NaN or infinite values
    """
    if value is None or isinstance(value, bool):
        return None

    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None

    if not amount.is_finite():
        return None
    return amount


def _record_id(record: dict, index: int) -> str:
    # /transactions rows carry ref_id instead of id
    for key in ('id', 'ref_id'):
        if record.get(key) is not None:
            return str(record[key])
    return str(index)


def parse_transactions(
    records: Iterable[Union[dict, Transaction]]
) -> Tuple[List[Transaction], List[RecordWarning]]:
    """
    Build Transaction models from raw records, skipping malformed ones.

    A record without a usable date or amount (or one the model rejects,
    such as a negative amount) is skipped with a warning instead of
    aborting the batch.

    Args:
        records: Raw dict records ({id, date, amount, description, type})
                 or already-built Transaction objects

    Returns:
        (transactions in input order, warnings for skipped records)
    """
    transactions = []
    warnings = []

    for index, record in enumerate(records):
        if isinstance(record, Transaction):
            transactions.append(record)
            continue

        if not isinstance(record, dict):
            warnings.append(RecordWarning(record_index=index, transaction_id=None, reason="record is not a mapping"))
            logger.warning(f"Skipping transaction record at index {index}: not a mapping", record_index=index)
            continue

        txn_id = _record_id(record, index)
        txn_date = coerce_date(record.get('date'))
        amount = coerce_amount(record.get('amount'))

        reason = None
        if txn_date is None and amount is None:
            reason = "missing date and amount"
        elif txn_date is None:
            reason = "missing or invalid date"
        elif amount is None:
            reason = "missing or invalid amount"

        if reason is None:
            try:
                transactions.append(Transaction(
                    id=txn_id,
                    date=txn_date,
                    amount=float(amount),
                    description=record.get('description'),
                    type=record.get('type')
                ))
                continue
            except ValidationError as e:
                reason = f"invalid record: {e.errors()[0]['msg']}"

        warnings.append(RecordWarning(record_index=index, transaction_id=txn_id, reason=reason))
        logger.warning(f"Skipping transaction record {txn_id}: {reason}", record_index=index)

    logger.info(
        f"Parsed {len(transactions)} transactions",
        skipped=len(warnings)
    )
    return transactions, warnings
