"""Supplier ledger tools: entry normalization, running balances, reconciliation"""

from collections import defaultdict
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from ledger_audit.constants import (
    EntryKind,
    OpeningBalanceType,
    DOC_TYPE_OPENING,
    DOC_TYPE_PURCHASE,
    DOC_TYPE_PAYMENT,
)
from ledger_audit.models import (
    LedgerEntry,
    LedgerWarning,
    NormalizedLedger,
    LedgerLine,
    LedgerStatement,
    ReconciliationResult,
    SupplierBalance,
)
from ledger_audit.tools.record_parsing import coerce_amount, coerce_date
from ledger_audit.utils.errors import RecordValidationError
from ledger_audit.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
DEFAULT_RECONCILIATION_TOLERANCE = Decimal("0.01")

# Same-date ordering: purchases before payments, then input order
_TIE_BREAK = {
    EntryKind.PURCHASE: 0,
    EntryKind.PAYMENT: 1,
}

_PURCHASE_METADATA = ('supplier_invoice_id', 'delivery_method')
_PAYMENT_METADATA = ('payment_method', 'reference_number')
NOT_A_MAPPING = "record is not a mapping"


def signed_opening_balance(opening_balance: Any, opening_balance_type: Optional[str] = "debit") -> Decimal:
    """
    Signed opening balance: positive = we owe the supplier (Dr).

    A debit-typed positive amount stays positive; a negative amount or a
    credit-typed amount becomes a credit of its absolute value.
    """
    amount = coerce_amount(opening_balance)
    if amount is None:
        return ZERO
    if opening_balance_type != OpeningBalanceType.CREDIT.value and amount > 0:
        return amount
    return -abs(amount)


def _opening_entry(opening_balance: Any, opening_balance_type: Optional[str]) -> Optional[LedgerEntry]:
    signed = signed_opening_balance(opening_balance, opening_balance_type)
    if signed == 0:
        return None

    return LedgerEntry(
        date=None,
        kind=EntryKind.OPENING,
        reference_id=None,
        description="Opening Balance",
        doc_type=DOC_TYPE_OPENING,
        debit=signed if signed > 0 else ZERO,
        credit=-signed if signed < 0 else ZERO,
    )


def _unusable_reason(entry_date, amount) -> Optional[str]:
    if entry_date is None and amount is None:
        return "missing date and amount"
    if entry_date is None:
        return "missing or invalid date"
    if amount is None:
        return "missing or invalid amount"
    if amount <= 0:
        return f"non-positive amount {amount}"
    return None


def _reference(record: Any) -> Any:
    return record.get('id') if isinstance(record, dict) else None


def _description(record: dict) -> str:
    value = record.get('description')
    return str(value).strip() if value is not None else ''


def _metadata(record: dict, keys: Tuple[str, ...]) -> Dict[str, Any]:
    return {key: record[key] for key in keys if record.get(key) is not None}


def _purchase_entry(record: dict) -> Tuple[Optional[LedgerEntry], Optional[str]]:
    if not isinstance(record, dict):
        return None, NOT_A_MAPPING

    entry_date = coerce_date(record.get('date')) or coerce_date(record.get('created_at'))
    amount = coerce_amount(record.get('total_cost'))

    reason = _unusable_reason(entry_date, amount)
    if reason:
        return None, reason

    ref = record.get('id')
    description = _description(record)
    if not description:
        description = f"Purchase #{ref}" if ref is not None else "Purchase"

    return LedgerEntry(
        date=entry_date,
        kind=EntryKind.PURCHASE,
        reference_id=ref,
        description=description,
        doc_type=DOC_TYPE_PURCHASE,
        debit=amount,
        credit=ZERO,
        metadata=_metadata(record, _PURCHASE_METADATA),
    ), None


def _payment_entry(record: dict) -> Tuple[Optional[LedgerEntry], Optional[str]]:
    if not isinstance(record, dict):
        return None, NOT_A_MAPPING

    entry_date = coerce_date(record.get('date')) or coerce_date(record.get('created_at'))
    amount = coerce_amount(record.get('amount'))

    reason = _unusable_reason(entry_date, amount)
    if reason:
        return None, reason

    description = _description(record) or "Payment to supplier"

    return LedgerEntry(
        date=entry_date,
        kind=EntryKind.PAYMENT,
        reference_id=record.get('id'),
        description=description,
        doc_type=DOC_TYPE_PAYMENT,
        debit=ZERO,
        credit=amount,
        metadata=_metadata(record, _PAYMENT_METADATA),
    ), None


def normalize_ledger_entries(
    supplier_id: Union[str, int],
    purchases: Iterable[dict],
    payments: Iterable[dict],
    opening_balance: Any = 0,
    opening_balance_type: Optional[str] = "debit"
) -> NormalizedLedger:
    """
    Convert purchase and payment records into one dated, signed entry list.

    Every purchase becomes a debit for `total_cost`, every payment a
    credit for `amount`. A non-zero opening balance becomes a synthetic
    first entry. Entries are sorted by date; on equal dates purchases come
    before payments, and input order is kept within each kind.

    Records with no usable date or amount are dropped with a warning
    rather than failing the whole ledger.

    Args:
        supplier_id: Supplier identifier
        purchases: [{id, date, total_cost, description, supplier_invoice_id, delivery_method}, ...]
        payments: [{id, date, amount, description, payment_method, reference_number}, ...]
        opening_balance: Declared opening balance (signed)
        opening_balance_type: 'debit' or 'credit'

    Returns:
        NormalizedLedger with sorted entries and warnings for dropped records
    """
    supplier_id = str(supplier_id)
    warnings = []
    dated_entries = []

    sources = (
        (EntryKind.PURCHASE, purchases or [], _purchase_entry),
        (EntryKind.PAYMENT, payments or [], _payment_entry),
    )
    for kind, records, build in sources:
        for record in records:
            entry, reason = build(record)
            if entry is None:
                warnings.append(LedgerWarning(
                    record_kind=kind,
                    reference_id=_reference(record),
                    reason=reason
                ))
                logger.warning(
                    f"Dropping {kind.value} record from ledger: {reason}",
                    supplier_id=supplier_id,
                    reference_id=_reference(record)
                )
                continue
            dated_entries.append(entry)

    # sorted() is stable, so input order survives within (date, kind)
    entries = sorted(dated_entries, key=lambda e: (e.date, _TIE_BREAK[e.kind]))

    opening = _opening_entry(opening_balance, opening_balance_type)
    if opening is not None:
        entries.insert(0, opening)
    elif coerce_amount(opening_balance) is None and opening_balance not in (None, ''):
        warnings.append(LedgerWarning(
            record_kind=EntryKind.OPENING,
            reason=f"invalid opening balance {opening_balance!r}"
        ))
        logger.warning("Ignoring invalid opening balance", supplier_id=supplier_id)

    logger.info(
        f"Normalized ledger for supplier {supplier_id}",
        entries=len(entries),
        dropped=len(warnings)
    )
    return NormalizedLedger(supplier_id=supplier_id, entries=entries, warnings=warnings)


def calculate_running_balance(
    entries: Union[NormalizedLedger, Iterable[LedgerEntry]],
    supplier_id: Optional[Union[str, int]] = None
) -> LedgerStatement:
    """
    Walk entries in order and annotate each with the running balance.

    Single forward pass; the same entries always produce the same lines.

    Args:
        entries: NormalizedLedger or an ordered list of LedgerEntry
        supplier_id: Supplier identifier (taken from a NormalizedLedger if omitted)

    Returns:
        LedgerStatement with per-line running balances and totals
    """
    if isinstance(entries, NormalizedLedger):
        supplier_id = supplier_id if supplier_id is not None else entries.supplier_id
        entries = entries.entries

    total_debit = ZERO
    total_credit = ZERO
    lines = []

    for entry in entries:
        total_debit += entry.debit
        total_credit += entry.credit
        lines.append(LedgerLine(
            **entry.model_dump(),
            running_balance=total_debit - total_credit
        ))

    return LedgerStatement(
        supplier_id=str(supplier_id) if supplier_id is not None else "",
        lines=lines,
        total_debit=total_debit,
        total_credit=total_credit,
        closing_balance=total_debit - total_credit
    )


def reconcile_balance(
    statement: LedgerStatement,
    stored_balance: Any,
    tolerance: Any = DEFAULT_RECONCILIATION_TOLERANCE
) -> ReconciliationResult:
    """
    Compare the computed closing balance with the supplier's stored balance.

    A mismatch is reported, never corrected; the caller decides remediation.

    Raises:
        RecordValidationError: If the stored balance is not a number
    """
    stored = coerce_amount(stored_balance)
    if stored is None:
        raise RecordValidationError(
            f"Stored balance for supplier {statement.supplier_id} is not a number: {stored_balance!r}"
        )

    difference = statement.closing_balance - stored
    is_reconciled = abs(difference) <= Decimal(str(tolerance))

    if not is_reconciled:
        logger.warning(
            f"Balance discrepancy for supplier {statement.supplier_id}",
            computed=statement.closing_balance,
            stored=stored,
            difference=difference
        )

    return ReconciliationResult(
        supplier_id=statement.supplier_id,
        computed_balance=statement.closing_balance,
        stored_balance=stored,
        difference=difference,
        is_reconciled=is_reconciled
    )


def build_supplier_statement(
    supplier_id: Union[str, int],
    purchases: Iterable[dict],
    payments: Iterable[dict],
    opening_balance: Any = 0,
    opening_balance_type: Optional[str] = "debit",
    stored_balance: Any = None,
    tolerance: Any = DEFAULT_RECONCILIATION_TOLERANCE
) -> Tuple[LedgerStatement, Optional[ReconciliationResult], List[LedgerWarning]]:
    """
    Normalize, compute running balances and (optionally) reconcile.

    Returns:
        (statement, reconciliation or None when no stored balance is given, warnings)
    """
    normalized = normalize_ledger_entries(
        supplier_id, purchases, payments, opening_balance, opening_balance_type
    )
    statement = calculate_running_balance(normalized)

    reconciliation = None
    if stored_balance is not None:
        reconciliation = reconcile_balance(statement, stored_balance, tolerance)

    return statement, reconciliation, normalized.warnings


def _totals_by_supplier(records: Iterable[dict], build, side: str) -> Dict[str, Decimal]:
    # Same usability rules as normalize_ledger_entries, so list and statement agree
    totals = defaultdict(lambda: ZERO)
    for record in records or []:
        entry, _ = build(record)
        if entry is None or record.get('supplier_id') is None:
            continue
        totals[str(record['supplier_id'])] += getattr(entry, side)
    return totals


def summarize_supplier_balances(
    suppliers: Iterable[dict],
    purchases: Iterable[dict],
    payments: Iterable[dict]
) -> List[SupplierBalance]:
    """
    Closing balance per supplier: opening + purchases - payments.

    Args:
        suppliers: [{id, name, opening_balance, opening_balance_type}, ...]
        purchases: [{supplier_id, total_cost, ...}, ...]
        payments: [{supplier_id, amount, ...}, ...]

    Returns:
        One SupplierBalance per supplier, in input order
    """
    purchase_totals = _totals_by_supplier(purchases, _purchase_entry, 'debit')
    payment_totals = _totals_by_supplier(payments, _payment_entry, 'credit')

    balances = []
    for supplier in suppliers:
        supplier_id = str(supplier.get('id'))
        opening = signed_opening_balance(
            supplier.get('opening_balance'),
            supplier.get('opening_balance_type') or "debit"
        )
        total_purchases = purchase_totals.get(supplier_id, ZERO)
        total_payments = payment_totals.get(supplier_id, ZERO)

        balances.append(SupplierBalance(
            supplier_id=supplier_id,
            name=supplier.get('name'),
            opening_balance=opening,
            total_purchases=total_purchases,
            total_payments=total_payments,
            closing_balance=opening + total_purchases - total_payments
        ))

    logger.info(f"Summarized balances for {len(balances)} suppliers")
    return balances
