"""Supplier ledger data models"""

from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Dict, Any, List
from ledger_audit.constants import EntryKind


def format_balance(balance: Decimal) -> str:
    """
    Render a signed balance for statements: "600 Dr", "150.50 Cr".

    Non-negative balances (zero included) are reported as Dr.
    """
    side = "Dr" if balance >= 0 else "Cr"
    magnitude = abs(balance)
    if magnitude == magnitude.to_integral_value():
        text = str(magnitude.quantize(Decimal(1)))
    else:
        text = str(magnitude.quantize(Decimal("0.01")))
    return f"{text} {side}"


class LedgerEntry(BaseModel):
    """One economic event affecting a supplier balance"""

    date: Optional[datetime] = Field(None, description="Event date (None only for the opening entry)")
    kind: EntryKind = Field(..., description="opening | purchase | payment")
    reference_id: Optional[str] = Field(None, description="Source purchase/payment ID")
    description: str = Field(..., description="Statement description")
    doc_type: str = Field(..., description="Statement document code (OP, PUR, PAY)")
    debit: Decimal = Field(Decimal("0"), ge=0, description="Increases amount owed to supplier")
    credit: Decimal = Field(Decimal("0"), ge=0, description="Decreases amount owed to supplier")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Pass-through source fields")

    class Config:
        frozen = True
        coerce_numbers_to_str = True
        json_schema_extra = {
            "example": {
                "date": "2025-02-03T00:00:00",
                "kind": "purchase",
                "reference_id": "17",
                "description": "Purchase #17",
                "doc_type": "PUR",
                "debit": "300.00",
                "credit": "0",
                "metadata": {"supplier_invoice_id": "INV-889", "delivery_method": "pickup"}
            }
        }

    @property
    def signed_amount(self) -> Decimal:
        """Effect of this entry on the balance"""
        return self.debit - self.credit


class LedgerWarning(BaseModel):
    """A purchase or payment record dropped during normalization"""

    record_kind: EntryKind = Field(..., description="Kind of the dropped record")
    reference_id: Optional[str] = Field(None, description="ID of the dropped record, if any")
    reason: str = Field(..., description="Why the record was dropped")

    class Config:
        coerce_numbers_to_str = True


class NormalizedLedger(BaseModel):
    """Chronologically sorted ledger entries for one supplier"""

    supplier_id: str
    entries: List[LedgerEntry] = Field(default_factory=list)
    warnings: List[LedgerWarning] = Field(default_factory=list)

    class Config:
        coerce_numbers_to_str = True


class LedgerLine(LedgerEntry):
    """Ledger entry annotated with the balance after it"""

    running_balance: Decimal = Field(..., description="total_debit - total_credit after this entry")

    @property
    def balance_display(self) -> str:
        return format_balance(self.running_balance)


class LedgerStatement(BaseModel):
    """Supplier statement: lines with running balances and totals"""

    supplier_id: str
    lines: List[LedgerLine] = Field(default_factory=list)
    total_debit: Decimal = Decimal("0")
    total_credit: Decimal = Decimal("0")
    closing_balance: Decimal = Decimal("0")

    class Config:
        coerce_numbers_to_str = True

    @property
    def closing_balance_display(self) -> str:
        return format_balance(self.closing_balance)


class ReconciliationResult(BaseModel):
    """Comparison of the computed closing balance with the stored balance"""

    supplier_id: str
    computed_balance: Decimal
    stored_balance: Decimal
    difference: Decimal = Field(..., description="computed_balance - stored_balance")
    is_reconciled: bool

    class Config:
        coerce_numbers_to_str = True


class SupplierBalance(BaseModel):
    """Closing balance row for the supplier list view"""

    supplier_id: str
    name: Optional[str] = None
    opening_balance: Decimal = Decimal("0")
    total_purchases: Decimal = Decimal("0")
    total_payments: Decimal = Decimal("0")
    closing_balance: Decimal = Decimal("0")

    class Config:
        coerce_numbers_to_str = True

    @property
    def closing_balance_display(self) -> str:
        return format_balance(self.closing_balance)
