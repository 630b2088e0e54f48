"""Transaction data model"""

from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Dict, Optional


class Transaction(BaseModel):
    """Business transaction (sale, purchase or payment)"""

    id: str = Field(..., description="Transaction ID")
    date: datetime = Field(..., description="Transaction timestamp")
    amount: float = Field(..., ge=0, description="Transaction amount")
    description: Optional[str] = Field(None, description="Free-text description")
    type: str = Field(..., description="Transaction type (sale-retail, purchase, ...)")

    @field_validator("date")
    @classmethod
    def drop_timezone(cls, value: datetime) -> datetime:
        # Hour rules read wall-clock time; aware and naive dates must compare
        return value.replace(tzinfo=None) if value.tzinfo is not None else value

    class Config:
        frozen = True
        coerce_numbers_to_str = True
        json_schema_extra = {
            "example": {
                "id": "1042",
                "date": "2025-02-03T10:00:00",
                "amount": 2500.00,
                "description": "Sale to Ali Traders (ID: 1042)",
                "type": "sale-wholesale"
            }
        }


class FinancialSummary(BaseModel):
    """Income / expense totals for a reporting period"""

    total_income: float = Field(0.0, description="Sum of income-classified amounts")
    total_expenses: float = Field(0.0, description="Sum of expense-classified amounts")
    net_flow: float = Field(0.0, description="total_income - total_expenses")
    total_transactions: int = Field(0, description="Number of transactions, unknown types included")
    counts_by_type: Dict[str, int] = Field(default_factory=dict, description="Occurrences per type string")


class RecordWarning(BaseModel):
    """A raw transaction record skipped during intake"""

    record_index: int = Field(..., description="Position of the record in the input batch")
    transaction_id: Optional[str] = Field(None, description="ID of the skipped record, if any")
    reason: str = Field(..., description="Why the record was skipped")

    class Config:
        coerce_numbers_to_str = True
