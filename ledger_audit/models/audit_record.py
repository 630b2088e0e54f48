"""Audit record data model"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List
from ledger_audit.constants import ComplianceFlag, RiskLevel


class AuditRecord(BaseModel):
    """Derived audit view of one transaction"""

    transaction_id: str = Field(..., description="ID of audited transaction")
    timestamp: datetime = Field(..., description="Transaction timestamp")
    action: str = Field("TRANSACTION_PROCESSED", description="Audited action")
    checksum: str = Field(..., description="Tamper-evidence checksum (16 hex chars)")
    compliance_flags: List[ComplianceFlag] = Field(default_factory=list, description="Compliance flags raised")
    risk_score: int = Field(..., ge=0, description="Cumulative risk points")
    risk_level: RiskLevel = Field(..., description="Bucketed risk level")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "transaction_id": "1042",
                "timestamp": "2025-02-03T23:15:00",
                "action": "TRANSACTION_PROCESSED",
                "checksum": "9f1c02ab33e07d51",
                "compliance_flags": ["LARGE_TRANSACTION"],
                "risk_score": 35,
                "risk_level": "MEDIUM"
            }
        }

    @property
    def is_flagged(self) -> bool:
        return len(self.compliance_flags) > 0
