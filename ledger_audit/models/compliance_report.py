"""Compliance report data models"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, Dict, List
from ledger_audit.constants import ComplianceMode, RiskLevel, RECORD_RETENTION_PERIOD


class ReportPeriod(BaseModel):
    start: Optional[datetime] = None
    end: Optional[datetime] = None


class ComplianceMetrics(BaseModel):
    audit_trail_coverage: float = Field(0.0, description="Audit records per transaction, percent")
    documentation_completeness: float = Field(0.0, description="Documented transactions, percent")
    risk_distribution: Dict[str, int] = Field(
        default_factory=lambda: {level.value: 0 for level in RiskLevel}
    )
    flagged_transactions: int = Field(0, description="Audit records with at least one flag")


class RecordRetention(BaseModel):
    compliant: bool = True
    retention_period: str = RECORD_RETENTION_PERIOD
    digital_storage_compliant: bool = True


class RegulatoryRequirements(BaseModel):
    ctr_reporting: int = Field(0, description="Records requiring a currency transaction report")
    large_transaction_reporting: int = Field(0, description="Transactions above the large threshold")
    record_retention: RecordRetention = Field(default_factory=RecordRetention)


class Recommendation(BaseModel):
    priority: RiskLevel
    category: str
    description: str
    action: str


class ComplianceReport(BaseModel):
    """Compliance aggregate for one transaction batch"""

    report_date: datetime = Field(..., description="When the report was generated")
    period: ReportPeriod = Field(default_factory=ReportPeriod)
    compliance_mode: ComplianceMode = ComplianceMode.STANDARD
    total_transactions: int = 0
    compliance_metrics: ComplianceMetrics = Field(default_factory=ComplianceMetrics)
    regulatory_requirements: RegulatoryRequirements = Field(default_factory=RegulatoryRequirements)
    recommendations: List[Recommendation] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "report_date": "2025-02-03T18:00:00",
                "period": {"start": "2025-02-01T00:00:00", "end": "2025-02-03T23:59:59"},
                "compliance_mode": "standard",
                "total_transactions": 40,
                "compliance_metrics": {
                    "audit_trail_coverage": 100.0,
                    "documentation_completeness": 92.5,
                    "risk_distribution": {"LOW": 31, "MEDIUM": 7, "HIGH": 2},
                    "flagged_transactions": 6
                },
                "regulatory_requirements": {
                    "ctr_reporting": 1,
                    "large_transaction_reporting": 5,
                    "record_retention": {
                        "compliant": True,
                        "retention_period": "7 years",
                        "digital_storage_compliant": True
                    }
                },
                "recommendations": [
                    {
                        "priority": "MEDIUM",
                        "category": "Compliance",
                        "description": "6 transactions require compliance review",
                        "action": "Establish regular compliance review schedule"
                    }
                ]
            }
        }
