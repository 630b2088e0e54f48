"""Anomaly data model"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List
from ledger_audit.constants import AnomalyType, RiskLevel


class Anomaly(BaseModel):
    """Detection result referencing one or more transactions"""

    type: AnomalyType = Field(..., description="Detector that raised the anomaly")
    severity: RiskLevel = Field(..., description="Anomaly severity")
    description: str = Field(..., description="Human-readable explanation")
    timestamp: datetime = Field(..., description="When the anomaly applies")
    affected_transactions: List[str] = Field(default_factory=list, description="IDs of implicated transactions")
    recommendation: str = Field(..., description="Suggested follow-up")

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "type": "POTENTIAL_DUPLICATE",
                "severity": "MEDIUM",
                "description": "2 potentially duplicate transactions detected",
                "timestamp": "2025-02-03T18:00:00",
                "affected_transactions": ["17", "18"],
                "recommendation": "Review for unintentional duplicate processing"
            }
        }
