"""Analysis event log and result models"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, Any, List
from .config import AnalysisConfig
from .transaction import FinancialSummary, RecordWarning
from .audit_record import AuditRecord
from .anomaly import Anomaly
from .compliance_report import ComplianceReport


class AnalysisEvent(BaseModel):
    """Event log entry for one step of an analysis run"""

    analysis_run_id: str = Field(..., description="ID of analysis run")
    sequence_number: int = Field(..., description="Sequence number within the run")
    action: str = Field(..., description="Step that was executed")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the step finished")
    execution_time_ms: int = Field(0, description="Execution time in milliseconds")
    details: Dict[str, Any] = Field(default_factory=dict, description="Step summary")

    class Config:
        json_schema_extra = {
            "example": {
                "analysis_run_id": "4b6f0c2e-6a55-4c9e-9d0e-5f0f4a1f2b7d",
                "sequence_number": 5,
                "action": "TRANSACTION_ANALYSIS_COMPLETE",
                "timestamp": "2025-02-03T18:00:00",
                "execution_time_ms": 12,
                "details": {"transaction_count": 40, "anomaly_count": 3}
            }
        }


class AnalysisResult(BaseModel):
    """Everything one analysis pass produces for the compliance dashboard"""

    analysis_run_id: str
    config: AnalysisConfig
    summary: FinancialSummary
    audit_records: List[AuditRecord] = Field(default_factory=list)
    anomalies: List[Anomaly] = Field(default_factory=list)
    compliance_report: ComplianceReport
    warnings: List[RecordWarning] = Field(default_factory=list)
