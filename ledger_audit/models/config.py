"""Analysis configuration model"""

from pydantic import BaseModel, Field
from ledger_audit.constants import (
    ComplianceMode,
    DEFAULT_COMPLIANCE_MODE,
    DEFAULT_LARGE_TRANSACTION_THRESHOLD,
    DEFAULT_VELOCITY_ALERT_MINUTES,
)


class AnalysisConfig(BaseModel):
    """Immutable thresholds for one analysis call"""

    large_transaction_threshold: float = Field(
        DEFAULT_LARGE_TRANSACTION_THRESHOLD,
        gt=0,
        description="Amount above which a transaction is flagged as large"
    )
    velocity_alert_minutes: int = Field(
        DEFAULT_VELOCITY_ALERT_MINUTES,
        gt=0,
        description="Look-back window for the high velocity detector"
    )
    compliance_mode: ComplianceMode = Field(
        DEFAULT_COMPLIANCE_MODE,
        description="Compliance strictness mode"
    )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "large_transaction_threshold": 1000,
                "velocity_alert_minutes": 30,
                "compliance_mode": "standard"
            }
        }
