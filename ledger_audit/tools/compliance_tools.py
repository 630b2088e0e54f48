"""Compliance reporting tools"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence
from ledger_audit.constants import (
    ComplianceFlag,
    RiskLevel,
    DOCUMENTATION_TARGET_PCT,
    HIGH_RISK_TOLERANCE,
)
from ledger_audit.models import (
    Transaction,
    AuditRecord,
    AnalysisConfig,
    ComplianceReport,
    ComplianceMetrics,
    RegulatoryRequirements,
    Recommendation,
    ReportPeriod,
)
from ledger_audit.tools.audit_tools import is_documented
from ledger_audit.utils.logging import get_logger

logger = get_logger(__name__)


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole > 0 else 0.0


def calculate_documentation_score(transactions: Sequence[Transaction]) -> float:
    """Percent of transactions whose description has at least 5 characters (0 when empty)"""
    documented = sum(1 for txn in transactions if is_documented(txn.description))
    return _percentage(documented, len(transactions))


def calculate_risk_distribution(audit_records: Sequence[AuditRecord]) -> Dict[str, int]:
    distribution = {level.value: 0 for level in RiskLevel}
    for record in audit_records:
        distribution[record.risk_level.value] += 1
    return distribution


def count_flagged(audit_records: Sequence[AuditRecord]) -> int:
    return sum(1 for record in audit_records if record.is_flagged)


def generate_recommendations(
    transactions: Sequence[Transaction],
    audit_records: Sequence[AuditRecord]
) -> List[Recommendation]:
    """
    Fixed-rule recommendations, evaluated in order; every matching rule is kept

    Rules:
    1. Documentation completeness below 80% -> HIGH, Documentation
    2. High-risk records above 5% of transactions -> MEDIUM, Risk Management
    3. Any flagged record -> MEDIUM, Compliance

    An empty batch yields no recommendations.
    """
    recommendations = []

    if not transactions:
        return recommendations

    if calculate_documentation_score(transactions) < DOCUMENTATION_TARGET_PCT:
        recommendations.append(Recommendation(
            priority=RiskLevel.HIGH,
            category="Documentation",
            description="Improve transaction documentation completeness",
            action="Require minimum description length for all transactions"
        ))

    high_risk_count = sum(1 for record in audit_records if record.risk_level == RiskLevel.HIGH)
    if high_risk_count > len(transactions) * HIGH_RISK_TOLERANCE:
        recommendations.append(Recommendation(
            priority=RiskLevel.MEDIUM,
            category="Risk Management",
            description="High percentage of high-risk transactions detected",
            action="Review risk assessment criteria and transaction approval processes"
        ))

    flagged = count_flagged(audit_records)
    if flagged > 0:
        recommendations.append(Recommendation(
            priority=RiskLevel.MEDIUM,
            category="Compliance",
            description=f"{flagged} transactions require compliance review",
            action="Establish regular compliance review schedule"
        ))

    return recommendations


def generate_compliance_report(
    transactions: Sequence[Transaction],
    audit_records: Sequence[AuditRecord],
    period_start: Optional[datetime],
    period_end: Optional[datetime],
    report_date: datetime,
    config: Optional[AnalysisConfig] = None
) -> ComplianceReport:
    """
    Aggregate audit records into a compliance report

    Args:
        transactions: Transaction batch the audit records were generated from
        audit_records: Output of generate_audit_trail
        period_start: Reporting period start
        period_end: Reporting period end
        report_date: When the report is generated
        config: Analysis thresholds (defaults apply when None)

    Returns:
        ComplianceReport; every percentage is 0 for an empty batch
    """
    config = config or AnalysisConfig()
    total = len(transactions)

    metrics = ComplianceMetrics(
        audit_trail_coverage=_percentage(len(audit_records), total),
        documentation_completeness=calculate_documentation_score(transactions),
        risk_distribution=calculate_risk_distribution(audit_records),
        flagged_transactions=count_flagged(audit_records)
    )

    requirements = RegulatoryRequirements(
        ctr_reporting=sum(
            1 for record in audit_records
            if ComplianceFlag.CTR_REPORTING_REQUIRED in record.compliance_flags
        ),
        large_transaction_reporting=sum(
            1 for txn in transactions
            if txn.amount > config.large_transaction_threshold
        )
    )

    report = ComplianceReport(
        report_date=report_date,
        period=ReportPeriod(start=period_start, end=period_end),
        compliance_mode=config.compliance_mode,
        total_transactions=total,
        compliance_metrics=metrics,
        regulatory_requirements=requirements,
        recommendations=generate_recommendations(transactions, audit_records)
    )

    logger.info(
        f"Compliance report generated for {total} transactions",
        flagged=metrics.flagged_transactions,
        recommendations=len(report.recommendations)
    )
    return report
