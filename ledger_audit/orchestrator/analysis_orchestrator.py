"""Analysis Orchestrator - coordinates one transaction analysis pass and supplier ledgers"""

import time
import uuid
from collections import deque
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from ledger_audit.constants import EVENT_LOG_LIMIT
from ledger_audit.models import (
    AnalysisConfig,
    AnalysisEvent,
    AnalysisResult,
    LedgerStatement,
    LedgerWarning,
    ReconciliationResult,
    SupplierBalance,
    Transaction,
)
from ledger_audit.tools.record_parsing import coerce_date, parse_transactions
from ledger_audit.tools.classification_tools import classify_transaction, summarize_transactions
from ledger_audit.tools.audit_tools import generate_audit_trail
from ledger_audit.tools.anomaly_tools import detect_anomalies
from ledger_audit.tools.compliance_tools import generate_compliance_report
from ledger_audit.tools.ledger_tools import (
    DEFAULT_RECONCILIATION_TOLERANCE,
    build_supplier_statement,
    summarize_supplier_balances,
)
from ledger_audit.utils.config_loader import (
    load_config,
    build_analysis_config,
    get_reconciliation_tolerance,
)
from ledger_audit.utils.errors import ReconciliationError
from ledger_audit.utils.logging import get_logger, log_context
from ledger_audit.utils.metrics import (
    analysis_duration,
    transactions_analyzed,
    transaction_records_skipped,
    audit_records_generated,
    compliance_flags_raised,
    anomalies_detected,
    ledger_entries_processed,
    ledger_records_skipped,
    reconciliation_discrepancies,
)

logger = get_logger(__name__)


class AnalysisOrchestrator:
    """Master coordinator for transaction analysis and supplier ledgers"""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        reconciliation_tolerance: Optional[Any] = None
    ):
        """
        Args:
            config: Analysis thresholds; loaded from the YAML rules file when None
            reconciliation_tolerance: Allowed gap between computed and stored
                supplier balances; from the rules file (or 0.01) when None
        """
        self.analysis_run_id = str(uuid.uuid4())
        self._sequence = 0
        self._events = deque(maxlen=EVENT_LOG_LIMIT)

        if config is None:
            rules = load_config()
            config = build_analysis_config(rules)
            if reconciliation_tolerance is None:
                reconciliation_tolerance = get_reconciliation_tolerance(rules)

        self.config = config
        self.reconciliation_tolerance = (
            DEFAULT_RECONCILIATION_TOLERANCE
            if reconciliation_tolerance is None
            else reconciliation_tolerance
        )

    @property
    def events(self) -> List[AnalysisEvent]:
        """Most recent analysis events, oldest first"""
        return list(self._events)

    def _record_event(self, action: str, started: float, details: Optional[Dict[str, Any]] = None) -> AnalysisEvent:
        self._sequence += 1
        event = AnalysisEvent(
            analysis_run_id=self.analysis_run_id,
            sequence_number=self._sequence,
            action=action,
            execution_time_ms=int((time.time() - started) * 1000),
            details=details or {}
        )
        self._events.append(event)
        return event

    def run_analysis(
        self,
        records: Iterable[Union[dict, Transaction]],
        period_start: Optional[datetime] = None,
        period_end: Optional[datetime] = None,
        now: Optional[datetime] = None
    ) -> AnalysisResult:
        """
        Execute one full analysis pass

        Intake -> financial summary -> audit trail -> anomalies -> compliance report.

        Args:
            records: Raw transaction dicts or Transaction models
            period_start: Reporting period start (earliest transaction date when None)
            period_end: Reporting period end (latest transaction date when None)
            now: Reference time for anomaly detection and the report date

        Returns:
            AnalysisResult
        """
        # Transaction dates are naive wall-clock times; bring the bounds in line
        now = coerce_date(now) if now is not None else datetime.now()
        period_start = coerce_date(period_start)
        period_end = coerce_date(period_end)

        with log_context(analysis_run_id=self.analysis_run_id):
            return self._analyze(records, period_start, period_end, now)

    def _analyze(self, records, period_start, period_end, now) -> AnalysisResult:
        run_start = time.time()
        logger.info(f"Starting analysis run: {self.analysis_run_id}", compliance_mode=self.config.compliance_mode.value)

        started = time.time()
        transactions, warnings = parse_transactions(records)
        transaction_records_skipped.inc(len(warnings))
        self._record_event("RECORDS_PARSED", started, {
            'transaction_count': len(transactions),
            'skipped_count': len(warnings)
        })

        if transactions:
            period_start = period_start or min(txn.date for txn in transactions)
            period_end = period_end or max(txn.date for txn in transactions)

        started = time.time()
        summary = summarize_transactions(transactions)
        for txn in transactions:
            transactions_analyzed.labels(category=classify_transaction(txn.type).value).inc()
        self._record_event("FINANCIAL_SUMMARY_COMPUTED", started, {
            'total_income': summary.total_income,
            'total_expenses': summary.total_expenses,
            'net_flow': summary.net_flow
        })

        started = time.time()
        audit_records = generate_audit_trail(transactions, self.config)
        for record in audit_records:
            audit_records_generated.labels(risk_level=record.risk_level.value).inc()
            for flag in record.compliance_flags:
                compliance_flags_raised.labels(flag=flag.value).inc()
        self._record_event("AUDIT_TRAIL_GENERATED", started, {
            'audit_record_count': len(audit_records),
            'flagged_count': sum(1 for r in audit_records if r.is_flagged)
        })

        started = time.time()
        anomalies = detect_anomalies(transactions, now, self.config)
        for anomaly in anomalies:
            anomalies_detected.labels(anomaly_type=anomaly.type.value).inc()
        self._record_event("ANOMALIES_DETECTED", started, {
            'anomaly_count': len(anomalies),
            'anomaly_types': sorted({a.type.value for a in anomalies})
        })

        started = time.time()
        report = generate_compliance_report(
            transactions, audit_records, period_start, period_end,
            report_date=now, config=self.config
        )
        self._record_event("COMPLIANCE_REPORT_GENERATED", started, {
            'flagged_transactions': report.compliance_metrics.flagged_transactions,
            'recommendation_count': len(report.recommendations)
        })

        duration = time.time() - run_start
        analysis_duration.observe(duration)
        self._record_event("TRANSACTION_ANALYSIS_COMPLETE", run_start, {
            'transaction_count': len(transactions),
            'audit_record_count': len(audit_records),
            'anomaly_count': len(anomalies),
            'skipped_count': len(warnings)
        })

        logger.info(
            f"Analysis complete: {self.analysis_run_id} ({duration:.3f}s)",
            transaction_count=len(transactions),
            anomaly_count=len(anomalies)
        )

        return AnalysisResult(
            analysis_run_id=self.analysis_run_id,
            config=self.config,
            summary=summary,
            audit_records=audit_records,
            anomalies=anomalies,
            compliance_report=report,
            warnings=warnings
        )

    def run_supplier_ledger(
        self,
        supplier_id: Union[str, int],
        purchases: Iterable[dict],
        payments: Iterable[dict],
        opening_balance: Any = 0,
        opening_balance_type: Optional[str] = "debit",
        stored_balance: Any = None,
        strict: bool = False
    ) -> Tuple[LedgerStatement, Optional[ReconciliationResult], List[LedgerWarning]]:
        """
        Build a supplier ledger statement and reconcile it against a stored balance

        Args:
            supplier_id: Supplier the ledger belongs to
            purchases: Purchase records (debits)
            payments: Payment records (credits)
            opening_balance: Signed opening balance
            opening_balance_type: 'debit' or 'credit'
            stored_balance: Balance held by the books, if any
            strict: Raise on a reconciliation mismatch instead of reporting it

        Returns:
            (statement, reconciliation or None, warnings)

        Raises:
            ReconciliationError: strict mode and the balances disagree
        """
        with log_context(analysis_run_id=self.analysis_run_id, supplier_id=str(supplier_id)):
            statement, reconciliation, warnings = build_supplier_statement(
                supplier_id, purchases, payments,
                opening_balance=opening_balance,
                opening_balance_type=opening_balance_type,
                stored_balance=stored_balance,
                tolerance=self.reconciliation_tolerance
            )

        for line in statement.lines:
            ledger_entries_processed.labels(kind=line.kind.value).inc()
        for warning in warnings:
            ledger_records_skipped.labels(record_kind=warning.record_kind.value).inc()

        logger.info(
            f"Supplier {statement.supplier_id} ledger: {statement.closing_balance_display}",
            entry_count=len(statement.lines),
            skipped_count=len(warnings)
        )

        if reconciliation is not None and not reconciliation.is_reconciled:
            reconciliation_discrepancies.inc()
            if strict:
                raise ReconciliationError(
                    statement.supplier_id,
                    reconciliation.computed_balance,
                    reconciliation.stored_balance
                )

        return statement, reconciliation, warnings

    def run_supplier_summary(
        self,
        suppliers: Iterable[dict],
        purchases: Iterable[dict],
        payments: Iterable[dict]
    ) -> List[SupplierBalance]:
        """Closing balance for every supplier in the list view"""
        balances = summarize_supplier_balances(suppliers, purchases, payments)
        logger.info(f"Summarized {len(balances)} supplier balances")
        return balances
