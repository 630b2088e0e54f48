"""Prometheus metrics definitions"""

from prometheus_client import Counter, Histogram


# Transaction analysis metrics
analysis_duration = Histogram(
    'transaction_analysis_duration_seconds',
    'Time to run a full transaction analysis pass',
    buckets=[0.01, 0.05, 0.1, 0.5, 1, 5]
)

transactions_analyzed = Counter(
    'transactions_analyzed_total',
    'Total transactions analyzed',
    labelnames=['category']  # income, expense, neutral
)

transaction_records_skipped = Counter(
    'transaction_records_skipped_total',
    'Malformed transaction records dropped during intake'
)

audit_records_generated = Counter(
    'audit_records_generated_total',
    'Audit records generated',
    labelnames=['risk_level']
)

compliance_flags_raised = Counter(
    'compliance_flags_raised_total',
    'Compliance flags attached to audit records',
    labelnames=['flag']
)

anomalies_detected = Counter(
    'anomalies_detected_total',
    'Anomalies detected',
    labelnames=['anomaly_type']
)

# Supplier ledger metrics
ledger_entries_processed = Counter(
    'ledger_entries_processed_total',
    'Ledger entries walked by the running balance calculator',
    labelnames=['kind']  # opening, purchase, payment
)

ledger_records_skipped = Counter(
    'ledger_records_skipped_total',
    'Malformed purchase/payment records dropped from a ledger',
    labelnames=['record_kind']
)

reconciliation_discrepancies = Counter(
    'reconciliation_discrepancies_total',
    'Supplier ledgers whose computed balance disagrees with the stored balance'
)
