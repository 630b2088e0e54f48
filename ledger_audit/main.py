"""Main entry point for the ledger and risk engine"""

import argparse
import json
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables FIRST, before any other imports
# Find the .env file in the project root
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

from ledger_audit.orchestrator import AnalysisOrchestrator
from ledger_audit.tools.record_parsing import coerce_date
from ledger_audit.utils.config_loader import load_config, build_analysis_config, get_reconciliation_tolerance
from ledger_audit.utils.errors import LedgerAuditError
from ledger_audit.utils.logging import get_logger

logger = get_logger(__name__)


def _read_json(path: str):
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise LedgerAuditError(f"Cannot read {path}: {e}")


def run_transactions(orchestrator: AnalysisOrchestrator, path: str, period_start=None, period_end=None) -> dict:
    """Analyze a JSON file holding a list of transactions (or {"transactions": [...]})"""
    data = _read_json(path)
    records = data.get('transactions', []) if isinstance(data, dict) else data

    result = orchestrator.run_analysis(
        records,
        period_start=coerce_date(period_start),
        period_end=coerce_date(period_end)
    )
    return result.model_dump(mode='json')


def run_ledger(orchestrator: AnalysisOrchestrator, path: str) -> dict:
    """
    Build a supplier statement from a JSON ledger file

    Expected layout:
        {"supplier": {id, name, opening_balance, opening_balance_type, current_balance},
         "purchases": [...], "payments": [...]}
    """
    data = _read_json(path)
    if not isinstance(data, dict):
        raise LedgerAuditError(f"Ledger file must hold an object: {path}")

    supplier = data.get('supplier') or {}
    statement, reconciliation, warnings = orchestrator.run_supplier_ledger(
        supplier.get('id'),
        data.get('purchases', []),
        data.get('payments', []),
        opening_balance=supplier.get('opening_balance', 0),
        opening_balance_type=supplier.get('opening_balance_type') or "debit",
        stored_balance=supplier.get('current_balance')
    )

    return {
        'supplier_name': supplier.get('name'),
        'statement': statement.model_dump(mode='json'),
        'closing_balance_display': statement.closing_balance_display,
        'reconciliation': reconciliation.model_dump(mode='json') if reconciliation else None,
        'warnings': [w.model_dump(mode='json') for w in warnings]
    }


def main(argv=None):
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description="Supplier ledger and transaction risk engine"
    )
    parser.add_argument('--transactions', help="JSON file of transaction records to analyze")
    parser.add_argument('--ledger', help="JSON supplier ledger file (supplier, purchases, payments)")
    parser.add_argument('--from', dest='period_start', help="Reporting period start (ISO date)")
    parser.add_argument('--to', dest='period_end', help="Reporting period end (ISO date)")
    parser.add_argument('--config', help="Path to rules YAML (default: config/rules.yaml)")
    parser.add_argument('--mode', choices=['basic', 'standard', 'strict'], help="Compliance mode override")

    args = parser.parse_args(argv)

    if not args.transactions and not args.ledger:
        parser.error("at least one of --transactions or --ledger is required")

    try:
        rules = load_config(args.config)
        orchestrator = AnalysisOrchestrator(
            config=build_analysis_config(rules, args.mode),
            reconciliation_tolerance=get_reconciliation_tolerance(rules)
        )

        output = {}
        if args.transactions:
            output['analysis'] = run_transactions(
                orchestrator, args.transactions, args.period_start, args.period_end
            )
        if args.ledger:
            output['ledger'] = run_ledger(orchestrator, args.ledger)

    except LedgerAuditError as e:
        logger.error(f"Main execution failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
