"""Shared pytest fixtures"""

import json
import os
from datetime import datetime
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
FIXTURES_DIR = Path(__file__).parent / "fixtures"

# Tests may run from any working directory
os.environ.setdefault("LEDGER_AUDIT_CONFIG", str(PROJECT_ROOT / "config" / "rules.yaml"))

from ledger_audit.models import AnalysisConfig, Transaction  # noqa: E402


def load_fixture(name: str):
    with open(FIXTURES_DIR / name, 'r') as f:
        return json.load(f)


@pytest.fixture
def now():
    """Fixed reference time for time-sensitive detectors"""
    return datetime(2025, 3, 14, 12, 0, 0)


@pytest.fixture
def default_config():
    return AnalysisConfig()


@pytest.fixture
def make_transaction():
    """Factory for Transaction objects with sensible daytime defaults"""

    def _make(txn_id="t1", amount=100.0, txn_type="sale-retail",
              date=datetime(2025, 3, 10, 10, 0, 0), description="Counter sale"):
        return Transaction(id=txn_id, date=date, amount=amount, description=description, type=txn_type)

    return _make


@pytest.fixture
def transaction_records():
    """Raw transaction records as returned by the transactions API"""
    return load_fixture("transactions.json")


@pytest.fixture
def supplier_ledger():
    """Supplier with opening balance, purchases and payments"""
    return load_fixture("supplier_ledger.json")
