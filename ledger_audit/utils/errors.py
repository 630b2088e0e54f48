"""Custom exceptions for the ledger and risk engine"""


class LedgerAuditError(Exception):
    """Base exception for ledger and audit errors"""
    pass


class ConfigurationError(LedgerAuditError):
    """Configuration loading errors"""
    pass


class RecordValidationError(LedgerAuditError):
    """Raised when an input record cannot be turned into a model"""
    pass


class ReconciliationError(LedgerAuditError):
    """Computed ledger balance disagrees with the stored balance"""

    def __init__(self, supplier_id, computed_balance, stored_balance):
        self.supplier_id = supplier_id
        self.computed_balance = computed_balance
        self.stored_balance = stored_balance
        super().__init__(
            f"Supplier {supplier_id}: computed balance {computed_balance} "
            f"does not match stored balance {stored_balance}"
        )
