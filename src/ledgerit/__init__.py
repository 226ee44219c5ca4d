"""Ledgerit - double-entry ledger consolidation."""

from ledgerit.domain.integrity import check_balance
from ledgerit.domain.journal import generate_journal
from ledgerit.domain.normalizer import normalize
from ledgerit.domain.statements import derive_balance_sheet, derive_profit_and_loss, derive_ratios
from ledgerit.domain.trial_balance import build_account_ledger, build_trial_balance

__all__ = [
    "normalize",
    "generate_journal",
    "build_trial_balance",
    "build_account_ledger",
    "derive_profit_and_loss",
    "derive_balance_sheet",
    "derive_ratios",
    "check_balance",
    "LedgerEngine",
    "main",
]


# Import the store-backed engine and main lazily to avoid circular dependencies
def __getattr__(name):
    if name == "LedgerEngine":
        from ledgerit.domain.engine import LedgerEngine
        return LedgerEngine
    if name == "main":
        from ledgerit.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
