"""Domain layer for ledgerit."""

from ledgerit.domain.accounts import AccountRegistry, DefaultAccounts, normal_balance
from ledgerit.domain.journal import generate_journal, generate_journals
from ledgerit.domain.normalizer import normalize, normalize_chart, normalize_rows
from ledgerit.domain.trial_balance import TransactionIndex, build_account_ledger, build_trial_balance
from ledgerit.domain.statements import derive_balance_sheet, derive_profit_and_loss, derive_ratios
from ledgerit.domain.integrity import check_balance

__all__ = [
    "AccountRegistry",
    "DefaultAccounts",
    "normal_balance",
    "generate_journal",
    "generate_journals",
    "normalize",
    "normalize_chart",
    "normalize_rows",
    "TransactionIndex",
    "build_account_ledger",
    "build_trial_balance",
    "derive_balance_sheet",
    "derive_profit_and_loss",
    "derive_ratios",
    "check_balance",
]
