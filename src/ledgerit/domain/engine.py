"""Ledger engine domain service."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
import logging
from typing import Optional

from ledgerit.database.base import Database
from ledgerit.domain.accounts import AccountRegistry, DefaultAccounts
from ledgerit.domain.entities import (
    AccountLedger,
    AccountMappingOverride,
    BalanceSheetReport,
    FinancialRatios,
    IntegrityResult,
    JournalLine,
    LedgerReport,
    ProfitAndLossComparison,
    ProfitAndLossReport,
    TrialBalanceRow,
)
from ledgerit.domain.errors import (
    ledger_out_of_balance,
    retained_earnings_plug_mismatch,
)
from ledgerit.domain.integrity import DEFAULT_TOLERANCE, check_balance
from ledgerit.domain.journal import DEFAULT_ACCOUNTS, generate_journals
from ledgerit.domain.statements import (
    derive_balance_sheet,
    derive_profit_and_loss,
    derive_ratios,
)
from ledgerit.domain.trial_balance import (
    TransactionIndex,
    fold_journal,
    ledger_from_journal,
)
from ledgerit.utils.date_parser import previous_period

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Snapshot:
    revision: int
    registry: AccountRegistry
    transactions: TransactionIndex
    overrides: dict[str, AccountMappingOverride]
    journal: tuple[JournalLine, ...]


class LedgerEngine:
    """Service producing journals, balances and statements from the store.

    Every report is a full recomputation over the stored transactions. The
    generated journal is kept between calls and rebuilt when the store's
    revision changes, so a write (new transaction, override or account)
    is always reflected by the next report.

    The revision is counted by the store object itself. Writes made through
    another store object, or another process, on the same database file are
    not seen until :meth:`invalidate` is called.
    """

    def __init__(
        self,
        db: Database,
        defaults: DefaultAccounts = DEFAULT_ACCOUNTS,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        """Initialize ledger engine.

        Args:
            db: Database instance
            defaults: Default account codes used when no override applies
            tolerance: Largest debit/credit difference still treated as balanced
        """
        self.db = db
        self.defaults = defaults
        self.tolerance = tolerance
        self._snapshot: Optional[_Snapshot] = None

    def invalidate(self) -> None:
        """Drop the cached journal so the next report rebuilds it."""
        if self._snapshot is not None:
            logger.debug("Dropping journal built at store revision %d", self._snapshot.revision)
        self._snapshot = None

    def _current(self) -> _Snapshot:
        revision = self.db.revision
        if self._snapshot is not None and self._snapshot.revision == revision:
            return self._snapshot

        registry = AccountRegistry(self.db.list_accounts())
        transactions = TransactionIndex(self.db.list_transactions())
        overrides = {o.transaction_id: o for o in self.db.list_overrides()}
        journal = generate_journals(transactions, overrides, registry, self.defaults)
        self._snapshot = _Snapshot(
            revision=revision,
            registry=registry,
            transactions=transactions,
            overrides=overrides,
            journal=tuple(journal),
        )
        logger.debug(
            "Rebuilt journal at store revision %d: %d transactions, %d lines",
            revision,
            len(transactions),
            len(journal),
        )
        return self._snapshot

    def journal(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[JournalLine]:
        """Get journal lines ordered by date, optionally limited to a date range."""
        return [
            line
            for line in self._current().journal
            if (start_date is None or line.date >= start_date)
            and (end_date is None or line.date <= end_date)
        ]

    def _fold(self, start_date: date, end_date: date) -> tuple[list[TrialBalanceRow], list[str]]:
        snapshot = self._current()
        return fold_journal(snapshot.journal, snapshot.registry, start_date, end_date)

    def trial_balance(self, start_date: date, end_date: date) -> list[TrialBalanceRow]:
        """Get the trial balance for a reporting period.

        Args:
            start_date: First day of the period
            end_date: Last day of the period (inclusive)

        Returns:
            One row per account, sorted by account code
        """
        rows, _ = self._fold(start_date, end_date)
        return rows

    def profit_and_loss(self, start_date: date, end_date: date) -> ProfitAndLossReport:
        """Get the profit & loss statement for a reporting period."""
        return derive_profit_and_loss(self.trial_balance(start_date, end_date))

    def profit_and_loss_comparison(self, start_date: date, end_date: date) -> ProfitAndLossComparison:
        """Get the profit & loss of a period and of the period before it.

        A calendar month is compared with the previous month and a calendar
        year with the previous year; other ranges with the same number of
        days immediately before them.
        """
        previous_start, previous_end = previous_period(start_date, end_date)
        return ProfitAndLossComparison(
            current=self.profit_and_loss(start_date, end_date),
            previous=self.profit_and_loss(previous_start, previous_end),
            previous_start=previous_start,
            previous_end=previous_end,
        )

    def balance_sheet(self, start_date: date, end_date: date) -> BalanceSheetReport:
        """Get the balance sheet as of the end of a reporting period."""
        return derive_balance_sheet(self.trial_balance(start_date, end_date))

    def ratios(self, start_date: date, end_date: date) -> FinancialRatios:
        """Get headline financial ratios for a reporting period."""
        rows = self.trial_balance(start_date, end_date)
        return derive_ratios(derive_profit_and_loss(rows), derive_balance_sheet(rows))

    def check(self, start_date: date, end_date: date) -> IntegrityResult:
        """Check that debit-normal and credit-normal balances are equal."""
        return check_balance(self.trial_balance(start_date, end_date), self.tolerance)

    def account_ledger(self, account_code: str, start_date: date, end_date: date) -> AccountLedger:
        """Get the general ledger of one account for a reporting period.

        Args:
            account_code: Account code; codes outside the chart are allowed
            start_date: First day of the period
            end_date: Last day of the period (inclusive)

        Returns:
            Account ledger with running balances
        """
        snapshot = self._current()
        return ledger_from_journal(snapshot.journal, snapshot.registry, account_code, start_date, end_date)

    def report(self, start_date: date, end_date: date) -> LedgerReport:
        """Recompute every statement for a period and collect warnings.

        Never raises on an unbalanced ledger; the imbalance is reported in
        ``integrity`` and as a warning so the caller can surface it.
        """
        rows, warnings = self._fold(start_date, end_date)
        integrity = check_balance(rows, self.tolerance)
        pl = derive_profit_and_loss(rows)
        bs = derive_balance_sheet(rows)

        if not integrity.is_balanced:
            warnings.append(ledger_out_of_balance(integrity.discrepancy))
        if abs(bs.plug_discrepancy) >= Decimal(str(self.tolerance)):
            warnings.append(retained_earnings_plug_mismatch(bs.plug_discrepancy))

        return LedgerReport(
            period_start=start_date,
            period_end=end_date,
            trial_balance=tuple(rows),
            integrity=integrity,
            profit_and_loss=pl,
            balance_sheet=bs,
            warnings=tuple(warnings),
        )
