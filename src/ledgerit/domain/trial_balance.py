"""Ledger consolidator.

Folds the journal lines of a deduplicated transaction set into one balance
per account for a reporting period. Every call is a full recomputation; the
result depends only on the set of transactions, the overrides and the chart
of accounts, never on the order transactions arrive in.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
import logging
from typing import Iterable, Iterator, Optional, Union

from ledgerit.domain.accounts import AccountRegistry, DefaultAccounts, is_debit_normal
from ledgerit.domain.entities import (
    Account,
    AccountLedger,
    AccountLedgerEntry,
    JournalLine,
    Transaction,
    TrialBalanceRow,
    ZERO,
)
from ledgerit.domain.errors import unknown_account_code
from ledgerit.domain.journal import DEFAULT_ACCOUNTS, Overrides, generate_journals

logger = logging.getLogger(__name__)

Chart = Union[AccountRegistry, Iterable[Account]]


class TransactionIndex:
    """Arena of canonical transactions keyed by id.

    Adding a transaction whose id is already present replaces the earlier
    observation, so overlapping merges from several channels count once.
    """

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._by_id: dict[str, Transaction] = {}
        self.extend(transactions)

    def add(self, transaction: Transaction) -> bool:
        """Add a transaction. Returns True if it replaced an earlier one."""
        replaced = transaction.id in self._by_id
        self._by_id[transaction.id] = transaction
        return replaced

    def extend(self, transactions: Iterable[Transaction]) -> int:
        """Add many transactions. Returns the number of replacements."""
        return sum(1 for txn in transactions if self.add(txn))

    def get(self, transaction_id: str) -> Optional[Transaction]:
        return self._by_id.get(transaction_id)

    def __contains__(self, transaction_id: object) -> bool:
        return transaction_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(sorted(self._by_id.values(), key=lambda t: (t.date, t.id)))


@dataclass
class _Accumulator:
    code: str
    name: str
    opening: Decimal
    period_debit: Decimal = ZERO
    period_credit: Decimal = ZERO

    def to_row(self) -> TrialBalanceRow:
        if is_debit_normal(self.code):
            movement = self.period_debit - self.period_credit
        else:
            movement = self.period_credit - self.period_debit
        return TrialBalanceRow(
            code=self.code,
            name=self.name,
            opening=self.opening,
            period_debit=self.period_debit,
            period_credit=self.period_credit,
            movement=movement,
            ending=self.opening + movement,
        )


def _signed_effect(line: JournalLine) -> Decimal:
    """Polarity-adjusted effect of a line on its account's balance."""
    if is_debit_normal(line.account_code):
        return line.debit - line.credit
    return line.credit - line.debit


def _dedup(transactions: Iterable[Transaction]) -> TransactionIndex:
    if isinstance(transactions, TransactionIndex):
        return transactions
    return TransactionIndex(transactions)


def fold_journal(
    lines: Iterable[JournalLine],
    chart: Chart,
    period_start: date,
    period_end: date,
) -> tuple[list[TrialBalanceRow], list[str]]:
    """Fold already generated journal lines into trial balance rows.

    Returns:
        Tuple of (rows sorted by account code, warning messages)
    """
    registry = AccountRegistry.coerce(chart)
    if period_start > period_end:
        logger.warning("Reporting period starts after it ends (%s > %s)", period_start, period_end)

    accumulators: dict[str, _Accumulator] = {
        account.code: _Accumulator(account.code, account.name, account.opening_balance)
        for account in registry
    }
    warnings: list[str] = []

    for line in lines:
        acc = accumulators.get(line.account_code)
        if acc is None:
            # Unknown codes are still posted; the display falls back to the raw code
            acc = accumulators[line.account_code] = _Accumulator(line.account_code, line.account_code, ZERO)
            message = unknown_account_code(line.account_code, line.ref)
            logger.warning(message)
            warnings.append(message)

        if line.date < period_start:
            acc.opening += _signed_effect(line)
        elif line.date <= period_end:
            acc.period_debit += line.debit
            acc.period_credit += line.credit

    rows = [accumulators[code].to_row() for code in sorted(accumulators)]
    return rows, warnings


def consolidate(
    transactions: Iterable[Transaction],
    overrides: Overrides,
    chart: Chart,
    period_start: date,
    period_end: date,
    defaults: DefaultAccounts = DEFAULT_ACCOUNTS,
) -> tuple[list[TrialBalanceRow], list[str]]:
    """Build the trial balance and collect warnings raised along the way."""
    registry = AccountRegistry.coerce(chart)
    index = _dedup(transactions)
    lines = generate_journals(index, overrides, registry, defaults)
    rows, warnings = fold_journal(lines, registry, period_start, period_end)
    logger.debug(
        "Built trial balance for %s..%s from %d transactions into %d accounts",
        period_start,
        period_end,
        len(index),
        len(rows),
    )
    return rows, warnings


def build_trial_balance(
    transactions: Iterable[Transaction],
    overrides: Overrides,
    chart: Chart,
    period_start: date,
    period_end: date,
    defaults: DefaultAccounts = DEFAULT_ACCOUNTS,
) -> list[TrialBalanceRow]:
    """Fold all journal lines into one balance per account for a period.

    Lines dated before ``period_start`` are folded into the opening balance by
    the account's polarity; lines inside ``[period_start, period_end]`` add to
    the raw period debit/credit sums; later lines are ignored.

    Args:
        transactions: Transactions from any number of channels; duplicates by
            id count once, the last one wins
        overrides: Account mapping overrides
        chart: Chart of accounts
        period_start: First day of the reporting period
        period_end: Last day of the reporting period (inclusive)
        defaults: Default account codes

    Returns:
        Trial balance rows sorted by account code
    """
    rows, _ = consolidate(transactions, overrides, chart, period_start, period_end, defaults)
    return rows


def ledger_from_journal(
    lines: Iterable[JournalLine],
    chart: Chart,
    account_code: str,
    period_start: date,
    period_end: date,
) -> AccountLedger:
    """Build one account's ledger from journal lines sorted by date."""
    registry = AccountRegistry.coerce(chart)
    account = registry.get(account_code)
    opening = account.opening_balance if account is not None else ZERO

    balance = opening
    total_debit = ZERO
    total_credit = ZERO
    entries: list[AccountLedgerEntry] = []
    for line in lines:
        if line.account_code != account_code:
            continue
        if line.date < period_start:
            opening += _signed_effect(line)
            balance = opening
        elif line.date <= period_end:
            balance += _signed_effect(line)
            total_debit += line.debit
            total_credit += line.credit
            entries.append(
                AccountLedgerEntry(
                    date=line.date,
                    ref=line.ref,
                    description=line.description,
                    debit=line.debit,
                    credit=line.credit,
                    balance=balance,
                )
            )

    return AccountLedger(
        code=account_code,
        name=registry.display_name(account_code),
        opening=opening,
        entries=tuple(entries),
        total_debit=total_debit,
        total_credit=total_credit,
        closing=balance,
    )


def build_account_ledger(
    transactions: Iterable[Transaction],
    overrides: Overrides,
    chart: Chart,
    account_code: str,
    period_start: date,
    period_end: date,
    defaults: DefaultAccounts = DEFAULT_ACCOUNTS,
) -> AccountLedger:
    """Build the general ledger of one account for a period.

    The opening balance carries the declared opening plus everything posted
    before the period; each in-period entry shows the running balance after
    it.
    """
    registry = AccountRegistry.coerce(chart)
    lines = generate_journals(_dedup(transactions), overrides, defaults=defaults)
    return ledger_from_journal(lines, registry, account_code, period_start, period_end)
