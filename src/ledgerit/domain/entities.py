"""Domain model entities for ledgerit.

These are pure data classes representing accounting concepts, independent of
the storage schema. Journal lines, trial balance rows and statements are
derived from transactions, overrides and the chart of accounts on demand and
are never persisted.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


ZERO = Decimal("0")


class TransactionKind(str, Enum):
    """Economic kind of a canonical transaction."""

    SALES = "sales"
    PURCHASE = "purchase"
    EXPENSE = "expense"
    PAYMENT_IN = "payment_in"
    PAYMENT_OUT = "payment_out"
    POS_SALE = "pos_sale"
    MANUAL = "manual"


class Position(str, Enum):
    """Side of a double-entry posting."""

    DEBIT = "debit"
    CREDIT = "credit"


class NormalBalance(str, Enum):
    """Natural increasing side of an account."""

    DEBIT = "debit"
    CREDIT = "credit"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    code: str
    name: str
    category: str
    opening_balance: Decimal = ZERO


@dataclass(frozen=True)
class LineItem:
    """Item line of an invoice or POS receipt."""

    sku: str
    qty: Decimal
    unit_price: Decimal = ZERO
    unit_cost: Decimal = ZERO
    name: Optional[str] = None

    @property
    def total_price(self) -> Decimal:
        return self.qty * self.unit_price

    @property
    def total_cost(self) -> Decimal:
        return self.qty * self.unit_cost


@dataclass(frozen=True)
class Transaction:
    """Canonical transaction produced by the normalizer.

    ``id`` is the deduplication key: two observations with the same id are the
    same economic event. ``posting_kind`` only matters for manual entries
    without declared accounts: it names the kind whose default pair applies.
    """

    id: str
    date: date
    kind: TransactionKind
    amount: Decimal
    counterpart: Optional[str] = None
    line_items: tuple[LineItem, ...] = ()
    account_code: Optional[str] = None
    contra_account_code: Optional[str] = None
    tender: Optional[str] = None
    description: Optional[str] = None
    source: str = "remote"
    posting_kind: Optional[TransactionKind] = None


@dataclass(frozen=True)
class OverrideLine:
    """Replacement account for one position of a transaction's posting."""

    position: Position
    account_code: str


@dataclass(frozen=True)
class AccountMappingOverride:
    """User-authored account mapping for a single transaction."""

    transaction_id: str
    lines: tuple[OverrideLine, ...]

    def account_for(self, position: Position) -> Optional[str]:
        """Return the overriding account code for a position, if any."""
        for line in self.lines:
            if line.position == position:
                return line.account_code
        return None


@dataclass(frozen=True)
class JournalLine:
    """One side of a double-entry posting."""

    ref: str
    date: date
    account_code: str
    debit: Decimal
    credit: Decimal
    description: str
    source: str


@dataclass(frozen=True)
class TrialBalanceRow:
    """Per-account balance for a reporting period."""

    code: str
    name: str
    opening: Decimal
    period_debit: Decimal
    period_credit: Decimal
    movement: Decimal
    ending: Decimal


@dataclass(frozen=True)
class StatementLine:
    """Account line shown in a statement section."""

    code: str
    name: str
    amount: Decimal


@dataclass(frozen=True)
class StatementSection:
    """Group of statement lines with their total."""

    name: str
    lines: tuple[StatementLine, ...]
    total: Decimal


@dataclass(frozen=True)
class ProfitAndLossReport:
    """Profit & loss for a reporting period."""

    revenue: StatementSection
    cost_of_goods_sold: StatementSection
    operating_expenses: StatementSection
    other_expenses: StatementSection
    gross_profit: Decimal
    net_profit: Decimal

    @property
    def total_expenses(self) -> Decimal:
        return self.cost_of_goods_sold.total + self.operating_expenses.total + self.other_expenses.total


@dataclass(frozen=True)
class ProfitAndLossComparison:
    """Profit & loss of a period next to the one of the period before it."""

    current: ProfitAndLossReport
    previous: ProfitAndLossReport
    previous_start: date
    previous_end: date


@dataclass(frozen=True)
class BalanceSheetReport:
    """Balance sheet as of the end of a reporting period.

    ``retained_earnings`` is a presentation plug. ``ledger_earnings`` is the
    accumulated result actually held on income statement accounts, so a
    non-zero ``plug_discrepancy`` means the ledger itself does not balance.
    """

    current_assets: StatementSection
    fixed_assets: StatementSection
    other_assets: StatementSection
    current_liabilities: StatementSection
    long_term_liabilities: StatementSection
    other_liabilities: StatementSection
    equity: StatementSection
    total_assets: Decimal
    total_liabilities: Decimal
    retained_earnings: Decimal
    total_equity: Decimal
    ledger_earnings: Decimal
    plug_discrepancy: Decimal


@dataclass(frozen=True)
class IntegrityResult:
    """Outcome of the debit/credit equality check."""

    debit_total: Decimal
    credit_total: Decimal
    is_balanced: bool

    @property
    def discrepancy(self) -> Decimal:
        return self.debit_total - self.credit_total


@dataclass(frozen=True)
class FinancialRatios:
    """Headline ratios derived from the statements (percentages are 0-100)."""

    gross_margin: Decimal
    net_margin: Decimal
    expense_ratio: Decimal
    current_ratio: Decimal
    debt_to_equity: Decimal


@dataclass(frozen=True)
class AccountLedgerEntry:
    """Journal line of one account with the running balance after it."""

    date: date
    ref: str
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class AccountLedger:
    """General ledger view of a single account for a period."""

    code: str
    name: str
    opening: Decimal
    entries: tuple[AccountLedgerEntry, ...]
    total_debit: Decimal
    total_credit: Decimal
    closing: Decimal


@dataclass(frozen=True)
class LedgerReport:
    """Best-effort result of a full recomputation plus any warnings."""

    period_start: date
    period_end: date
    trial_balance: tuple[TrialBalanceRow, ...]
    integrity: IntegrityResult
    profit_and_loss: ProfitAndLossReport
    balance_sheet: BalanceSheetReport
    warnings: tuple[str, ...] = field(default_factory=tuple)
