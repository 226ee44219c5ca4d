"""Journal generation engine.

Maps each canonical transaction, by kind, to balanced journal lines. A
per-transaction account mapping override may replace the account of either
position of the primary posting; amounts always come from the transaction.
"""

from collections.abc import Mapping
from decimal import Decimal
import logging
from typing import Iterable, Optional, Union

from ledgerit.domain.accounts import AccountRegistry, DefaultAccounts
from ledgerit.domain.entities import (
    Account,
    AccountMappingOverride,
    JournalLine,
    Position,
    Transaction,
    TransactionKind,
    ZERO,
)

logger = logging.getLogger(__name__)

DEFAULT_ACCOUNTS = DefaultAccounts()

Overrides = Union[
    Mapping[str, AccountMappingOverride],
    Iterable[AccountMappingOverride],
    AccountMappingOverride,
    None,
]


def index_overrides(overrides: Overrides) -> dict[str, AccountMappingOverride]:
    """Key overrides by transaction id; a later override for the same id wins."""
    if overrides is None:
        return {}
    if isinstance(overrides, AccountMappingOverride):
        return {overrides.transaction_id: overrides}
    if isinstance(overrides, dict):
        return overrides
    if isinstance(overrides, Mapping):
        return dict(overrides)
    return {o.transaction_id: o for o in overrides}


def _posting(
    txn: Transaction,
    debit_account: str,
    credit_account: str,
    amount: Decimal,
    description: str,
) -> list[JournalLine]:
    """Build a balanced debit/credit pair.

    A negative amount reverses the pair: each account keeps its line but the
    value moves to the opposite column, so both columns stay non-negative.
    """
    value = abs(amount)
    reversed_ = amount < ZERO
    source = txn.kind.value
    return [
        JournalLine(
            ref=txn.id,
            date=txn.date,
            account_code=debit_account,
            debit=ZERO if reversed_ else value,
            credit=value if reversed_ else ZERO,
            description=description,
            source=source,
        ),
        JournalLine(
            ref=txn.id,
            date=txn.date,
            account_code=credit_account,
            debit=value if reversed_ else ZERO,
            credit=ZERO if reversed_ else value,
            description=description,
            source=source,
        ),
    ]


def _cost_of_goods_lines(txn: Transaction, defaults: DefaultAccounts) -> list[JournalLine]:
    """Recognize cost of goods sold per item that carries a unit cost."""
    lines: list[JournalLine] = []
    for item in txn.line_items:
        if item.unit_cost == ZERO:
            continue
        label = item.name or item.sku or "item"
        lines.extend(
            _posting(
                txn,
                defaults.cost_of_goods_sold,
                defaults.inventory,
                item.total_cost,
                f"Cost: {label}",
            )
        )
    return lines


def _sales_total(txn: Transaction) -> Decimal:
    if txn.line_items:
        return sum((item.total_price for item in txn.line_items), ZERO)
    return txn.amount


def _purchase_total(txn: Transaction) -> Decimal:
    if txn.line_items:
        return sum((item.total_cost for item in txn.line_items), ZERO)
    return txn.amount


def _is_cash_tender(tender: Optional[str]) -> bool:
    return not tender or tender.strip().lower() in ("cash", "tunai")


def _default_pair(
    txn: Transaction, defaults: DefaultAccounts
) -> tuple[str, str, Decimal, str]:
    """Return (debit account, credit account, amount, description) by kind."""
    kind = txn.kind
    if kind == TransactionKind.SALES:
        return defaults.receivable, defaults.sales_revenue, _sales_total(txn), txn.description or "Sales Invoice"
    if kind == TransactionKind.PURCHASE:
        return defaults.inventory, defaults.payable, _purchase_total(txn), txn.description or "Purchase Stock"
    if kind == TransactionKind.EXPENSE:
        return txn.account_code or defaults.expense, defaults.bank, txn.amount, txn.description or "Expense"
    if kind == TransactionKind.PAYMENT_IN:
        return txn.account_code or defaults.bank, defaults.receivable, txn.amount, txn.description or "Payment In"
    if kind == TransactionKind.PAYMENT_OUT:
        return defaults.payable, txn.account_code or defaults.bank, txn.amount, txn.description or "Payment Out"
    if kind == TransactionKind.POS_SALE:
        tender_account = defaults.cash if _is_cash_tender(txn.tender) else defaults.bank
        return tender_account, defaults.sales_revenue, txn.amount, txn.description or "POS Sales"

    # Manual adjustment: declared accounts first, then the pair of the kind it
    # was entered as, then a generic expense paid from the bank.
    if txn.posting_kind == TransactionKind.SALES:
        debit, credit = defaults.receivable, defaults.sales_revenue
    elif txn.posting_kind == TransactionKind.PURCHASE:
        debit, credit = defaults.inventory, defaults.payable
    else:
        debit, credit = defaults.expense, defaults.bank
    return (
        txn.account_code or debit,
        txn.contra_account_code or credit,
        txn.amount,
        txn.description or "Manual",
    )


def generate_journal(
    transaction: Transaction,
    overrides: Overrides = None,
    chart: Union[AccountRegistry, Iterable[Account], None] = None,
    defaults: DefaultAccounts = DEFAULT_ACCOUNTS,
) -> list[JournalLine]:
    """Generate the journal lines of one transaction.

    Args:
        transaction: Canonical transaction
        overrides: Account mapping overrides, keyed by transaction id or as an
            iterable; only the override for this transaction is consulted
        chart: Optional chart of accounts, used to flag override codes that
            do not resolve (they are still posted)
        defaults: Default account codes

    Returns:
        Journal lines whose debits and credits sum to the same total
    """
    debit_account, credit_account, amount, description = _default_pair(transaction, defaults)

    override = index_overrides(overrides).get(transaction.id)
    if override is not None:
        debit_account = override.account_for(Position.DEBIT) or debit_account
        credit_account = override.account_for(Position.CREDIT) or credit_account
        if chart is not None:
            registry = AccountRegistry.coerce(chart)
            for line in override.lines:
                if line.account_code not in registry:
                    logger.warning(
                        "Override for %s posts %s to unknown account %s",
                        transaction.id,
                        line.position.value,
                        line.account_code,
                    )

    lines = _posting(transaction, debit_account, credit_account, amount, description)
    if transaction.kind in (TransactionKind.SALES, TransactionKind.POS_SALE):
        lines.extend(_cost_of_goods_lines(transaction, defaults))
    return lines


def generate_journals(
    transactions: Iterable[Transaction],
    overrides: Overrides = None,
    chart: Union[AccountRegistry, Iterable[Account], None] = None,
    defaults: DefaultAccounts = DEFAULT_ACCOUNTS,
) -> list[JournalLine]:
    """Generate journal lines for many transactions, ordered by date then ref."""
    override_index = index_overrides(overrides)
    registry = AccountRegistry.coerce(chart) if chart is not None else None
    lines: list[JournalLine] = []
    for txn in transactions:
        lines.extend(generate_journal(txn, override_index, registry, defaults))
    lines.sort(key=lambda line: (line.date, line.ref))
    return lines
