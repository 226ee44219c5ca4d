"""Tests for journal generation."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from ledgerit.domain.accounts import DefaultAccounts
from ledgerit.domain.entities import (
    AccountMappingOverride,
    LineItem,
    OverrideLine,
    Position,
    Transaction,
    TransactionKind,
)
from ledgerit.domain.journal import generate_journal, generate_journals, index_overrides


def _txn(kind, amount="1000", **kwargs):
    kwargs.setdefault("id", f"{kind.value}-1")
    kwargs.setdefault("date", date(2024, 3, 10))
    return Transaction(kind=kind, amount=Decimal(amount), **kwargs)


def _pairs(lines):
    return [(line.account_code, line.debit, line.credit) for line in lines]


@pytest.mark.parametrize("kind", list(TransactionKind))
def test_every_kind_balances(kind):
    """Test that debits equal credits for each transaction kind."""
    txn = _txn(kind, "1234.50", line_items=(LineItem("SKU-1", Decimal("3"), Decimal("411.50"), Decimal("200")),))
    lines = generate_journal(txn)

    assert lines
    assert sum(line.debit for line in lines) == sum(line.credit for line in lines)
    assert all(line.ref == txn.id and line.date == txn.date for line in lines)
    assert all(line.source == kind.value for line in lines)


def test_sales_posts_receivable_against_revenue(sale):
    """Test the default sales mapping."""
    lines = generate_journal(sale)
    assert _pairs(lines) == [
        ("1-1201", Decimal("500000"), Decimal("0")),
        ("4-1001", Decimal("0"), Decimal("500000")),
    ]
    assert lines[0].description == "Sales Invoice"


def test_sales_with_unit_costs_recognizes_cost_of_goods():
    """Test that items with a unit cost add a COGS/inventory pair."""
    txn = _txn(
        TransactionKind.SALES,
        "250",
        line_items=(
            LineItem("SKU-1", Decimal("2"), Decimal("100"), Decimal("60"), name="Kopi"),
            LineItem("SKU-2", Decimal("1"), Decimal("50")),
        ),
    )

    lines = generate_journal(txn)

    assert _pairs(lines) == [
        ("1-1201", Decimal("250"), Decimal("0")),
        ("4-1001", Decimal("0"), Decimal("250")),
        ("5-1001", Decimal("120"), Decimal("0")),
        ("1-1301", Decimal("0"), Decimal("120")),
    ]
    assert lines[2].description == "Cost: Kopi"


def test_purchase_posts_inventory_against_payable():
    """Test the default purchase mapping."""
    lines = generate_journal(_txn(TransactionKind.PURCHASE, "600"))
    assert _pairs(lines) == [
        ("1-1301", Decimal("600"), Decimal("0")),
        ("2-1001", Decimal("0"), Decimal("600")),
    ]


def test_expense_uses_declared_account():
    """Test that an expense posts to its own account, paid from the bank."""
    lines = generate_journal(_txn(TransactionKind.EXPENSE, account_code="6-1001"))
    assert [line.account_code for line in lines] == ["6-1001", "1-1002"]


def test_expense_without_account_uses_default():
    """Test the general expense fallback."""
    lines = generate_journal(_txn(TransactionKind.EXPENSE))
    assert [line.account_code for line in lines] == ["6-0000", "1-1002"]


def test_payment_in_and_out():
    """Test that payments settle receivables and payables."""
    incoming = generate_journal(_txn(TransactionKind.PAYMENT_IN, account_code="1-1001"))
    outgoing = generate_journal(_txn(TransactionKind.PAYMENT_OUT))

    assert [line.account_code for line in incoming] == ["1-1001", "1-1201"]
    assert [line.account_code for line in outgoing] == ["2-1001", "1-1002"]


@pytest.mark.parametrize(
    "tender,account",
    [(None, "1-1001"), ("Cash", "1-1001"), ("tunai", "1-1001"), ("QRIS", "1-1002"), ("Debit Card", "1-1002")],
)
def test_pos_sale_tender(tender, account):
    """Test that cash receipts go to cash and everything else to the bank."""
    lines = generate_journal(_txn(TransactionKind.POS_SALE, tender=tender))
    assert [line.account_code for line in lines] == [account, "4-1001"]


class TestManualEntries:
    """Tests for manual entry mapping."""

    def test_declared_accounts_win(self):
        txn = _txn(TransactionKind.MANUAL, account_code="1-2001", contra_account_code="2-2001",
                   posting_kind=TransactionKind.EXPENSE)
        assert [line.account_code for line in generate_journal(txn)] == ["1-2001", "2-2001"]

    def test_posting_kind_pair(self):
        txn = _txn(TransactionKind.MANUAL, posting_kind=TransactionKind.PURCHASE)
        assert [line.account_code for line in generate_journal(txn)] == ["1-1301", "2-1001"]

    def test_fallback_pair(self):
        txn = _txn(TransactionKind.MANUAL)
        lines = generate_journal(txn)
        assert [line.account_code for line in lines] == ["6-0000", "1-1002"]
        assert lines[0].description == "Manual"


def test_zero_amount_still_posts():
    """Test that a zero amount produces a pair of zero lines."""
    lines = generate_journal(_txn(TransactionKind.EXPENSE, "0"))
    assert _pairs(lines) == [
        ("6-0000", Decimal("0"), Decimal("0")),
        ("1-1002", Decimal("0"), Decimal("0")),
    ]


def test_negative_amount_swaps_columns():
    """Test that a negative amount reverses the posting."""
    lines = generate_journal(_txn(TransactionKind.EXPENSE, "-300"))
    assert _pairs(lines) == [
        ("6-0000", Decimal("0"), Decimal("300")),
        ("1-1002", Decimal("300"), Decimal("0")),
    ]


def test_custom_defaults():
    """Test that default account codes can be replaced."""
    defaults = DefaultAccounts(bank="1-1003", expense="6-9000")
    lines = generate_journal(_txn(TransactionKind.EXPENSE), defaults=defaults)
    assert [line.account_code for line in lines] == ["6-9000", "1-1003"]


class TestOverrides:
    """Tests for account mapping overrides."""

    def test_credit_override_changes_only_credit(self, sale):
        override = AccountMappingOverride(
            "INV-001", (OverrideLine(Position.CREDIT, "4-1002"),)
        )
        default = generate_journal(sale)
        remapped = generate_journal(sale, [override])

        assert [line.account_code for line in remapped] == ["1-1201", "4-1002"]
        assert [(l.debit, l.credit) for l in remapped] == [(l.debit, l.credit) for l in default]

    def test_override_for_other_transaction_is_ignored(self, sale):
        override = AccountMappingOverride("INV-999", (OverrideLine(Position.DEBIT, "1-1001"),))
        assert generate_journal(sale, override) == generate_journal(sale)

    def test_override_keeps_cost_of_goods_defaults(self):
        txn = _txn(
            TransactionKind.SALES,
            "100",
            line_items=(LineItem("SKU-1", Decimal("1"), Decimal("100"), Decimal("40")),),
        )
        override = AccountMappingOverride(
            txn.id,
            (OverrideLine(Position.DEBIT, "1-1001"), OverrideLine(Position.CREDIT, "4-1002")),
        )
        lines = generate_journal(txn, {txn.id: override})
        assert [line.account_code for line in lines] == ["1-1001", "4-1002", "5-1001", "1-1301"]

    def test_unknown_override_code_is_posted_and_logged(self, sale, chart, caplog):
        override = AccountMappingOverride("INV-001", (OverrideLine(Position.CREDIT, "4-9999"),))

        with caplog.at_level(logging.WARNING, logger="ledgerit.domain.journal"):
            lines = generate_journal(sale, override, chart=chart)

        assert lines[1].account_code == "4-9999"
        assert "4-9999" in caplog.text

    def test_index_overrides_last_wins(self):
        first = AccountMappingOverride("T1", (OverrideLine(Position.DEBIT, "1-1001"),))
        second = AccountMappingOverride("T1", (OverrideLine(Position.DEBIT, "1-1002"),))
        assert index_overrides([first, second]) == {"T1": second}
        assert index_overrides(None) == {}


def test_generate_journals_orders_by_date_then_ref():
    """Test journal ordering across transactions."""
    transactions = [
        _txn(TransactionKind.EXPENSE, id="B", date=date(2024, 3, 2)),
        _txn(TransactionKind.EXPENSE, id="A", date=date(2024, 3, 2)),
        _txn(TransactionKind.EXPENSE, id="C", date=date(2024, 3, 1)),
    ]
    lines = generate_journals(transactions)
    assert [line.ref for line in lines] == ["C", "C", "A", "A", "B", "B"]
