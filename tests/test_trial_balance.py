"""Tests for the ledger consolidator."""

from dataclasses import replace
from datetime import date
from decimal import Decimal
import random

from ledgerit.domain.entities import (
    AccountMappingOverride,
    OverrideLine,
    Position,
    Transaction,
    TransactionKind,
)
from ledgerit.domain.integrity import check_balance
from ledgerit.domain.trial_balance import (
    TransactionIndex,
    build_account_ledger,
    build_trial_balance,
    consolidate,
)

MARCH = (date(2024, 3, 1), date(2024, 3, 31))


def _rows_by_code(rows):
    return {row.code: row for row in rows}


def _expense(txn_id, day, amount, account="6-1001"):
    return Transaction(
        id=txn_id,
        date=day,
        kind=TransactionKind.EXPENSE,
        amount=Decimal(amount),
        account_code=account,
    )


class TestTransactionIndex:
    """Tests for the id-keyed transaction arena."""

    def test_last_observation_wins(self, sale):
        corrected = replace(sale, amount=Decimal("450000"), source="local")
        index = TransactionIndex([sale])

        assert index.add(corrected) is True
        assert len(index) == 1
        assert index.get("INV-001").amount == Decimal("450000")

    def test_iterates_by_date_then_id(self, sale, payment_in):
        index = TransactionIndex([payment_in, sale])
        assert [t.id for t in index] == ["INV-001", "PAY-001"]
        assert "PAY-001" in index

    def test_extend_counts_replacements(self, sale):
        index = TransactionIndex()
        assert index.extend([sale, sale, replace(sale, id="INV-002")]) == 1


def test_sale_scenario(chart, sale):
    """Test a single in-period sale."""
    rows = _rows_by_code(build_trial_balance([sale], None, chart, *MARCH))

    receivable = rows["1-1201"]
    assert receivable.opening == Decimal("0")
    assert receivable.period_debit == Decimal("500000")
    assert receivable.movement == Decimal("500000")
    assert receivable.ending == Decimal("500000")

    revenue = rows["4-1001"]
    assert revenue.period_credit == Decimal("500000")
    assert revenue.movement == Decimal("500000")


def test_sale_and_payment_scenario(chart, sale, payment_in):
    """Test that a payment clears the receivable and the ledger balances."""
    rows = build_trial_balance([sale, payment_in], None, chart, *MARCH)
    by_code = _rows_by_code(rows)

    assert by_code["1-1201"].ending == Decimal("0")
    assert by_code["1-1002"].ending == Decimal("500000")
    assert by_code["1-1001"].ending + by_code["1-1002"].ending == Decimal("1500000")
    assert check_balance(rows).is_balanced


def test_every_chart_account_has_a_row(chart):
    """Test that accounts without movement still appear with their opening."""
    rows = build_trial_balance([], None, chart, *MARCH)
    assert [row.code for row in rows] == sorted(a.code for a in chart)
    assert _rows_by_code(rows)["1-1001"].ending == Decimal("1000000")


def test_ending_is_opening_plus_movement(chart, sale, payment_in):
    """Test the row invariant for every account."""
    transactions = [sale, payment_in, _expense("EXP-1", date(2024, 3, 3), "75000")]
    for row in build_trial_balance(transactions, None, chart, *MARCH):
        assert row.ending == row.opening + row.movement


def test_lines_before_period_fold_into_opening(chart, sale):
    """Test that earlier lines move the opening balance by polarity."""
    february_sale = replace(sale, date=date(2024, 2, 10))
    rows = _rows_by_code(build_trial_balance([february_sale], None, chart, *MARCH))

    assert rows["1-1201"].opening == Decimal("500000")
    assert rows["1-1201"].period_debit == Decimal("0")
    assert rows["4-1001"].opening == Decimal("500000")
    assert rows["4-1001"].ending == Decimal("500000")


def test_lines_after_period_are_ignored(chart, sale):
    """Test that later lines do not touch the period."""
    april_sale = replace(sale, date=date(2024, 4, 2))
    rows = _rows_by_code(build_trial_balance([april_sale], None, chart, *MARCH))
    assert rows["1-1201"].ending == Decimal("0")
    assert rows["4-1001"].ending == Decimal("0")


def test_credit_normal_movement_is_credit_minus_debit(chart):
    """Test polarity on a liability paid down in the period."""
    payment = Transaction(
        id="PAY-OUT-1",
        date=date(2024, 3, 12),
        kind=TransactionKind.PAYMENT_OUT,
        amount=Decimal("200"),
    )
    payable = _rows_by_code(build_trial_balance([payment], None, chart, *MARCH))["2-1001"]
    assert payable.period_debit == Decimal("200")
    assert payable.movement == Decimal("-200")


def test_duplicate_observations_count_once(chart, sale):
    """Test that merging the same transaction twice is a no-op."""
    once = build_trial_balance([sale], None, chart, *MARCH)
    twice = build_trial_balance([sale, replace(sale, source="local")], None, chart, *MARCH)
    assert once == twice


def test_order_of_transactions_does_not_matter(chart, sale, payment_in):
    """Test permutation and re-run idempotence."""
    transactions = [
        sale,
        payment_in,
        _expense("EXP-1", date(2024, 2, 3), "75000"),
        _expense("EXP-2", date(2024, 3, 3), "1200000", account="6-0000"),
        _expense("EXP-3", date(2024, 3, 9), "0"),
    ]
    expected = build_trial_balance(transactions, None, chart, *MARCH)

    shuffled = list(transactions)
    random.Random(7).shuffle(shuffled)
    assert build_trial_balance(shuffled, None, chart, *MARCH) == expected
    assert build_trial_balance(list(reversed(transactions)), None, chart, *MARCH) == expected


def test_override_changes_only_the_overridden_account(chart, sale):
    """Test that remapping revenue moves the balance between revenue accounts."""
    override = AccountMappingOverride("INV-001", (OverrideLine(Position.CREDIT, "4-1002"),))
    rows = _rows_by_code(build_trial_balance([sale], [override], chart, *MARCH))

    assert rows["4-1001"].ending == Decimal("0")
    assert rows["4-1002"].ending == Decimal("500000")
    assert rows["1-1201"].ending == Decimal("500000")


def test_unknown_account_code_is_kept_and_reported(chart):
    """Test that codes outside the chart still post and raise a warning."""
    rows, warnings = consolidate([_expense("EXP-9", date(2024, 3, 5), "100", account="6-9999")], None, chart, *MARCH)

    unknown = _rows_by_code(rows)["6-9999"]
    assert unknown.name == "6-9999"
    assert unknown.ending == Decimal("100")
    assert len(warnings) == 1
    assert "6-9999" in warnings[0]


def test_zero_amount_expense_is_a_no_op(chart):
    """Test that a dash amount leaves balances untouched."""
    base = build_trial_balance([], None, chart, *MARCH)
    rows = build_trial_balance([_expense("EXP-0", date(2024, 3, 5), "0", account="6-0000")], None, chart, *MARCH)
    assert rows == base


class TestAccountLedger:
    """Tests for the per-account general ledger."""

    def test_running_balance(self, chart, sale, payment_in):
        ledger = build_account_ledger([sale, payment_in], None, chart, "1-1201", *MARCH)

        assert ledger.name == "Accounts Receivable"
        assert ledger.opening == Decimal("0")
        assert [e.balance for e in ledger.entries] == [Decimal("500000"), Decimal("0")]
        assert ledger.total_debit == Decimal("500000")
        assert ledger.total_credit == Decimal("500000")
        assert ledger.closing == Decimal("0")

    def test_opening_includes_earlier_lines(self, chart, sale):
        february_sale = replace(sale, id="INV-000", date=date(2024, 2, 1))
        ledger = build_account_ledger([february_sale, sale], None, chart, "4-1001", *MARCH)

        assert ledger.opening == Decimal("500000")
        assert len(ledger.entries) == 1
        assert ledger.closing == Decimal("1000000")

    def test_declared_opening_balance(self, chart, payment_in):
        ledger = build_account_ledger([payment_in], None, chart, "1-1001", *MARCH)
        assert ledger.opening == Decimal("1000000")
        assert ledger.entries == ()
        assert ledger.closing == Decimal("1000000")
