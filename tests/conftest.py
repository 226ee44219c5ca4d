"""Shared pytest fixtures for ledgerit tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
from pathlib import Path
import pytest

from ledgerit.database.factories import create_sqlite_database
from ledgerit.domain.engine import LedgerEngine
from ledgerit.domain.entities import Account, Transaction, TransactionKind
from ledgerit.domain.feed_import import FeedImportService
from ledgerit.domain.overrides import OverrideService


CHART = [
    Account("1-1001", "Cash", "Asset", Decimal("1000000")),
    Account("1-1002", "Bank", "Asset"),
    Account("1-1201", "Accounts Receivable", "Asset"),
    Account("1-1301", "Inventory", "Asset"),
    Account("1-2001", "Equipment", "Asset"),
    Account("2-1001", "Accounts Payable", "Liability"),
    Account("2-2001", "Bank Loan", "Liability"),
    Account("3-1001", "Capital", "Equity", Decimal("1000000")),
    Account("4-1001", "Sales Revenue", "Revenue"),
    Account("4-1002", "Service Revenue", "Revenue"),
    Account("5-1001", "Cost of Goods Sold", "Cost of Sales"),
    Account("6-0000", "General Expense", "Expense"),
    Account("6-1001", "Rent", "Expense"),
    Account("7-1001", "Interest Expense", "Other Expense"),
]


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def chart():
    """Chart of accounts whose opening balances balance."""
    return list(CHART)


@pytest.fixture
def seeded_db(temp_db, chart):
    """Temporary database with the chart of accounts loaded."""
    for account in chart:
        temp_db.upsert_account(account)
    return temp_db


@pytest.fixture
def feed_import_service(seeded_db):
    """Create a FeedImportService with a seeded database."""
    return FeedImportService(seeded_db)


@pytest.fixture
def override_service(seeded_db):
    """Create an OverrideService with a seeded database."""
    return OverrideService(seeded_db)


@pytest.fixture
def engine(seeded_db):
    """Create a LedgerEngine with a seeded database."""
    return LedgerEngine(seeded_db)


@pytest.fixture
def sale():
    """A single in-period sales invoice without items."""
    return Transaction(
        id="INV-001",
        date=date(2024, 3, 5),
        kind=TransactionKind.SALES,
        amount=Decimal("500000"),
        counterpart="PT Maju",
    )


@pytest.fixture
def payment_in():
    """Customer payment settling the sample invoice into the bank."""
    return Transaction(
        id="PAY-001",
        date=date(2024, 3, 20),
        kind=TransactionKind.PAYMENT_IN,
        amount=Decimal("500000"),
        counterpart="PT Maju",
        account_code="1-1002",
        description="Payment for INV-001",
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
