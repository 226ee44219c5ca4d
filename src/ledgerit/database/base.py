"""Abstract store interface.

The store is the system of record for the chart of accounts, transactions,
account mapping overrides and product unit costs. The engine only reads a
snapshot of it; ``revision`` changes whenever any of that data is written so
callers can tell when a derived ledger is stale.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from ledgerit.domain.entities import (
    Account,
    AccountMappingOverride,
    Transaction,
    TransactionKind,
)


class Database(ABC):
    """Abstract database interface for ledgerit."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @property
    @abstractmethod
    def revision(self) -> int:
        """Counter bumped on every write."""
        pass

    # Chart of accounts operations
    @abstractmethod
    def upsert_account(self, account: Account) -> None:
        """Create or replace a chart of accounts entry keyed by code."""
        pass

    @abstractmethod
    def get_account(self, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List the chart of accounts ordered by code."""
        pass

    # Transaction operations
    @abstractmethod
    def upsert_transaction(self, transaction: Transaction) -> bool:
        """Store a transaction keyed by id, replacing an earlier observation.

        Returns True if a transaction with the same id was replaced.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by id."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        kind: Optional[TransactionKind] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, ordered by date then id."""
        pass

    @abstractmethod
    def count_transactions(self) -> int:
        """Count stored transactions."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    # Override operations
    @abstractmethod
    def set_override(self, override: AccountMappingOverride) -> None:
        """Replace the account mapping override of a transaction."""
        pass

    @abstractmethod
    def get_override(self, transaction_id: str) -> Optional[AccountMappingOverride]:
        """Get the override for a transaction id."""
        pass

    @abstractmethod
    def list_overrides(self) -> list[AccountMappingOverride]:
        """List all overrides ordered by transaction id."""
        pass

    @abstractmethod
    def delete_override(self, transaction_id: str) -> None:
        """Delete the override for a transaction id."""
        pass

    # Product cost operations
    @abstractmethod
    def upsert_unit_cost(self, sku: str, unit_cost: Decimal, name: Optional[str] = None) -> None:
        """Create or replace the standard unit cost of a product."""
        pass

    @abstractmethod
    def list_unit_costs(self) -> dict[str, Decimal]:
        """Return the SKU to standard unit cost map."""
        pass
