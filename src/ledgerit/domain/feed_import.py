"""Feed import domain service."""

import csv
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from ledgerit.database.base import Database
from ledgerit.domain.entities import TransactionKind
from ledgerit.domain.normalizer import (
    RawRow,
    normalize_chart,
    normalize_rows,
    normalize_unit_costs,
)

logger = logging.getLogger(__name__)


def read_csv_rows(csv_file_path: str) -> list[dict[str, str]]:
    """Read a CSV export of a feed into row dictionaries.

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
        ValueError: If the CSV file has no header row
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        # Try to detect delimiter
        sample = f.read(1024)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
        except csv.Error:
            delimiter = ","

        reader = csv.DictReader(f, delimiter=delimiter)
        if reader.fieldnames is None:
            raise ValueError("CSV file has no columns")
        return [dict(row) for row in reader]


class FeedImportService:
    """Service for loading external feeds into the store."""

    def __init__(self, db: Database):
        """Initialize feed import service.

        Args:
            db: Database instance
        """
        self.db = db

    def import_rows(
        self,
        rows: Iterable[RawRow],
        kind: TransactionKind,
        source: str = "remote",
    ) -> dict[str, Any]:
        """Normalize feed rows and store the resulting transactions.

        A transaction whose id is already stored replaces the earlier
        observation instead of being counted twice.

        Args:
            rows: Raw rows of one feed
            kind: Kind of the feed
            source: Channel the rows were observed through

        Returns:
            Dict with import statistics:
            - imported: number of new transactions
            - replaced: number of transactions that replaced an earlier observation
            - dropped: number of rows dropped during normalization
            - errors: list of messages for dropped rows
        """
        transactions, errors = normalize_rows(
            rows, kind, unit_costs=self.db.list_unit_costs(), source=source
        )

        imported = 0
        replaced = 0
        for txn in transactions:
            if self.db.upsert_transaction(txn):
                replaced += 1
            else:
                imported += 1

        logger.info(
            "Imported %d %s transactions from %s (%d replaced, %d dropped)",
            imported,
            TransactionKind(kind).value,
            source,
            replaced,
            len(errors),
        )
        return {
            "imported": imported,
            "replaced": replaced,
            "dropped": len(errors),
            "errors": errors,
        }

    def import_csv(
        self, csv_file_path: str, kind: TransactionKind, source: str = "remote"
    ) -> dict[str, Any]:
        """Import a CSV export of a transaction feed.

        Raises:
            FileNotFoundError: If the CSV file doesn't exist
            ValueError: If the CSV file has no header row
        """
        return self.import_rows(read_csv_rows(csv_file_path), kind, source=source)

    def import_chart(self, rows: Iterable[RawRow]) -> int:
        """Load chart of accounts rows. Returns the number of accounts stored."""
        accounts = normalize_chart(rows)
        for account in accounts:
            self.db.upsert_account(account)
        return len(accounts)

    def import_products(self, rows: Iterable[RawRow]) -> int:
        """Load product master rows. Returns the number of unit costs stored."""
        rows = list(rows)
        names: dict[str, Optional[str]] = {}
        for row in rows:
            sku = row.get("SKU") or row.get("sku")
            if sku:
                names[str(sku).strip()] = row.get("Product_Name") or row.get("name")
        costs = normalize_unit_costs(rows)
        for sku, cost in costs.items():
            self.db.upsert_unit_cost(sku, cost, name=names.get(sku))
        return len(costs)
