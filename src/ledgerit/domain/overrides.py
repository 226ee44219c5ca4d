"""Account mapping override domain service."""

import logging
from typing import Optional

from ledgerit.database.base import Database
from ledgerit.domain.entities import AccountMappingOverride, OverrideLine, Position
from ledgerit.domain.errors import NotFoundError, ValidationError, override_not_found

logger = logging.getLogger(__name__)


class OverrideService:
    """Service for managing per-transaction account mapping overrides."""

    def __init__(self, db: Database):
        """Initialize override service.

        Args:
            db: Database instance
        """
        self.db = db

    def set_override(
        self,
        transaction_id: str,
        debit_account: Optional[str] = None,
        credit_account: Optional[str] = None,
    ) -> AccountMappingOverride:
        """Replace the account codes used for a transaction's posting.

        Codes missing from the chart of accounts are accepted and stored as-is;
        a warning is logged so the mapping can be reviewed.

        Args:
            transaction_id: Id of the transaction to remap
            debit_account: Account code for the debit position
            credit_account: Account code for the credit position

        Returns:
            The stored override

        Raises:
            ValidationError: If neither position is given
        """
        lines = []
        if debit_account:
            lines.append(OverrideLine(position=Position.DEBIT, account_code=debit_account.strip()))
        if credit_account:
            lines.append(OverrideLine(position=Position.CREDIT, account_code=credit_account.strip()))
        if not lines:
            raise ValidationError("An override needs a debit or a credit account")

        for line in lines:
            if self.db.get_account(line.account_code) is None:
                logger.warning(
                    "Override for %s maps %s to %s, which is not in the chart of accounts",
                    transaction_id,
                    line.position.value,
                    line.account_code,
                )

        override = AccountMappingOverride(transaction_id=transaction_id, lines=tuple(lines))
        self.db.set_override(override)
        return override

    def get_override(self, transaction_id: str) -> Optional[AccountMappingOverride]:
        """Get the override for a transaction, or None."""
        return self.db.get_override(transaction_id)

    def list_overrides(self) -> list[AccountMappingOverride]:
        """List all overrides."""
        return self.db.list_overrides()

    def clear_override(self, transaction_id: str) -> None:
        """Remove a transaction's override so default mapping applies again.

        Raises:
            NotFoundError: If the transaction has no override
        """
        if self.db.get_override(transaction_id) is None:
            raise NotFoundError(override_not_found(transaction_id))
        self.db.delete_override(transaction_id)
