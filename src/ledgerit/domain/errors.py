"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


def account_not_found(code: str) -> str:
    """Return message for missing chart of accounts entry."""
    return f"Account {code} not found in chart of accounts"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction '{transaction_id}' not found"


def override_not_found(transaction_id: str) -> str:
    """Return message for missing account mapping override."""
    return f"No account mapping override for transaction '{transaction_id}'"


def duplicate_override_position(transaction_id: str, position: str) -> str:
    """Return message when an override names the same position twice."""
    return f"Override for transaction '{transaction_id}' sets {position} more than once"


def unknown_account_code(code: str, ref: str) -> str:
    """Return warning for a journal line posted to a code outside the chart."""
    return f"Journal line for '{ref}' uses account {code} which is not in the chart of accounts"


def ledger_out_of_balance(discrepancy: Decimal) -> str:
    """Return warning for a trial balance whose debits and credits differ."""
    return f"Trial balance is out of balance by {discrepancy:,.2f}"


def retained_earnings_plug_mismatch(discrepancy: Decimal) -> str:
    """Return warning when the balance sheet plug differs from ledger earnings."""
    return (
        f"Retained earnings plug differs from ledger earnings by {discrepancy:,.2f}; "
        "the balance sheet balances by construction only"
    )
