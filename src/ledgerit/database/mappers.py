"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the schema can change without
touching the engine.
"""

from decimal import Decimal
from typing import Iterable

from ledgerit.domain import entities as domain
from ledgerit.database.models import (
    Account as ORMAccount,
    LineItem as ORMLineItem,
    OverrideLine as ORMOverrideLine,
    Transaction as ORMTransaction,
)


def _decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value or 0))


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        code=orm_account.code,
        name=orm_account.name,
        category=orm_account.category,
        opening_balance=_decimal(orm_account.opening_balance),
    )


def line_item_to_domain(orm_item: ORMLineItem) -> domain.LineItem:
    """Convert SQLAlchemy LineItem model to domain LineItem entity."""
    return domain.LineItem(
        sku=orm_item.sku,
        qty=_decimal(orm_item.qty),
        unit_price=_decimal(orm_item.unit_price),
        unit_cost=_decimal(orm_item.unit_cost),
        name=orm_item.name,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    posting_kind = orm_transaction.posting_kind
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        kind=domain.TransactionKind(orm_transaction.kind),
        amount=_decimal(orm_transaction.amount),
        counterpart=orm_transaction.counterpart,
        line_items=tuple(line_item_to_domain(item) for item in orm_transaction.line_items),
        account_code=orm_transaction.account_code,
        contra_account_code=orm_transaction.contra_account_code,
        tender=orm_transaction.tender,
        description=orm_transaction.description,
        source=orm_transaction.source,
        posting_kind=domain.TransactionKind(posting_kind) if posting_kind else None,
    )


def apply_transaction(orm_transaction: ORMTransaction, transaction: domain.Transaction) -> None:
    """Copy a domain transaction onto a (new or existing) SQLAlchemy model."""
    orm_transaction.id = transaction.id
    orm_transaction.date = transaction.date
    orm_transaction.kind = transaction.kind.value
    orm_transaction.amount = transaction.amount
    orm_transaction.counterpart = transaction.counterpart
    orm_transaction.account_code = transaction.account_code
    orm_transaction.contra_account_code = transaction.contra_account_code
    orm_transaction.tender = transaction.tender
    orm_transaction.description = transaction.description
    orm_transaction.source = transaction.source
    orm_transaction.posting_kind = transaction.posting_kind.value if transaction.posting_kind else None
    orm_transaction.line_items = [
        ORMLineItem(
            position=position,
            sku=item.sku,
            name=item.name,
            qty=item.qty,
            unit_price=item.unit_price,
            unit_cost=item.unit_cost,
        )
        for position, item in enumerate(transaction.line_items)
    ]


def override_to_domain(
    transaction_id: str, orm_lines: Iterable[ORMOverrideLine]
) -> domain.AccountMappingOverride:
    """Convert the override rows of one transaction to a domain override."""
    rank = {position.value: i for i, position in enumerate(domain.Position)}
    lines = sorted(orm_lines, key=lambda line: rank.get(line.position, len(rank)))
    return domain.AccountMappingOverride(
        transaction_id=transaction_id,
        lines=tuple(
            domain.OverrideLine(
                position=domain.Position(line.position),
                account_code=line.account_code,
            )
            for line in lines
        ),
    )
