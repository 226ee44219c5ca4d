"""Transaction normalizer.

Each external feed has its own column layout. The adapters in this module
turn those loosely-shaped rows into canonical :class:`Transaction` records so
the rest of the engine never depends on source-specific column names.

Normalization never fails on bad data: unparsable numbers become zero, and
rows missing their identity or date are dropped with a logged warning.
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal
import json
import logging
from typing import Any, Callable, Iterable, Optional

from ledgerit.domain.entities import Account, LineItem, Transaction, TransactionKind, ZERO
from ledgerit.utils.amount_parser import coerce_amount
from ledgerit.utils.date_parser import parse_feed_date

logger = logging.getLogger(__name__)

RawRow = Mapping[str, Any]
UnitCosts = Mapping[str, Decimal]
Adapter = Callable[
    [Sequence[RawRow], TransactionKind, UnitCosts, str],
    tuple[list[Transaction], list[str]],
]


def _cell(row: RawRow, *names: str) -> Any:
    """Return the first non-empty value among candidate column names.

    Column names are matched case-insensitively and trimmed.
    """
    lowered = {str(k).strip().lower(): v for k, v in row.items()}
    for name in names:
        value = lowered.get(name.lower())
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def _text(row: RawRow, *names: str) -> Optional[str]:
    value = _cell(row, *names)
    return str(value).strip() if value is not None else None


def _drop(errors: list[str], kind: TransactionKind, position: int, reason: str) -> None:
    message = f"{kind.value} row {position}: {reason}"
    logger.warning("Dropping %s", message)
    errors.append(message)


def _unit_cost(row: Mapping[str, Any], sku: str, unit_costs: UnitCosts, *names: str) -> Decimal:
    cost = coerce_amount(_cell(row, *names)) if names else ZERO
    if cost == ZERO:
        cost = unit_costs.get(sku, ZERO)
    return cost


def _invoice_rows(
    rows: Sequence[RawRow],
    kind: TransactionKind,
    unit_costs: UnitCosts,
    source: str,
) -> tuple[list[Transaction], list[str]]:
    """Sales and purchase invoices: one row per item, grouped by invoice number."""
    is_sales = kind == TransactionKind.SALES
    id_columns = ("Inv_Number", "invoice", "id") if is_sales else ("Bill_Number", "bill", "id")
    partner_columns = ("Customer", "Partner", "Partner_Name") if is_sales else ("Supplier", "Partner", "Partner_Name")

    errors: list[str] = []
    grouped: dict[str, dict[str, Any]] = {}
    for position, row in enumerate(rows, start=1):
        txn_id = _text(row, *id_columns)
        if not txn_id:
            _drop(errors, kind, position, "missing invoice number")
            continue
        txn_date = parse_feed_date(_cell(row, "Trx_Date", "date"))
        if txn_date is None:
            _drop(errors, kind, position, f"invalid date for '{txn_id}'")
            continue

        sku = _text(row, "Product_SKU", "sku") or ""
        qty = coerce_amount(_cell(row, "Qty", "quantity"))
        if is_sales:
            item = LineItem(
                sku=sku,
                qty=qty,
                unit_price=coerce_amount(_cell(row, "Unit_Price", "price")),
                unit_cost=_unit_cost(row, sku, unit_costs, "Unit_Cost", "cost"),
                name=_text(row, "Product_Name", "name"),
            )
        else:
            item = LineItem(
                sku=sku,
                qty=qty,
                unit_cost=coerce_amount(_cell(row, "Unit_Cost", "cost", "price")),
                name=_text(row, "Product_Name", "name"),
            )

        entry = grouped.get(txn_id)
        if entry is None:
            entry = grouped[txn_id] = {
                "date": txn_date,
                "counterpart": _text(row, *partner_columns),
                "description": _text(row, "Desc", "description"),
                "items": [],
            }
        entry["items"].append(item)

    transactions = []
    for txn_id, entry in grouped.items():
        items = tuple(entry["items"])
        if is_sales:
            amount = sum((i.total_price for i in items), ZERO)
        else:
            amount = sum((i.total_cost for i in items), ZERO)
        transactions.append(
            Transaction(
                id=txn_id,
                date=entry["date"],
                kind=kind,
                amount=amount,
                counterpart=entry["counterpart"],
                line_items=items,
                description=entry["description"],
                source=source,
            )
        )
    return transactions, errors


def _expense_rows(
    rows: Sequence[RawRow],
    kind: TransactionKind,
    unit_costs: UnitCosts,
    source: str,
) -> tuple[list[Transaction], list[str]]:
    errors: list[str] = []
    transactions = []
    for idx, row in enumerate(rows):
        txn_id = _text(row, "Expense_ID", "id") or f"EXP-{idx + 1}"
        txn_date = parse_feed_date(_cell(row, "Trx_Date", "date"))
        if txn_date is None:
            _drop(errors, kind, idx + 1, f"invalid date for '{txn_id}'")
            continue
        transactions.append(
            Transaction(
                id=txn_id,
                date=txn_date,
                kind=TransactionKind.EXPENSE,
                amount=coerce_amount(_cell(row, "Amount", "total")),
                counterpart=_text(row, "Partner", "Vendor"),
                account_code=_text(row, "Expense_Account", "account"),
                description=_text(row, "Desc", "Description"),
                source=source,
            )
        )
    return transactions, errors


def _payment_direction(value: Optional[str], default: TransactionKind) -> TransactionKind:
    if not value:
        return default
    text = value.strip().upper()
    if text in ("IN", "PAYMENT IN", "RECEIPT"):
        return TransactionKind.PAYMENT_IN
    if text in ("OUT", "PAYMENT OUT", "DISBURSEMENT"):
        return TransactionKind.PAYMENT_OUT
    return default


def _payment_rows(
    rows: Sequence[RawRow],
    kind: TransactionKind,
    unit_costs: UnitCosts,
    source: str,
) -> tuple[list[Transaction], list[str]]:
    errors: list[str] = []
    transactions = []
    for idx, row in enumerate(rows):
        txn_id = _text(row, "Payment_ID", "id") or f"PAY-{idx}"
        txn_date = parse_feed_date(_cell(row, "Trx_Date", "date"))
        if txn_date is None:
            _drop(errors, kind, idx + 1, f"invalid date for '{txn_id}'")
            continue
        ref = _text(row, "Ref_Number", "reference")
        transactions.append(
            Transaction(
                id=txn_id,
                date=txn_date,
                kind=_payment_direction(_text(row, "Payment_Type", "type"), kind),
                amount=coerce_amount(_cell(row, "Amount", "total")),
                counterpart=_text(row, "Partner", "Partner_Name"),
                account_code=_text(row, "Account_Code", "account"),
                description=f"Payment for {ref}" if ref else None,
                source=source,
            )
        )
    return transactions, errors


def _pos_items(raw: Any, unit_costs: UnitCosts) -> tuple[LineItem, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            logger.warning("Unreadable POS item list %r, treating as empty", raw[:40])
            return ()
    if not isinstance(raw, list):
        return ()

    items = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            continue
        sku = str(entry.get("sku") or "")
        items.append(
            LineItem(
                sku=sku,
                qty=coerce_amount(entry.get("qty")),
                unit_price=coerce_amount(entry.get("price")),
                unit_cost=_unit_cost(entry, sku, unit_costs, "unit_cost", "cost"),
                name=entry.get("name"),
            )
        )
    return tuple(items)


def _pos_rows(
    rows: Sequence[RawRow],
    kind: TransactionKind,
    unit_costs: UnitCosts,
    source: str,
) -> tuple[list[Transaction], list[str]]:
    errors: list[str] = []
    transactions = []
    for position, row in enumerate(rows, start=1):
        txn_id = _text(row, "id", "Trx_ID")
        if not txn_id:
            _drop(errors, kind, position, "missing receipt id")
            continue
        txn_date = parse_feed_date(_cell(row, "date", "Trx_Date"))
        if txn_date is None:
            _drop(errors, kind, position, f"invalid date for '{txn_id}'")
            continue
        items = _pos_items(_cell(row, "items", "Items"), unit_costs)
        transactions.append(
            Transaction(
                id=txn_id,
                date=txn_date,
                kind=TransactionKind.POS_SALE,
                amount=coerce_amount(_cell(row, "total", "Total")),
                counterpart=_text(row, "cashier", "Cashier"),
                line_items=items,
                tender=_text(row, "paymentMethod", "Payment_Method"),
                description=f"POS Sales ({len(items)} items)",
                source=source,
            )
        )
    return transactions, errors


_MANUAL_POSTING_KINDS = {
    "sales": TransactionKind.SALES,
    "purchase": TransactionKind.PURCHASE,
    "expense": TransactionKind.EXPENSE,
}


def _manual_rows(
    rows: Sequence[RawRow],
    kind: TransactionKind,
    unit_costs: UnitCosts,
    source: str,
) -> tuple[list[Transaction], list[str]]:
    errors: list[str] = []
    transactions = []
    for position, row in enumerate(rows, start=1):
        txn_id = _text(row, "id")
        if not txn_id:
            _drop(errors, kind, position, "missing id")
            continue
        txn_date = parse_feed_date(_cell(row, "date"))
        if txn_date is None:
            _drop(errors, kind, position, f"invalid date for '{txn_id}'")
            continue
        manual_type = (_text(row, "type") or "").lower()
        desc = _text(row, "desc", "description")
        transactions.append(
            Transaction(
                id=txn_id,
                date=txn_date,
                kind=TransactionKind.MANUAL,
                amount=coerce_amount(_cell(row, "amount")),
                counterpart=_text(row, "partner"),
                account_code=_text(row, "debit_account", "debit_acc"),
                contra_account_code=_text(row, "credit_account", "credit_acc"),
                description=f"Manual: {desc}" if desc else "Manual",
                source=source,
                posting_kind=_MANUAL_POSTING_KINDS.get(manual_type),
            )
        )
    return transactions, errors


_ADAPTERS: dict[TransactionKind, Adapter] = {
    TransactionKind.SALES: _invoice_rows,
    TransactionKind.PURCHASE: _invoice_rows,
    TransactionKind.EXPENSE: _expense_rows,
    TransactionKind.PAYMENT_IN: _payment_rows,
    TransactionKind.PAYMENT_OUT: _payment_rows,
    TransactionKind.POS_SALE: _pos_rows,
    TransactionKind.MANUAL: _manual_rows,
}


def normalize_rows(
    raw_rows: Iterable[RawRow],
    kind: TransactionKind,
    unit_costs: Optional[UnitCosts] = None,
    source: str = "remote",
) -> tuple[list[Transaction], list[str]]:
    """Normalize raw feed rows, also returning a message per dropped row."""
    kind = TransactionKind(kind)
    rows = list(raw_rows)
    transactions, errors = _ADAPTERS[kind](rows, kind, unit_costs or {}, source)
    logger.debug(
        "Normalized %d %s rows into %d transactions (%d dropped)",
        len(rows),
        kind.value,
        len(transactions),
        len(errors),
    )
    return transactions, errors


def normalize(
    raw_rows: Iterable[RawRow],
    kind: TransactionKind,
    unit_costs: Optional[UnitCosts] = None,
    source: str = "remote",
) -> list[Transaction]:
    """Convert one feed's raw rows into canonical transactions.

    Args:
        raw_rows: Rows of a single source, as string-keyed mappings
        kind: Kind of the source feed; payment feeds may mix directions
        unit_costs: Optional SKU to standard unit cost map used when a line
            item does not carry its own cost
        source: Channel the rows were observed through (e.g. remote, local)

    Returns:
        Canonical transactions in feed order
    """
    transactions, _ = normalize_rows(raw_rows, kind, unit_costs=unit_costs, source=source)
    return transactions


def normalize_chart(raw_rows: Iterable[RawRow]) -> list[Account]:
    """Convert chart of accounts feed rows into accounts.

    Rows without an account code are dropped.
    """
    accounts = []
    for position, row in enumerate(raw_rows, start=1):
        code = _text(row, "Account_Code", "code", "KODE")
        if not code:
            logger.warning("Dropping chart of accounts row %d: missing account code", position)
            continue
        accounts.append(
            Account(
                code=code,
                name=_text(row, "Account_Name", "name", "NAMA_AKUN") or code,
                category=_text(row, "Category", "Type") or "Uncategorized",
                opening_balance=coerce_amount(_cell(row, "Opening_Balance", "Saldo_Awal", "opening_balance")),
            )
        )
    return accounts


def normalize_unit_costs(raw_rows: Iterable[RawRow]) -> dict[str, Decimal]:
    """Build a SKU to standard unit cost map from product master rows."""
    costs: dict[str, Decimal] = {}
    for row in raw_rows:
        sku = _text(row, "SKU", "Product_SKU", "sku")
        if not sku:
            continue
        costs[sku] = coerce_amount(_cell(row, "Std_Cost_Budget", "Unit_Cost", "cost"))
    return costs
