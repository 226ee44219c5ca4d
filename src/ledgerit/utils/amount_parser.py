"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)


def _normalize_separators(amount_str: str) -> str:
    """Rewrite thousands/decimal separators into plain ``1234.56`` form.

    Both "1,234.56" and "1.234,56" are accepted. When only one separator kind
    is present it is a thousands separator if it repeats or is followed by
    exactly three digits ("1.200.000", "1,234"), otherwise it is the decimal
    point ("123.45", "12,5").
    """
    has_dot = "." in amount_str
    has_comma = "," in amount_str

    if has_dot and has_comma:
        if amount_str.rfind(",") > amount_str.rfind("."):
            return amount_str.replace(".", "").replace(",", ".")
        return amount_str.replace(",", "")

    if not has_dot and not has_comma:
        return amount_str

    sep = "." if has_dot else ","
    head, _, tail = amount_str.rpartition(sep)
    if amount_str.count(sep) > 1 or len(tail) == 3:
        return amount_str.replace(sep, "")
    return f"{head}.{tail}"


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "Rp 1.200.000"
    - "-123.45"
    - "1,234.56"
    - "1.234,56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Drop currency symbols, codes and any other stray characters
    cleaned = re.sub(r"[^0-9.,\-]", "", amount_str)
    if cleaned.startswith("-"):
        is_negative = not is_negative
    cleaned = cleaned.replace("-", "")

    if not any(ch.isdigit() for ch in cleaned):
        raise ValueError(f"Could not parse amount '{amount_str}': no digits")

    try:
        amount = Decimal(_normalize_separators(cleaned))
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    return -amount if is_negative else amount


def coerce_amount(value: Any) -> Decimal:
    """Parse a numeric cell, resolving missing or unparsable values to zero.

    Spreadsheet feeds hand back numbers, numeric strings, currency-formatted
    strings or nothing at all; a bad cell must never abort a recomputation.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, bool):
        return Decimal("0")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, (Decimal, float)):
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
        if not amount.is_finite():
            logger.debug("Non-finite amount %r coerced to zero", value)
            return Decimal("0")
        return amount

    text = str(value)
    if not text.strip():
        return Decimal("0")
    try:
        return parse_amount(text)
    except ValueError:
        logger.debug("Unparsable amount %r coerced to zero", value)
        return Decimal("0")
