"""Utility functions for ledgerit."""

from ledgerit.utils.date_parser import parse_date, parse_feed_date, get_date_range
from ledgerit.utils.amount_parser import parse_amount, coerce_amount

__all__ = ["parse_date", "parse_feed_date", "get_date_range", "parse_amount", "coerce_amount"]
