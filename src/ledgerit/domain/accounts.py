"""Chart of accounts registry.

Account codes follow the prefix convention of the chart of accounts feed:
``1`` assets, ``2`` liabilities, ``3`` equity, ``4`` revenue, ``5`` cost of
sales, ``6`` operating expense and ``7``-``9`` other expenses. The leading
digit fixes an account's normal balance for its whole lifetime.
"""

from dataclasses import dataclass
from functools import lru_cache
import logging
from typing import Iterable, Iterator, Optional

from ledgerit.domain.entities import Account, NormalBalance

logger = logging.getLogger(__name__)

DEBIT_NORMAL_PREFIXES = frozenset("156789")
CREDIT_NORMAL_PREFIXES = frozenset("234")


@dataclass(frozen=True)
class DefaultAccounts:
    """Fallback account codes used when a transaction does not name its own."""

    cash: str = "1-1001"
    bank: str = "1-1002"
    receivable: str = "1-1201"
    inventory: str = "1-1301"
    payable: str = "2-1001"
    sales_revenue: str = "4-1001"
    cost_of_goods_sold: str = "5-1001"
    expense: str = "6-0000"


@lru_cache(maxsize=None)
def normal_balance(code: str) -> NormalBalance:
    """Return the normal balance side implied by an account code."""
    lead = code.strip()[:1]
    if lead in CREDIT_NORMAL_PREFIXES:
        return NormalBalance.CREDIT
    if lead not in DEBIT_NORMAL_PREFIXES:
        logger.warning("Account code %r has no known prefix, treating as debit-normal", code)
    return NormalBalance.DEBIT


def is_debit_normal(code: str) -> bool:
    return normal_balance(code) == NormalBalance.DEBIT


class AccountRegistry:
    """Read-only index of the chart of accounts keyed by account code."""

    def __init__(self, accounts: Iterable[Account] = ()):
        self._accounts: dict[str, Account] = {}
        for account in accounts:
            if account.code in self._accounts:
                logger.warning("Duplicate chart of accounts code %s, keeping last entry", account.code)
            self._accounts[account.code] = account

    @classmethod
    def coerce(cls, chart: "AccountRegistry | Iterable[Account]") -> "AccountRegistry":
        """Accept either a registry or a plain iterable of accounts."""
        if isinstance(chart, AccountRegistry):
            return chart
        return cls(chart)

    def __contains__(self, code: object) -> bool:
        return code in self._accounts

    def __iter__(self) -> Iterator[Account]:
        return iter(sorted(self._accounts.values(), key=lambda a: a.code))

    def __len__(self) -> int:
        return len(self._accounts)

    def get(self, code: str) -> Optional[Account]:
        return self._accounts.get(code)

    def display_name(self, code: str) -> str:
        """Return the account name, or the raw code for unknown accounts."""
        account = self._accounts.get(code)
        return account.name if account is not None else code

    def normal_balance(self, code: str) -> NormalBalance:
        return normal_balance(code)

    def by_category(self) -> dict[str, list[Account]]:
        """Group accounts by category, as the ledger sidebar lists them."""
        groups: dict[str, list[Account]] = {}
        for account in self:
            groups.setdefault(account.category or "Uncategorized", []).append(account)
        return groups
