"""Balance integrity checker."""

from decimal import Decimal
import logging
from typing import Sequence, Union

from ledgerit.domain.accounts import is_debit_normal
from ledgerit.domain.entities import IntegrityResult, TrialBalanceRow, ZERO

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal("0.01")


def check_balance(
    trial_balance: Sequence[TrialBalanceRow],
    tolerance: Union[Decimal, float, str] = DEFAULT_TOLERANCE,
) -> IntegrityResult:
    """Compare total ending balances of debit-normal and credit-normal accounts.

    Never raises: an imbalance is reported through ``is_balanced`` and the
    result's ``discrepancy`` so the caller can decide how to surface it.
    """
    tolerance = Decimal(str(tolerance))
    debit_total = ZERO
    credit_total = ZERO
    for row in trial_balance:
        if is_debit_normal(row.code):
            debit_total += row.ending
        else:
            credit_total += row.ending

    is_balanced = abs(debit_total - credit_total) < tolerance
    if not is_balanced:
        logger.warning(
            "Trial balance out of balance: debit %s, credit %s", debit_total, credit_total
        )
    return IntegrityResult(debit_total=debit_total, credit_total=credit_total, is_balanced=is_balanced)
