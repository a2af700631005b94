"""Profit terms - absolute profit is stored, percentage is derived"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from debt_ledger.domain.exceptions import ValidationError


def resolve_profit(
    base_value: int,
    percentage: Optional[float] = None,
    fixed: Optional[int] = None,
) -> int:
    """
    Absolute profit for a debt form.

    A fixed profit wins when both are given. A percentage is applied to the
    principal and rounded half-up to whole currency units.
    """
    if fixed is not None:
        profit = fixed
    elif percentage is not None:
        raw = Decimal(base_value) * Decimal(str(percentage)) / Decimal(100)
        profit = int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))
    else:
        profit = 0

    if profit < 0:
        raise ValidationError(f"Profit must not be negative, got {profit}")
    return profit
