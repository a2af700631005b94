"""Integer-safe division of money across periods"""

from typing import List
from debt_ledger.domain.exceptions import ValidationError


def allocate(total: int, periods: int) -> List[int]:
    """
    Split a whole-unit total into `periods` shares that sum exactly to `total`.

    Every period gets floor(total / periods); the last one also takes the
    remainder, so rounding drift never leaks out of the final period.

    Example:
        allocate(1000, 3) -> [333, 333, 334]
    """
    if periods < 1:
        raise ValidationError(f"Period count must be at least 1, got {periods}")
    if total < 0:
        raise ValidationError(f"Amount must not be negative, got {total}")

    base_share = total // periods
    remainder = total - base_share * periods
    return [base_share] * (periods - 1) + [base_share + remainder]


def redistribute(balance: int, periods: int) -> List[int]:
    """
    Spread a balance left over after a manual edit across the trailing periods.

    Unlike allocate(), the balance may be negative (the user typed more than
    the target total); floor division still applies and each share is
    clamped to zero.
    """
    if periods < 1:
        raise ValidationError(f"Period count must be at least 1, got {periods}")

    base_share = balance // periods
    remainder = balance - base_share * periods
    shares = [base_share] * (periods - 1) + [base_share + remainder]
    return [max(0, share) for share in shares]
