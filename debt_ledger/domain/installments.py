"""Monthly installment schedule generation"""

from datetime import date
from typing import List
from debt_ledger.domain.allocation import allocate
from debt_ledger.domain.exceptions import ValidationError
from debt_ledger.domain.models import Installment, InstallmentStatus
from debt_ledger.utils.date_utils import add_months


def validate_payment_day(payment_day: int) -> None:
    if not 1 <= payment_day <= 31:
        raise ValidationError(f"Payment day must be between 1 and 31, got {payment_day}")


def first_due_month_offset(start_date: date, payment_day: int) -> int:
    """0 if the first collection falls in the start month, 1 if it slides to the next"""
    return 1 if start_date.day > payment_day else 0


def generate_installment_plan(
    total: int,
    period_count: int,
    start_date: date,
    payment_day: int,
) -> List[Installment]:
    """
    Generate a monthly repayment schedule.

    Requirements:
    - One installment per month, always on `payment_day`
    - First installment in the start month, or the next month when the
      contract starts after that month's collection day
    - Short months clamp to their last day
    - Last installment absorbs the rounding remainder

    Args:
        total: Amount to split, whole currency units
        period_count: Number of monthly payments
        start_date: Contract start date
        payment_day: Day of month (1-31) installments fall on

    Returns:
        PENDING installments without ids; the ledger assigns identity on commit

    Example:
        1000 over 3 from 2024-01-30, day 27
        -> 2024-02-27: 333, 2024-03-27: 333, 2024-04-27: 334
    """
    validate_payment_day(payment_day)
    amounts = allocate(total, period_count)
    offset = first_due_month_offset(start_date, payment_day)

    return [
        Installment(
            due_date=add_months(start_date, offset + i, payment_day),
            amount=amount,
            status=InstallmentStatus.PENDING,
        )
        for i, amount in enumerate(amounts)
    ]
