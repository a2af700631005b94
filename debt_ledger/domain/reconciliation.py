"""Payment reconciliation - record one outcome and splice in the regenerated schedule"""

from dataclasses import replace
from datetime import date
from typing import List, Optional
from debt_ledger.domain.exceptions import InstallmentNotFoundError, ValidationError
from debt_ledger.domain.installments import generate_installment_plan
from debt_ledger.domain.models import Debt, Installment, InstallmentStatus
from debt_ledger.utils.date_utils import add_months


def find_installment(debt: Debt, installment_id: str) -> Installment:
    for inst in debt.installments:
        if inst.id == installment_id:
            return inst
    raise InstallmentNotFoundError(f"Installment {installment_id} not found in debt {debt.id}")


def find_open_installment(debt: Debt, installment_id: str) -> Installment:
    """Target of a payment; PAID and POSTPONED entries are final"""
    installment = find_installment(debt, installment_id)
    if installment.is_settled:
        raise ValidationError(f"Installment {installment_id} is already {installment.status.value}")
    return installment


def default_future_count(debt: Debt, installment_id: str) -> int:
    """Number of entries scheduled after the target (pre-filled future period count)"""
    position = debt.installments.index(find_installment(debt, installment_id))
    return len(debt.installments) - position - 1


def outstanding_after_payment(debt: Debt, installment_id: str, paid_amount: int) -> int:
    """
    Balance still owed once this payment lands.

    total - (PAID entries other than the target) - paid_amount.
    Negative means the payment exceeds what is owed.
    """
    find_installment(debt, installment_id)
    previously_paid = sum(
        inst.amount
        for inst in debt.installments
        if inst.status == InstallmentStatus.PAID and inst.id != installment_id
    )
    return debt.total_value - previously_paid - paid_amount


def plan_future_installments(
    debt: Debt,
    installment_id: str,
    paid_amount: int,
    paid_date: date,
    future_count: Optional[int] = None,
) -> List[Installment]:
    """
    Regenerate the unresolved remainder of a debt after a payment.

    Policy:
    - Next period starts the calendar month after `paid_date`, on the debt's
      payment day
    - A positive balance is never spread over zero periods (count forced to 1)
    - A settled balance (zero) produces no future entries

    Args:
        future_count: Periods to spread the balance over; defaults to the
            number of entries currently scheduled after the target
    """
    find_open_installment(debt, installment_id)
    if future_count is None:
        future_count = default_future_count(debt, installment_id)
    if future_count < 0:
        raise ValidationError(f"Future period count must not be negative, got {future_count}")

    balance = outstanding_after_payment(debt, installment_id, paid_amount)
    if balance <= 0:
        return []
    if future_count == 0:
        future_count = 1

    next_start = add_months(paid_date, 1, debt.payment_day)
    return generate_installment_plan(balance, future_count, next_start, debt.payment_day)


def reconcile(
    debt: Debt,
    installment_id: str,
    paid_amount: int,
    paid_date: date,
    notes: Optional[str],
    future_installments: List[Installment],
) -> Debt:
    """
    Apply a recorded payment to one installment.

    Steps:
    1. Keep entries already PAID/POSTPONED (other than the target), discard
       the other open entries
    2. Target becomes POSTPONED when nothing was collected, PAID otherwise;
       amount, paid date and note are recorded either way
    3. Append the caller-supplied future entries and sort by due date
    4. Recompute is_fully_paid and month_count

    The caller sizes `future_installments` (see plan_future_installments);
    this function does not enforce the sum invariant itself.

    Returns:
        New Debt; the input debt is not modified

    Raises:
        ValidationError: negative amount, or the target is already PAID or
            POSTPONED
        InstallmentNotFoundError: no such installment in the debt
    """
    if paid_amount < 0:
        raise ValidationError(f"Paid amount must not be negative, got {paid_amount}")

    target = find_open_installment(debt, installment_id)
    settled = [inst for inst in debt.installments if inst.id != installment_id and inst.is_settled]

    status = InstallmentStatus.POSTPONED if paid_amount == 0 else InstallmentStatus.PAID
    reconciled_target = replace(
        target,
        amount=paid_amount,
        status=status,
        paid_date=paid_date,
        notes=notes,
    )

    installments = sorted(
        settled + [reconciled_target] + list(future_installments),
        key=lambda inst: inst.due_date,
    )

    return replace(
        debt,
        installments=installments,
        is_fully_paid=all(inst.is_settled for inst in installments),
        month_count=len(settled) + 1 + len(future_installments),
    )
