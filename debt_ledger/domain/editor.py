"""Manual edits to a draft schedule with trailing redistribution"""

from dataclasses import replace
from datetime import date
from typing import List
from debt_ledger.domain.allocation import redistribute
from debt_ledger.domain.exceptions import ValidationError
from debt_ledger.domain.models import Installment


def _check_editable(installments: List[Installment], index: int) -> None:
    if not 0 <= index < len(installments):
        raise ValidationError(f"Installment index {index} out of range")

    # Settled entries are outside the editable view; redistribution never touches them
    if any(inst.is_settled for inst in installments[index:]):
        raise ValidationError("Paid or postponed installments cannot be edited")


def edit_due_date(installments: List[Installment], index: int, new_date: date) -> List[Installment]:
    """Move one installment's due date; amounts and other entries are unchanged"""
    _check_editable(installments, index)

    updated = list(installments)
    updated[index] = replace(updated[index], due_date=new_date)
    return updated


def edit_amount(
    installments: List[Installment],
    index: int,
    new_amount: int,
    target_total: int,
) -> List[Installment]:
    """
    Set one installment's amount and re-derive the ones after it.

    The balance left after entries 0..index is split over the trailing
    entries (floor per entry, remainder on the last, clamped at zero).
    Entries before `index` are untouched.

    The last entry is a computed field: editing it directly is only accepted
    when the schedule still sums to `target_total`.

    Raises:
        ValidationError: negative amount, bad index, settled entry, or a
            last-entry edit that would break the total
    """
    if new_amount < 0:
        raise ValidationError(f"Amount must not be negative, got {new_amount}")
    _check_editable(installments, index)

    updated = list(installments)
    updated[index] = replace(updated[index], amount=new_amount)

    remaining_count = len(updated) - index - 1
    if remaining_count == 0:
        schedule_total = sum(inst.amount for inst in updated)
        if schedule_total != target_total:
            raise ValidationError(
                f"Last installment is computed: schedule would total {schedule_total}, expected {target_total}"
            )
        return updated

    sum_so_far = sum(inst.amount for inst in updated[: index + 1])
    shares = redistribute(target_total - sum_so_far, remaining_count)

    for offset, share in enumerate(shares, start=index + 1):
        updated[offset] = replace(updated[offset], amount=share)

    return updated
