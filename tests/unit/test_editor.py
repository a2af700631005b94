"""Unit tests for manual schedule edits"""

import pytest
from datetime import date
from typing import List
from debt_ledger.domain.editor import edit_amount, edit_due_date
from debt_ledger.domain.exceptions import ValidationError
from debt_ledger.domain.installments import generate_installment_plan
from debt_ledger.domain.models import Installment, InstallmentStatus


@pytest.fixture
def schedule() -> List[Installment]:
    """1000 over 4 months: [250, 250, 250, 250]"""
    return generate_installment_plan(1000, 4, date(2024, 1, 1), 15)


def amounts(installments: List[Installment]) -> List[int]:
    return [inst.amount for inst in installments]


def test_edit_amount_redistributes_trailing_entries(schedule):
    updated = edit_amount(schedule, 1, 100, 1000)

    assert amounts(updated) == [250, 100, 325, 325]
    assert sum(amounts(updated)) == 1000


def test_edit_amount_remainder_goes_to_last_entry(schedule):
    updated = edit_amount(schedule, 0, 99, 1000)

    # 901 over 3 -> 300, 300, 301
    assert amounts(updated) == [99, 300, 300, 301]


def test_edit_amount_leaves_earlier_entries_untouched(schedule):
    first_pass = edit_amount(schedule, 0, 400, 1000)
    updated = edit_amount(first_pass, 2, 50, 1000)

    assert amounts(updated)[:2] == amounts(first_pass)[:2]
    assert sum(amounts(updated)) == 1000


def test_edit_amount_overshoot_clamps_trailing_to_zero(schedule):
    updated = edit_amount(schedule, 0, 1100, 1000)

    assert amounts(updated)[1:] == [0, 0, 0]


def test_edit_amount_does_not_mutate_input(schedule):
    edit_amount(schedule, 1, 10, 1000)
    assert amounts(schedule) == [250, 250, 250, 250]


def test_edit_amount_rejects_negative(schedule):
    with pytest.raises(ValidationError):
        edit_amount(schedule, 1, -1, 1000)


def test_edit_amount_on_last_entry_must_keep_total(schedule):
    with pytest.raises(ValidationError):
        edit_amount(schedule, 3, 300, 1000)

    # Re-entering the computed value is accepted
    assert amounts(edit_amount(schedule, 3, 250, 1000)) == [250, 250, 250, 250]


def test_edit_amount_rejects_settled_entry(schedule):
    schedule[0] = Installment(
        due_date=schedule[0].due_date, amount=250, status=InstallmentStatus.PAID
    )

    with pytest.raises(ValidationError):
        edit_amount(schedule, 0, 100, 1000)

    # Later pending entries stay editable and the paid prefix counts toward the total
    updated = edit_amount(schedule, 1, 150, 1000)
    assert amounts(updated) == [250, 150, 300, 300]


def test_edit_amount_rejects_out_of_range_index(schedule):
    with pytest.raises(ValidationError):
        edit_amount(schedule, 4, 10, 1000)


def test_edit_due_date_changes_only_one_entry(schedule):
    updated = edit_due_date(schedule, 2, date(2024, 3, 20))

    assert updated[2].due_date == date(2024, 3, 20)
    assert [inst.due_date for i, inst in enumerate(updated) if i != 2] == [
        inst.due_date for i, inst in enumerate(schedule) if i != 2
    ]
    assert amounts(updated) == amounts(schedule)
