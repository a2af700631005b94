"""Unit tests for installment plan generation"""

import pytest
from datetime import date
from debt_ledger.domain.exceptions import ValidationError
from debt_ledger.domain.installments import generate_installment_plan
from debt_ledger.domain.models import InstallmentStatus


def test_generate_installment_plan_equal_split():
    """Start day before pay day: first due date stays in the start month"""
    installments = generate_installment_plan(1200, 4, date(2024, 1, 15), 27)

    assert [inst.amount for inst in installments] == [300, 300, 300, 300]
    assert [inst.due_date for inst in installments] == [
        date(2024, 1, 27),
        date(2024, 2, 27),
        date(2024, 3, 27),
        date(2024, 4, 27),
    ]
    assert all(inst.status == InstallmentStatus.PENDING for inst in installments)
    assert all(inst.id is None and inst.debt_id is None for inst in installments)


def test_generate_installment_plan_slides_to_next_month():
    """Start day after pay day: first collection moves to next month"""
    installments = generate_installment_plan(1000, 3, date(2024, 1, 30), 27)

    assert installments[0].due_date == date(2024, 2, 27)
    assert [inst.amount for inst in installments] == [333, 333, 334]


def test_generate_installment_plan_start_on_pay_day():
    installments = generate_installment_plan(300, 1, date(2024, 5, 27), 27)
    assert installments[0].due_date == date(2024, 5, 27)


def test_generate_installment_plan_clamps_short_months():
    """Day 31 lands on the last day of shorter months instead of overflowing"""
    installments = generate_installment_plan(400, 4, date(2024, 1, 1), 31)

    assert [inst.due_date for inst in installments] == [
        date(2024, 1, 31),
        date(2024, 2, 29),
        date(2024, 3, 31),
        date(2024, 4, 30),
    ]


def test_generate_installment_plan_crosses_year():
    installments = generate_installment_plan(300, 3, date(2024, 11, 20), 10)

    assert [inst.due_date for inst in installments] == [
        date(2024, 12, 10),
        date(2025, 1, 10),
        date(2025, 2, 10),
    ]


def test_generate_installment_plan_dates_strictly_increase():
    installments = generate_installment_plan(5000, 12, date(2023, 12, 31), 30)

    assert len(installments) == 12
    assert sum(inst.amount for inst in installments) == 5000
    due_dates = [inst.due_date for inst in installments]
    assert all(a < b for a, b in zip(due_dates, due_dates[1:]))


def test_generate_installment_plan_zero_amount():
    installments = generate_installment_plan(0, 2, date(2024, 1, 1), 5)
    assert [inst.amount for inst in installments] == [0, 0]


@pytest.mark.parametrize("payment_day", [0, 32])
def test_generate_installment_plan_rejects_invalid_payment_day(payment_day: int):
    with pytest.raises(ValidationError):
        generate_installment_plan(100, 2, date(2024, 1, 1), payment_day)


def test_generate_installment_plan_rejects_zero_periods():
    with pytest.raises(ValidationError):
        generate_installment_plan(100, 0, date(2024, 1, 1), 5)
