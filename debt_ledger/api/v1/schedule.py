"""/v1/schedule - stateless schedule generation and manual edits for the debt form"""

from datetime import date
from typing import List
from fastapi import APIRouter, HTTPException

from debt_ledger.api.v1.schemas import (
    InstallmentSchema,
    ScheduleEditAmountRequest,
    ScheduleEditDueDateRequest,
    ScheduleGenerateRequest,
    ScheduleResponse,
)
from debt_ledger.domain.editor import edit_amount, edit_due_date
from debt_ledger.domain.exceptions import ValidationError
from debt_ledger.domain.installments import generate_installment_plan
from debt_ledger.domain.models import Installment
from debt_ledger.infrastructure.observability.metrics import schedule_edit_counter

router = APIRouter()


def _schedule_response(installments: List[Installment]) -> ScheduleResponse:
    today = date.today()
    return ScheduleResponse(
        total=sum(inst.amount for inst in installments),
        installments=[InstallmentSchema.from_domain(inst, today) for inst in installments],
    )


@router.post("/schedule/generate", response_model=ScheduleResponse)
def generate_schedule(request_body: ScheduleGenerateRequest):
    """Monthly schedule for a total; nothing is saved"""
    try:
        installments = generate_installment_plan(
            request_body.total,
            request_body.period_count,
            request_body.start_date,
            request_body.payment_day,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _schedule_response(installments)


@router.post("/schedule/edit-amount", response_model=ScheduleResponse)
def edit_schedule_amount(request_body: ScheduleEditAmountRequest):
    """Set one amount and redistribute the rest of `target_total` over the later entries"""
    try:
        installments = edit_amount(
            [inst.to_domain() for inst in request_body.installments],
            request_body.index,
            request_body.new_amount,
            request_body.target_total,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    schedule_edit_counter.labels(field="amount").inc()
    return _schedule_response(installments)


@router.post("/schedule/edit-due-date", response_model=ScheduleResponse)
def edit_schedule_due_date(request_body: ScheduleEditDueDateRequest):
    """Move one entry's due date; nothing else changes"""
    try:
        installments = edit_due_date(
            [inst.to_domain() for inst in request_body.installments],
            request_body.index,
            request_body.new_date,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    schedule_edit_counter.labels(field="due_date").inc()
    return _schedule_response(installments)
