"""/v1/debts/{debt_id}/installments/{installment_id} - payments and receipts"""

import time
import logging
from datetime import date
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_ledger_store, get_messaging_client, get_request_id, snapshot_writer
from debt_ledger.api.v1.clients import deliver_message
from debt_ledger.api.v1.schemas import (
    DebtSchema,
    InstallmentSchema,
    MessageQueuedResponse,
    PaymentPreviewResponse,
    PaymentRequest,
    ReceiptResponse,
)
from debt_ledger.domain.exceptions import NotFoundError, PersistenceError, ValidationError
from debt_ledger.domain.ledger import LedgerStore
from debt_ledger.domain.receipts import build_payment_receipt, messaging_phone, render_receipt_text
from debt_ledger.infrastructure.clients.messaging import MessagingClient
from debt_ledger.infrastructure.database.session import get_db
from debt_ledger.infrastructure.observability.logging import log_payment
from debt_ledger.infrastructure.observability.metrics import record_payment

router = APIRouter()

INSTALLMENT_PATH = "/debts/{debt_id}/installments/{installment_id}"


@router.post(INSTALLMENT_PATH + "/payment", response_model=DebtSchema)
def create_payment(
    debt_id: str,
    installment_id: str,
    request_body: PaymentRequest,
    request: Request,
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
):
    """
    Record a payment against an installment.

    Flow:
    1. Mark the installment PAID (or POSTPONED when paid_amount is 0)
    2. Spread the remaining balance over `future_count` months starting the
       month after the payment date
    3. Persist the new ledger revision
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        snapshot, debt = store.record_payment(
            debt_id,
            installment_id,
            request_body.paid_amount,
            request_body.paid_date,
            request_body.notes,
            request_body.future_count,
            persist=snapshot_writer(db, request_id),
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        logging.warning(f"Payment rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Internal server error")

    record_payment(request_body.paid_amount)
    future_count = sum(1 for inst in debt.installments if not inst.is_settled)
    log_payment(
        request_id,
        debt_id,
        installment_id,
        request_body.paid_amount,
        "postponed" if request_body.paid_amount == 0 else "paid",
        future_count,
        debt.is_fully_paid,
        (time.time() - start_time) * 1000,
    )
    return DebtSchema.from_domain(debt, date.today())


@router.post(INSTALLMENT_PATH + "/payment/preview", response_model=PaymentPreviewResponse)
def preview_payment(
    debt_id: str,
    installment_id: str,
    request_body: PaymentRequest,
    store: LedgerStore = Depends(get_ledger_store),
):
    """What-if: the schedule a payment would produce, nothing is saved"""
    try:
        preview = store.preview_payment(
            debt_id,
            installment_id,
            request_body.paid_amount,
            request_body.paid_date,
            request_body.future_count,
        )
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    today = date.today()
    return PaymentPreviewResponse(
        balance_after_payment=preview.balance_after_payment,
        future_count=preview.future_count,
        future_installments=[InstallmentSchema.from_domain(inst, today) for inst in preview.future_installments],
    )


@router.get(INSTALLMENT_PATH + "/receipt", response_model=ReceiptResponse)
def get_receipt(debt_id: str, installment_id: str, store: LedgerStore = Depends(get_ledger_store)):
    """Receipt numbers (client-wide running totals) and rendered text"""
    try:
        receipt = build_payment_receipt(store.snapshot, debt_id, installment_id, date.today())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return ReceiptResponse(
        client_name=receipt.client_name,
        sequence_number=receipt.sequence_number,
        amount=receipt.amount,
        receipt_date=receipt.date,
        total_debt=receipt.total_debt,
        total_paid=receipt.total_paid,
        remaining=receipt.remaining,
        text=render_receipt_text(receipt),
    )


@router.post(INSTALLMENT_PATH + "/receipt/send", response_model=MessageQueuedResponse, status_code=202)
def send_receipt(
    debt_id: str,
    installment_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    store: LedgerStore = Depends(get_ledger_store),
    messaging_client: MessagingClient = Depends(get_messaging_client),
):
    """Queue the receipt for delivery to the client's phone"""
    try:
        receipt = build_payment_receipt(store.snapshot, debt_id, installment_id, date.today())
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not messaging_client.enabled:
        raise HTTPException(status_code=503, detail="Messaging gateway not configured")

    phone = messaging_phone(receipt.phone)
    if not phone:
        raise HTTPException(status_code=422, detail="Client has no phone number to message")

    background_tasks.add_task(
        deliver_message, messaging_client, receipt.phone, render_receipt_text(receipt), get_request_id(request)
    )
    return MessageQueuedResponse(queued=True, phone=phone)
