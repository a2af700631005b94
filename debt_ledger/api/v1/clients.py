"""/v1/clients - client registry, balances and account summaries"""

import logging
from datetime import date
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_ledger_store, get_messaging_client, get_request_id, snapshot_writer
from debt_ledger.api.v1.schemas import (
    ClientBalanceSchema,
    ClientCreate,
    ClientDetailResponse,
    ClientListItem,
    ClientListResponse,
    ClientSchema,
    DebtSchema,
    LedgerStateResponse,
    MessageQueuedResponse,
    SummaryResponse,
)
from debt_ledger.domain.aggregation import client_balance, client_debts, search_clients
from debt_ledger.domain.exceptions import MessagingError, NotFoundError, PersistenceError, ValidationError
from debt_ledger.domain.ledger import LedgerStore, find_client
from debt_ledger.domain.receipts import build_account_summary, messaging_phone, render_summary_text
from debt_ledger.infrastructure.clients.messaging import MessagingClient
from debt_ledger.infrastructure.database.session import get_db
from debt_ledger.infrastructure.observability.logging import log_ledger_command

router = APIRouter()


async def deliver_message(messaging_client: MessagingClient, phone: str, text: str, request_id: str) -> None:
    """Background delivery; failures are logged since no caller is waiting"""
    try:
        await messaging_client.send_text(phone, text)
    except MessagingError as e:
        logging.error(f"Message delivery failed: {e}", extra={"request_id": request_id})


@router.post("/clients", response_model=ClientSchema, status_code=201)
def create_client(
    request_body: ClientCreate,
    request: Request,
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
):
    """Register a new client (listed first)"""
    request_id = get_request_id(request)
    try:
        snapshot, client = store.add_client(
            request_body.name,
            request_body.phone,
            request_body.national_id,
            persist=snapshot_writer(db, request_id),
        )
    except ValidationError as e:
        logging.warning(f"Client rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Internal server error")

    log_ledger_command(request_id, "add_client", snapshot.revision, client.id)
    return ClientSchema.from_domain(client)


@router.get("/clients", response_model=ClientListResponse)
def list_clients(
    search: str = Query("", description="Substring of the client's name or phone"),
    store: LedgerStore = Depends(get_ledger_store),
):
    """List clients with their outstanding balances"""
    snapshot = store.snapshot
    return ClientListResponse(
        clients=[
            ClientListItem(
                client=ClientSchema.from_domain(client),
                balance=ClientBalanceSchema.from_domain(client_balance(snapshot, client.id)),
            )
            for client in search_clients(snapshot, search)
        ]
    )


@router.get("/clients/{client_id}", response_model=ClientDetailResponse)
def get_client(client_id: str, store: LedgerStore = Depends(get_ledger_store)):
    """Client details with every debt and its schedule"""
    snapshot = store.snapshot
    try:
        client = find_client(snapshot, client_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    today = date.today()
    return ClientDetailResponse(
        client=ClientSchema.from_domain(client),
        balance=ClientBalanceSchema.from_domain(client_balance(snapshot, client_id)),
        debts=[DebtSchema.from_domain(debt, today) for debt in client_debts(snapshot, client_id)],
    )


@router.delete("/clients/{client_id}", response_model=LedgerStateResponse)
def delete_client(
    client_id: str,
    request: Request,
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
):
    """Delete a client together with all of its debts"""
    request_id = get_request_id(request)
    try:
        snapshot = store.delete_client(client_id, persist=snapshot_writer(db, request_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Internal server error")

    log_ledger_command(request_id, "delete_client", snapshot.revision, client_id)
    return LedgerStateResponse(revision=snapshot.revision, clients=len(snapshot.clients), debts=len(snapshot.debts))


@router.get("/clients/{client_id}/summary", response_model=SummaryResponse)
def get_account_summary(client_id: str, store: LedgerStore = Depends(get_ledger_store)):
    """Account summary numbers plus the text handed to the messaging gateway"""
    try:
        summary = build_account_summary(store.snapshot, client_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return SummaryResponse(
        client_name=summary.client_name,
        total_debt=summary.total_debt,
        total_paid=summary.total_paid,
        remaining=summary.remaining,
        text=render_summary_text(summary),
    )


@router.post("/clients/{client_id}/summary/send", response_model=MessageQueuedResponse, status_code=202)
def send_account_summary(
    client_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    store: LedgerStore = Depends(get_ledger_store),
    messaging_client: MessagingClient = Depends(get_messaging_client),
):
    """Queue the account summary for delivery to the client's phone"""
    try:
        summary = build_account_summary(store.snapshot, client_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if not messaging_client.enabled:
        raise HTTPException(status_code=503, detail="Messaging gateway not configured")

    phone = messaging_phone(summary.phone)
    if not phone:
        raise HTTPException(status_code=422, detail="Client has no phone number to message")

    background_tasks.add_task(
        deliver_message, messaging_client, summary.phone, render_summary_text(summary), get_request_id(request)
    )
    return MessageQueuedResponse(queued=True, phone=phone)
