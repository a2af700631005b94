"""/v1/debts - create, edit, read and delete debts"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_ledger_store, get_request_id, snapshot_writer
from debt_ledger.api.v1.schemas import DebtRequest, DebtSchema, LedgerStateResponse
from debt_ledger.domain.exceptions import NotFoundError, PersistenceError, ValidationError
from debt_ledger.domain.ledger import LedgerStore, find_debt
from debt_ledger.infrastructure.database.session import get_db
from debt_ledger.infrastructure.observability.logging import log_ledger_command
from debt_ledger.infrastructure.observability.metrics import debt_saved_counter

router = APIRouter()


def _save(request_body: DebtRequest, request: Request, db: Session, store: LedgerStore, debt_id: str | None):
    request_id = get_request_id(request)
    mode = "create" if debt_id is None else "edit"
    try:
        snapshot, debt = store.save_debt(request_body.to_draft(), debt_id, persist=snapshot_writer(db, request_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        logging.warning(f"Debt rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Internal server error")

    debt_saved_counter.labels(mode=mode).inc()
    log_ledger_command(request_id, f"save_debt_{mode}", snapshot.revision, debt.id)
    return DebtSchema.from_domain(debt, date.today())


@router.post("/debts", response_model=DebtSchema, status_code=201)
def create_debt(
    request_body: DebtRequest,
    request: Request,
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
):
    """
    Create a debt for a client.

    Without `installments` the schedule is generated from base + profit over
    `month_count` months; with them, the submitted schedule is kept and the
    total and profit follow its sum.
    """
    return _save(request_body, request, db, store, None)


@router.put("/debts/{debt_id}", response_model=DebtSchema)
def update_debt(
    debt_id: str,
    request_body: DebtRequest,
    request: Request,
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
):
    """Replace a debt's terms and schedule; the owning client never changes"""
    return _save(request_body, request, db, store, debt_id)


@router.get("/debts/{debt_id}", response_model=DebtSchema)
def get_debt(debt_id: str, store: LedgerStore = Depends(get_ledger_store)):
    try:
        debt = find_debt(store.snapshot, debt_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return DebtSchema.from_domain(debt, date.today())


@router.delete("/debts/{debt_id}", response_model=LedgerStateResponse)
def delete_debt(
    debt_id: str,
    request: Request,
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
):
    request_id = get_request_id(request)
    try:
        snapshot = store.delete_debt(debt_id, persist=snapshot_writer(db, request_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Internal server error")

    log_ledger_command(request_id, "delete_debt", snapshot.revision, debt_id)
    return LedgerStateResponse(revision=snapshot.revision, clients=len(snapshot.clients), debts=len(snapshot.debts))
