"""/v1/backup - export, import and reset of the whole ledger"""

import logging
from datetime import date
from typing import Any
from fastapi import APIRouter, Body, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from debt_ledger.api.dependencies import get_ledger_store, get_request_id, snapshot_writer
from debt_ledger.api.v1.schemas import ExportResponse, LedgerStateResponse
from debt_ledger.config import settings
from debt_ledger.domain.documents import export_label, to_document
from debt_ledger.domain.exceptions import MalformedDocumentError, PersistenceError
from debt_ledger.domain.ledger import LedgerStore
from debt_ledger.infrastructure.database.session import get_db
from debt_ledger.infrastructure.observability.logging import log_ledger_command
from debt_ledger.infrastructure.observability.metrics import ledger_import_counter

router = APIRouter()


@router.get("/backup/export", response_model=ExportResponse)
def export_ledger(store: LedgerStore = Depends(get_ledger_store)):
    """Current ledger document with a date-stamped label"""
    return ExportResponse(
        label=export_label(date.today(), settings.backup_label_prefix),
        document=to_document(store.snapshot),
    )


@router.post("/backup/import", response_model=LedgerStateResponse)
def import_ledger(
    request: Request,
    payload: Any = Body(...),
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
):
    """Replace the whole ledger with an exported document"""
    request_id = get_request_id(request)
    try:
        snapshot = store.import_ledger(payload, persist=snapshot_writer(db, request_id))
    except MalformedDocumentError as e:
        ledger_import_counter.labels(result="rejected").inc()
        logging.warning(f"Import rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Internal server error")

    ledger_import_counter.labels(result="accepted").inc()
    log_ledger_command(request_id, "import_ledger", snapshot.revision)
    return LedgerStateResponse(revision=snapshot.revision, clients=len(snapshot.clients), debts=len(snapshot.debts))


@router.post("/backup/reset", response_model=LedgerStateResponse)
def reset_ledger(
    request: Request,
    db: Session = Depends(get_db),
    store: LedgerStore = Depends(get_ledger_store),
):
    """Delete every client and debt"""
    request_id = get_request_id(request)
    try:
        snapshot = store.reset_ledger(persist=snapshot_writer(db, request_id))
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.warning("Ledger reset", extra={"request_id": request_id})
    log_ledger_command(request_id, "reset_ledger", snapshot.revision)
    return LedgerStateResponse(revision=snapshot.revision, clients=0, debts=0)
