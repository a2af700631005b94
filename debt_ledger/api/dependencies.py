"""Dependency injection for FastAPI endpoints"""

import logging
from typing import Optional
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from debt_ledger.domain.exceptions import PersistenceError
from debt_ledger.domain.ledger import LedgerStore, Persist
from debt_ledger.domain.models import LedgerSnapshot
from debt_ledger.infrastructure.clients.messaging import MessagingClient
from debt_ledger.infrastructure.database.repositories import LedgerDocumentRepository
from debt_ledger.infrastructure.database.session import get_db

_ledger_store: Optional[LedgerStore] = None


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_ledger_store(db: Session = Depends(get_db)) -> LedgerStore:
    """Provide the process-wide ledger store, loaded from the latest saved revision"""
    global _ledger_store
    if _ledger_store is None:
        _ledger_store = LedgerStore(LedgerDocumentRepository(db).load_snapshot())
    return _ledger_store


def get_messaging_client() -> MessagingClient:
    """Provide messaging gateway client instance"""
    return MessagingClient()


def snapshot_writer(db: Session, request_id: str = "unknown") -> Persist:
    """
    Persist callback for ledger commands.

    Saves the snapshot as a new document revision and commits. On failure the
    session is rolled back and PersistenceError is raised, which aborts the
    command before the store publishes the new snapshot.
    """

    def write(snapshot: LedgerSnapshot) -> None:
        try:
            LedgerDocumentRepository(db).save_snapshot(snapshot)
            db.commit()
        except Exception as e:
            db.rollback()
            logging.error(
                f"Failed to persist ledger revision {snapshot.revision}: {e}",
                extra={"request_id": request_id},
            )
            raise PersistenceError(f"Ledger revision {snapshot.revision} was not saved") from e

    return write
