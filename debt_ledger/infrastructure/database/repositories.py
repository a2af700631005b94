"""Data access layer for the persisted ledger document"""

from datetime import date
from typing import Optional
from sqlalchemy.orm import Session
from debt_ledger.infrastructure.database.models import LedgerDocumentRecord
from debt_ledger.domain.documents import export_label, from_document, to_document
from debt_ledger.domain.models import LedgerSnapshot


class LedgerDocumentRepository:
    """Repository for ledger document revisions"""

    def __init__(self, db: Session):
        self.db = db

    def save_snapshot(self, snapshot: LedgerSnapshot, today: Optional[date] = None) -> LedgerDocumentRecord:
        """Persist a snapshot as a new document revision"""
        record = LedgerDocumentRecord(
            revision=snapshot.revision,
            label=export_label(today or date.today()),
            payload=to_document(snapshot),
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return record

    def get_latest(self) -> Optional[LedgerDocumentRecord]:
        """Fetch the highest revision; concurrent saves may land out of order"""
        return (
            self.db.query(LedgerDocumentRecord)
            .order_by(LedgerDocumentRecord.revision.desc(), LedgerDocumentRecord.id.desc())
            .first()
        )

    def load_snapshot(self) -> LedgerSnapshot:
        """Latest snapshot, or an empty ledger when nothing was saved yet"""
        record = self.get_latest()
        if record is None:
            return LedgerSnapshot()
        return from_document(record.payload, revision=record.revision)
