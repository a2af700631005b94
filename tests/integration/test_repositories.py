"""Integration tests for ledger document storage"""

from dataclasses import replace
from datetime import date
from sqlalchemy.orm import Session
from debt_ledger.domain.models import LedgerSnapshot
from debt_ledger.infrastructure.database.repositories import LedgerDocumentRepository


def test_load_snapshot_on_empty_store(db: Session):
    snapshot = LedgerDocumentRepository(db).load_snapshot()

    assert snapshot.clients == [] and snapshot.debts == []
    assert snapshot.revision == 0


def test_save_and_load_latest_revision(db: Session, sample_snapshot: LedgerSnapshot):
    repo = LedgerDocumentRepository(db)

    record = repo.save_snapshot(replace(sample_snapshot, revision=1), today=date(2024, 2, 1))
    db.commit()

    assert record.id is not None
    assert record.label == "debt_backup_2024-02-01.json"

    loaded = repo.load_snapshot()
    assert loaded.revision == 1
    assert loaded.clients[0].name == "Sara Ahmed"
    assert [inst.amount for inst in loaded.debts[0].installments] == [200, 200, 200]


def test_highest_revision_wins_over_save_order(db: Session, sample_snapshot: LedgerSnapshot):
    repo = LedgerDocumentRepository(db)

    repo.save_snapshot(replace(sample_snapshot, revision=5))
    repo.save_snapshot(replace(sample_snapshot, debts=[], revision=4))
    db.commit()

    loaded = repo.load_snapshot()
    assert loaded.revision == 5
    assert len(loaded.debts) == 1
