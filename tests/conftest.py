"""Pytest fixtures for testing"""

import pytest
from dataclasses import replace
from datetime import date
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from debt_ledger.api.dependencies import get_ledger_store
from debt_ledger.api.main import create_app
from debt_ledger.domain.ledger import LedgerStore
from debt_ledger.domain.models import Client, Debt, Installment, InstallmentStatus, LedgerSnapshot
from debt_ledger.infrastructure.database.models import Base
from debt_ledger.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store() -> LedgerStore:
    """Fresh, empty ledger store"""
    return LedgerStore()


@pytest.fixture
def client(db: Session, store: LedgerStore) -> TestClient:
    """Create FastAPI test client with test database and an isolated ledger"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ledger_store] = lambda: store
    return TestClient(app)


@pytest.fixture
def sample_debt() -> Debt:
    """600 over 3 months on the 10th, nothing paid yet"""
    return Debt(
        id="debt-1",
        client_id="client-1",
        item_name="Washing machine",
        base_value=500,
        profit_value=100,
        total_value=600,
        start_date=date(2024, 1, 1),
        month_count=3,
        payment_day=10,
        installments=[
            Installment(due_date=date(2024, 1, 10), amount=200, id="inst-1", debt_id="debt-1"),
            Installment(due_date=date(2024, 2, 10), amount=200, id="inst-2", debt_id="debt-1"),
            Installment(due_date=date(2024, 3, 10), amount=200, id="inst-3", debt_id="debt-1"),
        ],
    )


@pytest.fixture
def sample_snapshot(sample_debt: Debt) -> LedgerSnapshot:
    """One client owning the sample debt with its first installment paid"""
    paid_first = Installment(
        due_date=date(2024, 1, 10),
        amount=200,
        status=InstallmentStatus.PAID,
        id="inst-1",
        debt_id="debt-1",
        paid_date=date(2024, 1, 9),
    )
    debt = replace(sample_debt, installments=[paid_first] + sample_debt.installments[1:])
    return LedgerSnapshot(
        clients=[Client(id="client-1", name="Sara Ahmed", phone="+966 50 123 4567", national_id="1012345678")],
        debts=[debt],
    )
