"""SQLAlchemy ORM models for ledger document storage"""

from sqlalchemy import Column, BigInteger, DateTime, Integer, Text, JSON
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class LedgerDocumentRecord(Base):
    """One committed revision of the {clients, debts} ledger document"""

    __tablename__ = "ledger_document"

    id = Column(Integer, primary_key=True, autoincrement=True)
    revision = Column(BigInteger, nullable=False, index=True)
    label = Column(Text, nullable=False)
    payload = Column(JSON, nullable=False)
    saved_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
