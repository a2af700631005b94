"""Ledger document codec - the {clients, debts} blob exchanged with storage and backups"""

from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from debt_ledger.domain.exceptions import MalformedDocumentError
from debt_ledger.domain.models import Client, Debt, Installment, InstallmentStatus, LedgerSnapshot
from debt_ledger.utils.date_utils import date_from_epoch_ms

REQUIRED_FIELDS = ("clients", "debts")


def _legacy_date(value: Any) -> Any:
    # Older backups store dates as epoch milliseconds
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return date_from_epoch_ms(value)
    return value


def _whole_units(value: Any) -> Any:
    if isinstance(value, float):
        return round(value)
    return value


class _DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ClientDocument(_DocumentModel):
    id: str
    name: str
    national_id: Optional[str] = None
    phone: str = ""
    created_at: datetime

    @field_validator("created_at", mode="before")
    @classmethod
    def parse_created_at(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        return value


class InstallmentDocument(_DocumentModel):
    id: str
    debt_id: str
    due_date: date
    amount: int = Field(..., ge=0)
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_date: Optional[date] = None
    notes: Optional[str] = None

    parse_dates = field_validator("due_date", "paid_date", mode="before")(_legacy_date)
    round_amounts = field_validator("amount", mode="before")(_whole_units)


class DebtDocument(_DocumentModel):
    id: str
    client_id: str
    item_name: str
    base_value: int = Field(..., ge=0)
    profit_percentage: float = 0.0
    profit_value: int
    total_value: int = Field(..., ge=0)
    start_date: date
    month_count: int = Field(..., ge=1)
    payment_day: int = Field(..., ge=1, le=31)
    installments: List[InstallmentDocument] = []
    is_fully_paid: bool = False
    notes: Optional[str] = None

    parse_dates = field_validator("start_date", mode="before")(_legacy_date)
    round_amounts = field_validator("base_value", "profit_value", "total_value", mode="before")(_whole_units)

    @model_validator(mode="after")
    def check_schedule_total(self) -> "DebtDocument":
        scheduled = sum(inst.amount for inst in self.installments)
        if scheduled != self.total_value:
            raise ValueError(f"Debt {self.id}: installments sum to {scheduled}, total is {self.total_value}")
        return self


class LedgerDocument(_DocumentModel):
    clients: List[ClientDocument]
    debts: List[DebtDocument]


def to_document(snapshot: LedgerSnapshot) -> Dict[str, Any]:
    """Serialize a snapshot with the persisted field names (dates as ISO strings)"""
    document = LedgerDocument(
        clients=[
            ClientDocument(
                id=c.id,
                name=c.name,
                national_id=c.national_id,
                phone=c.phone,
                created_at=c.created_at,
            )
            for c in snapshot.clients
        ],
        debts=[
            DebtDocument(
                id=d.id,
                client_id=d.client_id,
                item_name=d.item_name,
                base_value=d.base_value,
                profit_percentage=d.profit_percentage,
                profit_value=d.profit_value,
                total_value=d.total_value,
                start_date=d.start_date,
                month_count=d.month_count,
                payment_day=d.payment_day,
                installments=[
                    InstallmentDocument(
                        id=i.id,
                        debt_id=i.debt_id,
                        due_date=i.due_date,
                        amount=i.amount,
                        status=i.status,
                        paid_date=i.paid_date,
                        notes=i.notes,
                    )
                    for i in d.installments
                ],
                is_fully_paid=d.is_fully_paid,
                notes=d.notes,
            )
            for d in snapshot.debts
        ],
    )
    return document.model_dump(mode="json", by_alias=True)


def from_document(payload: Any, revision: int = 0) -> LedgerSnapshot:
    """
    Parse a ledger document into a snapshot.

    Raises:
        MalformedDocumentError: payload is not an object, lacks `clients` or
            `debts`, an entry does not parse, or a debt breaks the ledger rules
            (negative amounts, payment day outside 1..31, schedule not summing
            to the total)
    """
    if not isinstance(payload, dict) or any(name not in payload for name in REQUIRED_FIELDS):
        raise MalformedDocumentError("Ledger document must contain both 'clients' and 'debts'")

    try:
        document = LedgerDocument.model_validate(payload)
    except PydanticValidationError as e:
        raise MalformedDocumentError(f"Invalid ledger document: {e.error_count()} error(s)") from e

    clients = [
        Client(
            id=c.id,
            name=c.name,
            phone=c.phone,
            national_id=c.national_id,
            created_at=c.created_at,
        )
        for c in document.clients
    ]
    debts = [
        Debt(
            id=d.id,
            client_id=d.client_id,
            item_name=d.item_name,
            base_value=d.base_value,
            profit_value=d.profit_value,
            total_value=d.total_value,
            start_date=d.start_date,
            month_count=d.month_count,
            payment_day=d.payment_day,
            installments=[
                Installment(
                    due_date=i.due_date,
                    amount=i.amount,
                    status=i.status,
                    id=i.id,
                    debt_id=i.debt_id,
                    paid_date=i.paid_date,
                    notes=i.notes,
                )
                for i in d.installments
            ],
            is_fully_paid=d.is_fully_paid,
            notes=d.notes,
        )
        for d in document.debts
    ]
    return LedgerSnapshot(clients=clients, debts=debts, revision=revision)


def export_label(today: date, prefix: str = "debt_backup") -> str:
    """Date-stamped file name for an exported document"""
    return f"{prefix}_{today.isoformat()}.json"
