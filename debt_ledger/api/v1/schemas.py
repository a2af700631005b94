"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from debt_ledger.config import settings
from debt_ledger.domain.aggregation import effective_status, remaining, total_paid
from debt_ledger.domain.models import (
    Client,
    ClientBalance,
    Debt,
    DebtDraft,
    Installment,
    InstallmentStatus,
    UpcomingInstallment,
)


class ClientCreate(BaseModel):
    """Request body for POST /v1/clients"""

    name: str = Field(..., min_length=1, description="Display name")
    phone: str = Field(..., min_length=1, description="Phone number used for receipts")
    national_id: Optional[str] = Field(None, description="National or residency id")


class ClientSchema(BaseModel):
    """Single client"""

    id: str
    name: str
    phone: str
    national_id: Optional[str] = None
    created_at: datetime

    @classmethod
    def from_domain(cls, client: Client) -> "ClientSchema":
        return cls(
            id=client.id,
            name=client.name,
            phone=client.phone,
            national_id=client.national_id,
            created_at=client.created_at,
        )


class ClientBalanceSchema(BaseModel):
    """Totals across a client's debts"""

    total_debt: int
    total_paid: int
    remaining: int

    @classmethod
    def from_domain(cls, balance: ClientBalance) -> "ClientBalanceSchema":
        return cls(total_debt=balance.total_debt, total_paid=balance.total_paid, remaining=balance.remaining)


class ClientListItem(BaseModel):
    client: ClientSchema
    balance: ClientBalanceSchema


class ClientListResponse(BaseModel):
    """Response for GET /v1/clients"""

    clients: List[ClientListItem]


class InstallmentInput(BaseModel):
    """Installment as submitted by the debt form or the schedule editor"""

    id: Optional[str] = None
    due_date: date
    amount: int
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_date: Optional[date] = None
    notes: Optional[str] = None

    def to_domain(self) -> Installment:
        return Installment(
            due_date=self.due_date,
            amount=self.amount,
            status=self.status,
            id=self.id,
            paid_date=self.paid_date,
            notes=self.notes,
        )


class InstallmentSchema(BaseModel):
    """Single installment in a schedule"""

    id: Optional[str] = None
    due_date: date
    amount: int
    status: InstallmentStatus
    effective_status: InstallmentStatus
    paid_date: Optional[date] = None
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, inst: Installment, today: date) -> "InstallmentSchema":
        return cls(
            id=inst.id,
            due_date=inst.due_date,
            amount=inst.amount,
            status=inst.status,
            effective_status=effective_status(inst, today),
            paid_date=inst.paid_date,
            notes=inst.notes,
        )


class DebtRequest(BaseModel):
    """Request body for POST /v1/debts and PUT /v1/debts/{debt_id}"""

    client_id: str = Field(..., min_length=1)
    item_name: str = Field(..., min_length=1)
    base_value: int = Field(..., gt=0, description="Principal in whole currency units")
    profit_percentage: Optional[float] = Field(None, ge=0)
    profit_value: Optional[int] = Field(None, ge=0, description="Fixed profit; wins over the percentage")
    month_count: int = Field(settings.default_month_count, ge=1)
    start_date: date
    payment_day: int = Field(settings.default_payment_day, ge=1, le=31)
    installments: Optional[List[InstallmentInput]] = Field(
        None, description="Edited schedule; generated from base + profit when omitted"
    )
    notes: Optional[str] = None

    def to_draft(self) -> DebtDraft:
        percentage = self.profit_percentage
        if percentage is None and self.profit_value is None:
            percentage = settings.default_profit_percentage
        return DebtDraft(
            client_id=self.client_id,
            item_name=self.item_name,
            base_value=self.base_value,
            month_count=self.month_count,
            start_date=self.start_date,
            payment_day=self.payment_day,
            profit_percentage=percentage,
            profit_value=self.profit_value,
            installments=[inst.to_domain() for inst in self.installments] if self.installments else None,
            notes=self.notes,
        )


class DebtSchema(BaseModel):
    """Debt with its schedule and rollups"""

    id: str
    client_id: str
    item_name: str
    base_value: int
    profit_value: int
    profit_percentage: float
    total_value: int
    total_paid: int
    remaining: int
    start_date: date
    month_count: int
    payment_day: int
    is_fully_paid: bool
    notes: Optional[str] = None
    installments: List[InstallmentSchema]

    @classmethod
    def from_domain(cls, debt: Debt, today: date) -> "DebtSchema":
        return cls(
            id=debt.id,
            client_id=debt.client_id,
            item_name=debt.item_name,
            base_value=debt.base_value,
            profit_value=debt.profit_value,
            profit_percentage=debt.profit_percentage,
            total_value=debt.total_value,
            total_paid=total_paid(debt),
            remaining=remaining(debt),
            start_date=debt.start_date,
            month_count=debt.month_count,
            payment_day=debt.payment_day,
            is_fully_paid=debt.is_fully_paid,
            notes=debt.notes,
            installments=[InstallmentSchema.from_domain(inst, today) for inst in debt.installments],
        )


class ClientDetailResponse(BaseModel):
    """Response for GET /v1/clients/{client_id}"""

    client: ClientSchema
    balance: ClientBalanceSchema
    debts: List[DebtSchema]


class PaymentRequest(BaseModel):
    """Request body for recording (or previewing) a payment"""

    paid_amount: int = Field(..., ge=0, description="0 postpones the installment")
    paid_date: date = Field(default_factory=date.today)
    notes: Optional[str] = None
    future_count: Optional[int] = Field(
        None, ge=0, description="Months to spread the remaining balance over; defaults to the current count"
    )


class PaymentPreviewResponse(BaseModel):
    """Response for POST .../payment/preview"""

    balance_after_payment: int
    future_count: int
    future_installments: List[InstallmentSchema]


class ReceiptResponse(BaseModel):
    """Payment receipt numbers and rendered text"""

    client_name: str
    sequence_number: int
    amount: int
    receipt_date: date
    total_debt: int
    total_paid: int
    remaining: int
    text: str


class SummaryResponse(BaseModel):
    """Account summary numbers and rendered text"""

    client_name: str
    total_debt: int
    total_paid: int
    remaining: int
    text: str


class MessageQueuedResponse(BaseModel):
    queued: bool
    phone: str


class ScheduleGenerateRequest(BaseModel):
    """Request body for POST /v1/schedule/generate"""

    total: int = Field(..., ge=0)
    period_count: int = Field(..., ge=1)
    start_date: date
    payment_day: int = Field(settings.default_payment_day, ge=1, le=31)


class ScheduleEditAmountRequest(BaseModel):
    """Request body for POST /v1/schedule/edit-amount"""

    installments: List[InstallmentInput]
    index: int
    new_amount: int
    target_total: int = Field(..., ge=0)


class ScheduleEditDueDateRequest(BaseModel):
    """Request body for POST /v1/schedule/edit-due-date"""

    installments: List[InstallmentInput]
    index: int
    new_date: date


class ScheduleResponse(BaseModel):
    """Draft schedule returned by the generator and editor endpoints"""

    total: int
    installments: List[InstallmentSchema]


class UpcomingInstallmentSchema(BaseModel):
    debt_id: str
    client_name: Optional[str] = None
    installment: InstallmentSchema

    @classmethod
    def from_domain(cls, item: UpcomingInstallment, today: date) -> "UpcomingInstallmentSchema":
        return cls(
            debt_id=item.debt_id,
            client_name=item.client_name,
            installment=InstallmentSchema.from_domain(item.installment, today),
        )


class DashboardResponse(BaseModel):
    """Response for GET /v1/dashboard"""

    total_loaned: int
    total_profit: int
    total_collected: int
    total_pending: int
    upcoming: List[UpcomingInstallmentSchema]


class ExportResponse(BaseModel):
    """Response for GET /v1/backup/export"""

    label: str
    document: Dict[str, Any]


class LedgerStateResponse(BaseModel):
    """Revision and entity counts after a ledger-wide command"""

    revision: int
    clients: int
    debts: int
