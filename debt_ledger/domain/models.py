"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional


class InstallmentStatus(str, Enum):
    """Lifecycle of a scheduled installment.

    OVERDUE is never stored by the reconciler; it is derived at read time
    from the due date (see aggregation.effective_status).
    """

    PENDING = "PENDING"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    POSTPONED = "POSTPONED"


SETTLED_STATUSES = (InstallmentStatus.PAID, InstallmentStatus.POSTPONED)


@dataclass
class Client:
    """Borrower owning zero or more debts"""

    id: str
    name: str
    phone: str
    national_id: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class Installment:
    """Single payment in a repayment schedule"""

    due_date: date
    amount: int
    status: InstallmentStatus = InstallmentStatus.PENDING
    id: Optional[str] = None
    debt_id: Optional[str] = None
    paid_date: Optional[date] = None
    notes: Optional[str] = None

    @property
    def is_settled(self) -> bool:
        return self.status in SETTLED_STATUSES


@dataclass
class Debt:
    """One financed item with its own principal, profit and schedule"""

    id: str
    client_id: str
    item_name: str
    base_value: int
    profit_value: int
    total_value: int
    start_date: date
    month_count: int
    payment_day: int
    installments: List[Installment] = field(default_factory=list)
    is_fully_paid: bool = False
    notes: Optional[str] = None

    @property
    def profit_percentage(self) -> float:
        """Profit as a percentage of the principal, derived from profit_value"""
        if self.base_value <= 0:
            return 0.0
        return self.profit_value / self.base_value * 100


@dataclass
class DebtDraft:
    """Validated-on-save input of the debt form"""

    client_id: str
    item_name: str
    base_value: int
    month_count: int
    start_date: date
    payment_day: int
    profit_percentage: Optional[float] = None
    profit_value: Optional[int] = None
    installments: Optional[List[Installment]] = None
    notes: Optional[str] = None


@dataclass
class LedgerSnapshot:
    """Whole ledger at one revision; commands publish a new snapshot"""

    clients: List[Client] = field(default_factory=list)
    debts: List[Debt] = field(default_factory=list)
    revision: int = 0


@dataclass
class ClientBalance:
    """Per-client rollup over all of the client's debts"""

    total_debt: int
    total_paid: int
    remaining: int


@dataclass
class DashboardTotals:
    """Ledger-wide rollup shown on the dashboard"""

    total_loaned: int
    total_profit: int
    total_collected: int
    total_pending: int


@dataclass
class UpcomingInstallment:
    """Open installment with the owning client's name"""

    debt_id: str
    client_name: Optional[str]
    installment: Installment


@dataclass
class PaymentPreview:
    """What-if result of a payment before it is committed"""

    balance_after_payment: int
    future_count: int
    future_installments: List[Installment]
