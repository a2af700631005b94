"""Ledger rollups - pure folds over installment status"""

from datetime import date
from typing import List
from debt_ledger.domain.models import (
    Client,
    ClientBalance,
    DashboardTotals,
    Debt,
    Installment,
    InstallmentStatus,
    LedgerSnapshot,
    UpcomingInstallment,
)


def total_paid(debt: Debt) -> int:
    return sum(inst.amount for inst in debt.installments if inst.status == InstallmentStatus.PAID)


def remaining(debt: Debt) -> int:
    return debt.total_value - total_paid(debt)


def client_debts(snapshot: LedgerSnapshot, client_id: str) -> List[Debt]:
    return [debt for debt in snapshot.debts if debt.client_id == client_id]


def client_balance(snapshot: LedgerSnapshot, client_id: str) -> ClientBalance:
    """Totals across every debt of one client"""
    debts = client_debts(snapshot, client_id)
    total_debt = sum(debt.total_value for debt in debts)
    paid = sum(total_paid(debt) for debt in debts)
    return ClientBalance(total_debt=total_debt, total_paid=paid, remaining=total_debt - paid)


def dashboard_totals(snapshot: LedgerSnapshot) -> DashboardTotals:
    """
    Ledger-wide totals.

    - total_loaned: sum of principals
    - total_profit: sum of absolute profits
    - total_collected: PAID installment amounts
    - total_pending: amounts that are neither PAID nor POSTPONED
    """
    loaned = profit = collected = pending = 0
    for debt in snapshot.debts:
        loaned += debt.base_value
        profit += debt.profit_value
        for inst in debt.installments:
            if inst.status == InstallmentStatus.PAID:
                collected += inst.amount
            elif inst.status != InstallmentStatus.POSTPONED:
                pending += inst.amount

    return DashboardTotals(
        total_loaned=loaned,
        total_profit=profit,
        total_collected=collected,
        total_pending=pending,
    )


def effective_status(installment: Installment, today: date) -> InstallmentStatus:
    """Display status: a PENDING entry past its due date reads as OVERDUE"""
    if installment.status == InstallmentStatus.PENDING and installment.due_date < today:
        return InstallmentStatus.OVERDUE
    return installment.status


def upcoming_installments(snapshot: LedgerSnapshot, limit: int = 3) -> List[UpcomingInstallment]:
    """Open installments across the ledger, earliest due first"""
    names = {client.id: client.name for client in snapshot.clients}
    upcoming = [
        UpcomingInstallment(debt_id=debt.id, client_name=names.get(debt.client_id), installment=inst)
        for debt in snapshot.debts
        for inst in debt.installments
        if not inst.is_settled
    ]
    upcoming.sort(key=lambda item: item.installment.due_date)
    return upcoming[:limit]


def search_clients(snapshot: LedgerSnapshot, term: str) -> List[Client]:
    """Clients whose name or phone contains `term` (all clients for an empty term)"""
    if not term:
        return list(snapshot.clients)
    return [client for client in snapshot.clients if term in client.name or term in client.phone]
