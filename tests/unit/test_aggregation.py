"""Unit tests for ledger rollups"""

from dataclasses import replace
from datetime import date
from debt_ledger.domain.aggregation import (
    client_balance,
    dashboard_totals,
    effective_status,
    remaining,
    search_clients,
    total_paid,
    upcoming_installments,
)
from debt_ledger.domain.models import Client, Installment, InstallmentStatus, LedgerSnapshot


def test_total_paid_and_remaining(sample_snapshot: LedgerSnapshot):
    debt = sample_snapshot.debts[0]

    assert total_paid(debt) == 200
    assert remaining(debt) == 400


def test_client_balance_spans_all_debts(sample_snapshot: LedgerSnapshot):
    second = replace(
        sample_snapshot.debts[0],
        id="debt-2",
        total_value=300,
        installments=[
            Installment(due_date=date(2024, 2, 1), amount=100, status=InstallmentStatus.PAID, id="x1"),
            Installment(due_date=date(2024, 3, 1), amount=200, id="x2"),
        ],
    )
    snapshot = replace(sample_snapshot, debts=sample_snapshot.debts + [second])

    balance = client_balance(snapshot, "client-1")
    assert (balance.total_debt, balance.total_paid, balance.remaining) == (900, 300, 600)


def test_client_balance_without_debts():
    snapshot = LedgerSnapshot(clients=[Client(id="c", name="New", phone="1")])
    balance = client_balance(snapshot, "c")
    assert (balance.total_debt, balance.total_paid, balance.remaining) == (0, 0, 0)


def test_dashboard_totals(sample_snapshot: LedgerSnapshot):
    debt = sample_snapshot.debts[0]
    postponed = replace(debt.installments[1], status=InstallmentStatus.POSTPONED, amount=0)
    snapshot = replace(sample_snapshot, debts=[replace(debt, installments=[debt.installments[0], postponed, debt.installments[2]])])

    totals = dashboard_totals(snapshot)

    assert totals.total_loaned == 500
    assert totals.total_profit == 100
    assert totals.total_collected == 200
    assert totals.total_pending == 200


def test_dashboard_totals_is_pure(sample_snapshot: LedgerSnapshot):
    assert dashboard_totals(sample_snapshot) == dashboard_totals(sample_snapshot)


def test_effective_status_derives_overdue():
    pending = Installment(due_date=date(2024, 1, 10), amount=100)
    paid = replace(pending, status=InstallmentStatus.PAID)

    assert effective_status(pending, date(2024, 1, 11)) == InstallmentStatus.OVERDUE
    assert effective_status(pending, date(2024, 1, 10)) == InstallmentStatus.PENDING
    assert effective_status(paid, date(2024, 6, 1)) == InstallmentStatus.PAID
    # Stored status is untouched
    assert pending.status == InstallmentStatus.PENDING


def test_upcoming_installments_skips_settled_and_orders_by_due_date(sample_snapshot: LedgerSnapshot):
    upcoming = upcoming_installments(sample_snapshot, limit=3)

    assert [item.installment.id for item in upcoming] == ["inst-2", "inst-3"]
    assert upcoming[0].client_name == "Sara Ahmed"
    assert upcoming[0].debt_id == "debt-1"


def test_upcoming_installments_respects_limit(sample_snapshot: LedgerSnapshot):
    assert len(upcoming_installments(sample_snapshot, limit=1)) == 1


def test_search_clients_by_name_or_phone(sample_snapshot: LedgerSnapshot):
    snapshot = replace(
        sample_snapshot,
        clients=sample_snapshot.clients + [Client(id="client-2", name="Omar", phone="0555000111")],
    )

    assert [c.id for c in search_clients(snapshot, "Sara")] == ["client-1"]
    assert [c.id for c in search_clients(snapshot, "0555")] == ["client-2"]
    assert len(search_clients(snapshot, "")) == 2
    assert search_clients(snapshot, "nobody") == []
