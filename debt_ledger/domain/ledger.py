"""Ledger store - the single owner of ledger state and its closed set of commands"""

import threading
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple
from debt_ledger.domain.documents import from_document
from debt_ledger.domain.exceptions import ClientNotFoundError, DebtNotFoundError, ValidationError
from debt_ledger.domain.installments import generate_installment_plan, validate_payment_day
from debt_ledger.domain.models import Client, Debt, DebtDraft, Installment, LedgerSnapshot, PaymentPreview
from debt_ledger.domain.profit import resolve_profit
from debt_ledger.domain.reconciliation import (
    find_open_installment,
    outstanding_after_payment,
    plan_future_installments,
    reconcile,
)

# Saves a snapshot before it is published; raising aborts the command
Persist = Callable[[LedgerSnapshot], None]


def new_id() -> str:
    return str(uuid.uuid4())


def find_client(snapshot: LedgerSnapshot, client_id: str) -> Client:
    for client in snapshot.clients:
        if client.id == client_id:
            return client
    raise ClientNotFoundError(f"Client {client_id} not found")


def find_debt(snapshot: LedgerSnapshot, debt_id: str) -> Debt:
    for debt in snapshot.debts:
        if debt.id == debt_id:
            return debt
    raise DebtNotFoundError(f"Debt {debt_id} not found")


def _with_identity(installments: List[Installment], debt_id: str) -> List[Installment]:
    return [replace(inst, id=inst.id or new_id(), debt_id=debt_id) for inst in installments]


def _replace_debt(snapshot: LedgerSnapshot, debt: Debt) -> LedgerSnapshot:
    find_debt(snapshot, debt.id)
    return replace(snapshot, debts=[debt if d.id == debt.id else d for d in snapshot.debts])


def build_debt(draft: DebtDraft, debt_id: str, client_id: str) -> Debt:
    """
    Turn a debt form into a consistent Debt.

    - Generates the schedule from base + profit when the draft has none
    - total_value is the sum of the final schedule and profit_value is
      derived from it, so manual edits flow into the profit
    - Installments keep their ids; new ones get fresh ids
    """
    if not draft.item_name or not draft.item_name.strip():
        raise ValidationError("Item name is required")
    if draft.base_value <= 0:
        raise ValidationError(f"Base value must be positive, got {draft.base_value}")
    if draft.month_count < 1:
        raise ValidationError(f"Month count must be at least 1, got {draft.month_count}")
    validate_payment_day(draft.payment_day)

    profit = resolve_profit(draft.base_value, draft.profit_percentage, draft.profit_value)
    installments = draft.installments
    if not installments:
        installments = generate_installment_plan(
            draft.base_value + profit,
            draft.month_count,
            draft.start_date,
            draft.payment_day,
        )
    if any(inst.amount < 0 for inst in installments):
        raise ValidationError("Installment amounts must not be negative")

    installments = _with_identity(installments, debt_id)
    total = sum(inst.amount for inst in installments)

    return Debt(
        id=debt_id,
        client_id=client_id,
        item_name=draft.item_name.strip(),
        base_value=draft.base_value,
        profit_value=total - draft.base_value,
        total_value=total,
        start_date=draft.start_date,
        month_count=draft.month_count,
        payment_day=draft.payment_day,
        installments=installments,
        is_fully_paid=all(inst.is_settled for inst in installments),
        notes=draft.notes,
    )


class LedgerStore:
    """
    Owns the current LedgerSnapshot.

    Every command validates first, then publishes a whole new snapshot with
    revision + 1; a rejected command leaves the ledger untouched. Commands
    that read and replace one debt run inside that debt's lock.

    Commands accept a `persist` callback. It receives the new snapshot under
    the commit lock and runs before the snapshot is published, so a failed
    save leaves the in-memory ledger on the previous revision.
    """

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None):
        self._snapshot = snapshot or LedgerSnapshot()
        self._commit_lock = threading.Lock()
        self._debt_locks: Dict[str, threading.Lock] = {}

    @property
    def snapshot(self) -> LedgerSnapshot:
        return self._snapshot

    @contextmanager
    def _debt_section(self, debt_id: str) -> Iterator[None]:
        with self._commit_lock:
            lock = self._debt_locks.setdefault(debt_id, threading.Lock())
        with lock:
            yield

    def _drop_debt_locks(self, debt_ids: Iterable[str]) -> None:
        with self._commit_lock:
            for debt_id in debt_ids:
                self._debt_locks.pop(debt_id, None)

    def _commit(
        self,
        mutate: Callable[[LedgerSnapshot], LedgerSnapshot],
        persist: Optional[Persist] = None,
    ) -> LedgerSnapshot:
        with self._commit_lock:
            current = self._snapshot
            updated = replace(mutate(current), revision=current.revision + 1)
            if persist is not None:
                persist(updated)
            self._snapshot = updated
            return updated

    # Commands

    def add_client(
        self,
        name: str,
        phone: str,
        national_id: Optional[str] = None,
        persist: Optional[Persist] = None,
    ) -> Tuple[LedgerSnapshot, Client]:
        if not name or not name.strip():
            raise ValidationError("Client name is required")
        if not phone or not phone.strip():
            raise ValidationError("Client phone is required")

        client = Client(id=new_id(), name=name.strip(), phone=phone.strip(), national_id=national_id or None)
        snapshot = self._commit(lambda s: replace(s, clients=[client] + s.clients), persist)
        return snapshot, client

    def save_debt(
        self,
        draft: DebtDraft,
        debt_id: Optional[str] = None,
        persist: Optional[Persist] = None,
    ) -> Tuple[LedgerSnapshot, Debt]:
        """Create a debt, or replace an existing one when `debt_id` is given"""
        if debt_id is None:
            find_client(self._snapshot, draft.client_id)
            debt = build_debt(draft, new_id(), draft.client_id)

            def insert(s: LedgerSnapshot) -> LedgerSnapshot:
                find_client(s, debt.client_id)
                return replace(s, debts=[debt] + s.debts)

            return self._commit(insert, persist), debt

        with self._debt_section(debt_id):
            existing = find_debt(self._snapshot, debt_id)
            debt = build_debt(draft, existing.id, existing.client_id)
            return self._commit(lambda s: _replace_debt(s, debt), persist), debt

    def preview_payment(
        self,
        debt_id: str,
        installment_id: str,
        paid_amount: int,
        paid_date: date,
        future_count: Optional[int] = None,
    ) -> PaymentPreview:
        """Regenerated future schedule for a payment, without committing it"""
        debt = find_debt(self._snapshot, debt_id)
        return self._preview(debt, installment_id, paid_amount, paid_date, future_count)

    def record_payment(
        self,
        debt_id: str,
        installment_id: str,
        paid_amount: int,
        paid_date: date,
        notes: Optional[str] = None,
        future_count: Optional[int] = None,
        persist: Optional[Persist] = None,
    ) -> Tuple[LedgerSnapshot, Debt]:
        """
        Record a payment (or a postponement when `paid_amount` is 0).

        The unresolved balance is regenerated over `future_count` months
        starting the month after `paid_date`. Only PENDING (or OVERDUE)
        installments can be paid.
        """
        with self._debt_section(debt_id):
            debt = find_debt(self._snapshot, debt_id)
            preview = self._preview(debt, installment_id, paid_amount, paid_date, future_count)
            future = _with_identity(preview.future_installments, debt.id)
            updated = reconcile(debt, installment_id, paid_amount, paid_date, notes, future)
            return self._commit(lambda s: _replace_debt(s, updated), persist), updated

    def delete_client(self, client_id: str, persist: Optional[Persist] = None) -> LedgerSnapshot:
        """Remove a client and every debt it owns"""
        find_client(self._snapshot, client_id)
        removed: List[str] = []

        def remove(s: LedgerSnapshot) -> LedgerSnapshot:
            find_client(s, client_id)
            removed[:] = [d.id for d in s.debts if d.client_id == client_id]
            return replace(
                s,
                clients=[c for c in s.clients if c.id != client_id],
                debts=[d for d in s.debts if d.client_id != client_id],
            )

        snapshot = self._commit(remove, persist)
        self._drop_debt_locks(removed)
        return snapshot

    def delete_debt(self, debt_id: str, persist: Optional[Persist] = None) -> LedgerSnapshot:
        find_debt(self._snapshot, debt_id)

        def remove(s: LedgerSnapshot) -> LedgerSnapshot:
            find_debt(s, debt_id)
            return replace(s, debts=[d for d in s.debts if d.id != debt_id])

        snapshot = self._commit(remove, persist)
        self._drop_debt_locks([debt_id])
        return snapshot

    def import_ledger(self, payload: Any, persist: Optional[Persist] = None) -> LedgerSnapshot:
        """Replace the whole ledger with a parsed document (MalformedDocumentError leaves it untouched)"""
        imported = from_document(payload)
        previous = [d.id for d in self._snapshot.debts]
        snapshot = self._commit(lambda s: replace(imported, revision=s.revision), persist)
        self._drop_debt_locks(previous)
        return snapshot

    def reset_ledger(self, persist: Optional[Persist] = None) -> LedgerSnapshot:
        previous = [d.id for d in self._snapshot.debts]
        snapshot = self._commit(lambda s: LedgerSnapshot(revision=s.revision), persist)
        self._drop_debt_locks(previous)
        return snapshot

    def _preview(
        self,
        debt: Debt,
        installment_id: str,
        paid_amount: int,
        paid_date: date,
        future_count: Optional[int],
    ) -> PaymentPreview:
        if paid_amount < 0:
            raise ValidationError(f"Paid amount must not be negative, got {paid_amount}")
        find_open_installment(debt, installment_id)

        balance = outstanding_after_payment(debt, installment_id, paid_amount)
        if balance < 0:
            raise ValidationError(f"Payment of {paid_amount} exceeds the outstanding balance by {-balance}")

        future = plan_future_installments(debt, installment_id, paid_amount, paid_date, future_count)

        return PaymentPreview(
            balance_after_payment=balance,
            future_count=len(future),
            future_installments=future,
        )
