"""Source numbers for payment receipts and account summaries sent to clients"""

import re
from dataclasses import dataclass
from datetime import date
from debt_ledger.domain.aggregation import client_balance
from debt_ledger.domain.ledger import find_client, find_debt
from debt_ledger.domain.exceptions import ValidationError
from debt_ledger.domain.models import InstallmentStatus, LedgerSnapshot
from debt_ledger.domain.reconciliation import find_installment


@dataclass
class AccountSummary:
    """Client-wide totals for the account summary message"""

    client_name: str
    phone: str
    total_debt: int
    total_paid: int
    remaining: int


@dataclass
class PaymentReceipt:
    """One installment's receipt plus the client's running totals"""

    client_name: str
    phone: str
    sequence_number: int
    amount: int
    date: date
    total_debt: int
    total_paid: int
    remaining: int


def build_account_summary(snapshot: LedgerSnapshot, client_id: str) -> AccountSummary:
    client = find_client(snapshot, client_id)
    balance = client_balance(snapshot, client_id)
    return AccountSummary(
        client_name=client.name,
        phone=client.phone,
        total_debt=balance.total_debt,
        total_paid=balance.total_paid,
        remaining=balance.remaining,
    )


def build_payment_receipt(
    snapshot: LedgerSnapshot,
    debt_id: str,
    installment_id: str,
    today: date,
) -> PaymentReceipt:
    """
    Receipt for one installment.

    The sequence number is the installment's 1-based position in its debt.
    Running totals cover every debt of the client, not just this one. An
    installment without a paid date (older backups) is stamped with `today`.
    Only PAID installments have a receipt.
    """
    debt = find_debt(snapshot, debt_id)
    installment = find_installment(debt, installment_id)
    if installment.status != InstallmentStatus.PAID:
        raise ValidationError(
            f"Installment {installment_id} is {installment.status.value}; only PAID installments have a receipt"
        )
    client = find_client(snapshot, debt.client_id)
    balance = client_balance(snapshot, client.id)

    return PaymentReceipt(
        client_name=client.name,
        phone=client.phone,
        sequence_number=debt.installments.index(installment) + 1,
        amount=installment.amount,
        date=installment.paid_date or today,
        total_debt=balance.total_debt,
        total_paid=balance.total_paid,
        remaining=balance.remaining,
    )


def messaging_phone(phone: str) -> str:
    """Digits-only phone number as messaging gateways expect it"""
    return re.sub(r"\D", "", phone or "")


def render_receipt_text(receipt: PaymentReceipt) -> str:
    return (
        "Installment payment receipt\n"
        "\n"
        f"Client: {receipt.client_name}\n"
        f"Installment no.: {receipt.sequence_number}\n"
        f"Amount: {receipt.amount}\n"
        f"Date: {receipt.date.isoformat()}\n"
        "\n"
        f"Total debt: {receipt.total_debt}\n"
        f"Total paid: {receipt.total_paid}\n"
        f"Total remaining: {receipt.remaining}\n"
        "\n"
        "Thank you for your payment."
    )


def render_summary_text(summary: AccountSummary) -> str:
    return (
        f"Hello {summary.client_name},\n"
        "Here is your account summary:\n"
        f"Total debt: {summary.total_debt}\n"
        f"Paid: {summary.total_paid}\n"
        f"Remaining: {summary.remaining}\n"
        "Thank you for dealing with us."
    )
