"""Unit tests for the ledger document codec"""

import pytest
from datetime import date
from debt_ledger.domain.documents import export_label, from_document, to_document
from debt_ledger.domain.exceptions import MalformedDocumentError
from debt_ledger.domain.models import InstallmentStatus, LedgerSnapshot


def test_to_document_uses_persisted_field_names(sample_snapshot: LedgerSnapshot):
    document = to_document(sample_snapshot)

    client = document["clients"][0]
    debt = document["debts"][0]
    first = debt["installments"][0]

    assert client["nationalId"] == "1012345678"
    assert "createdAt" in client
    assert debt["clientId"] == "client-1"
    assert debt["itemName"] == "Washing machine"
    assert debt["totalValue"] == 600
    assert debt["profitPercentage"] == pytest.approx(20.0)
    assert debt["isFullyPaid"] is False
    assert first["dueDate"] == "2024-01-10"
    assert first["paidDate"] == "2024-01-09"
    assert first["status"] == "PAID"


def test_from_document_restores_snapshot(sample_snapshot: LedgerSnapshot):
    restored = from_document(to_document(sample_snapshot), revision=7)

    assert restored.revision == 7
    assert restored.clients[0].name == "Sara Ahmed"
    debt = restored.debts[0]
    assert debt.start_date == date(2024, 1, 1)
    assert [inst.id for inst in debt.installments] == ["inst-1", "inst-2", "inst-3"]
    assert debt.installments[0].status == InstallmentStatus.PAID


def test_from_document_accepts_legacy_epoch_dates_and_float_amounts():
    payload = {
        "clients": [{"id": "c1", "name": "Legacy", "phone": "1", "createdAt": 1704067200000}],
        "debts": [
            {
                "id": "d1",
                "clientId": "c1",
                "itemName": "Fridge",
                "baseValue": 900.0,
                "profitPercentage": 10,
                "profitValue": 90.0,
                "totalValue": 990.0,
                "startDate": 1704067200000,
                "monthCount": 1,
                "paymentDay": 10,
                "installments": [
                    {"id": "i1", "debtId": "d1", "dueDate": 1704844800000, "amount": 990.0, "status": "PENDING"}
                ],
                "isFullyPaid": False,
            }
        ],
    }

    snapshot = from_document(payload)
    debt = snapshot.debts[0]

    assert snapshot.clients[0].created_at.year == 2024
    assert debt.start_date == date(2024, 1, 1)
    assert debt.installments[0].due_date == date(2024, 1, 10)
    assert debt.installments[0].amount == 990
    assert debt.total_value == 990


def test_from_document_ignores_unknown_fields():
    snapshot = from_document({"clients": [], "debts": [], "exportedBy": "someone"})
    assert snapshot.clients == [] and snapshot.debts == []


@pytest.mark.parametrize(
    "payload",
    [
        [],
        "not a ledger",
        {"clients": []},
        {"debts": []},
        {"clients": [{"id": "c1"}], "debts": []},
        {"clients": [], "debts": [{"id": "d1", "status": "UNKNOWN"}]},
    ],
)
def test_from_document_rejects_malformed(payload):
    with pytest.raises(MalformedDocumentError):
        from_document(payload)


@pytest.mark.parametrize(
    "path, value",
    [
        (("installments", 0, "amount"), -50),
        (("baseValue",), -1),
        (("totalValue",), 550),
        (("paymentDay",), 0),
        (("paymentDay",), 32),
        (("monthCount",), 0),
    ],
)
def test_from_document_rejects_broken_ledger_rules(sample_snapshot: LedgerSnapshot, path, value):
    """A backup that breaks the debt rules is refused as a whole"""
    document = to_document(sample_snapshot)
    target = document["debts"][0]
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value

    with pytest.raises(MalformedDocumentError):
        from_document(document)


def test_from_document_rejects_negative_installment_with_matching_total(sample_snapshot: LedgerSnapshot):
    document = to_document(sample_snapshot)
    installments = document["debts"][0]["installments"]
    installments[1]["amount"] = -50
    installments[2]["amount"] = 450

    with pytest.raises(MalformedDocumentError):
        from_document(document)


def test_from_document_schedule_must_sum_to_total(sample_snapshot: LedgerSnapshot):
    document = to_document(sample_snapshot)
    document["debts"][0]["installments"][2]["amount"] = 150

    with pytest.raises(MalformedDocumentError):
        from_document(document)


def test_export_label():
    assert export_label(date(2024, 3, 5)) == "debt_backup_2024-03-05.json"
    assert export_label(date(2024, 3, 5), prefix="shop") == "shop_2024-03-05.json"
