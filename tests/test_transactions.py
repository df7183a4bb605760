import re
from decimal import Decimal

import pytest


def amount_paid(client, invoice_id):
    data = client.get(f"/api/invoices/{invoice_id}").json()["data"]
    return Decimal(data["amount_paid"])


def test_create_transaction(client, invoice, customer, pay):
    response = pay(invoice["invoice_id"], 40)

    assert response.status_code == 201
    data = response.json()["data"]
    assert re.fullmatch(r"TXN-\d+-\d{1,3}", data["transaction_id"])
    assert data["invoice_id"] == invoice["invoice_id"]
    assert data["customer_id"] == customer["customer_id"]
    assert Decimal(data["transaction_amount"]) == Decimal("40")
    assert Decimal(data["amount_paid"]) == Decimal("40")


@pytest.mark.parametrize("platform", ["Nequi", "Daviplata"])
@pytest.mark.parametrize("status", ["Pending", "Completed", "Failed"])
def test_every_platform_and_status_is_accepted(client, invoice, pay, platform, status):
    response = pay(invoice["invoice_id"], 10, status=status, platform=platform)

    assert response.status_code == 201
    assert response.json()["data"]["platform"] == platform
    assert response.json()["data"]["transaction_status"] == status


@pytest.mark.parametrize("status", ["Pending", "Failed"])
def test_unsettled_transactions_leave_balance_alone(client, invoice, pay, status):
    pay(invoice["invoice_id"], 25, status=status)

    assert amount_paid(client, invoice["invoice_id"]) == Decimal("0")


def test_invalid_platform_is_rejected(client, invoice, pay):
    response = pay(invoice["invoice_id"], 10, platform="Other")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid platform")


def test_invalid_status_is_rejected(client, invoice, pay):
    response = pay(invoice["invoice_id"], 10, status="Unknown")

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid transaction status")


def test_non_positive_amount_is_rejected(client, invoice, pay):
    response = pay(invoice["invoice_id"], 0)

    assert response.status_code == 400
    assert response.json()["error"] == "Transaction amount must be greater than 0"


def test_missing_fields_are_rejected(client, invoice):
    response = client.post(
        "/api/transactions/",
        json={"invoice_id": invoice["invoice_id"], "transaction_amount": 10},
    )

    assert response.status_code == 400
    assert response.json()["error"].startswith("Missing required fields")


def test_unknown_invoice_is_400(client, pay):
    response = pay("INV-0-0", 10)

    assert response.status_code == 400
    assert response.json()["error"] == "Invoice not found"


def test_completed_transactions_may_overpay(client, invoice, pay):
    pay(invoice["invoice_id"], 150)

    assert amount_paid(client, invoice["invoice_id"]) == Decimal("150")


def test_create_then_delete_restores_balance(client, invoice, pay):
    client.put(f"/api/invoices/{invoice['invoice_id']}", json={"amount_paid": 15})
    txn = pay(invoice["invoice_id"], 35).json()["data"]
    assert amount_paid(client, invoice["invoice_id"]) == Decimal("50")

    response = client.delete(f"/api/transactions/{txn['transaction_id']}")

    assert response.status_code == 200
    assert amount_paid(client, invoice["invoice_id"]) == Decimal("15")
    assert client.get(f"/api/transactions/{txn['transaction_id']}").status_code == 404


def test_deleting_pending_transaction_leaves_balance_alone(client, invoice, pay):
    pay(invoice["invoice_id"], 20)
    pending = pay(invoice["invoice_id"], 30, status="Pending").json()["data"]

    client.delete(f"/api/transactions/{pending['transaction_id']}")

    assert amount_paid(client, invoice["invoice_id"]) == Decimal("20")


def test_completing_a_pending_transaction_credits_invoice(client, invoice, pay):
    txn = pay(invoice["invoice_id"], 30, status="Pending").json()["data"]

    response = client.put(
        f"/api/transactions/{txn['transaction_id']}",
        json={"transaction_status": "Completed"},
    )

    assert response.status_code == 200
    assert amount_paid(client, invoice["invoice_id"]) == Decimal("30")

    client.put(
        f"/api/transactions/{txn['transaction_id']}",
        json={"transaction_status": "Failed"},
    )
    assert amount_paid(client, invoice["invoice_id"]) == Decimal("0")


def test_changing_completed_amount_rebalances(client, invoice, pay):
    txn = pay(invoice["invoice_id"], 30).json()["data"]

    client.put(f"/api/transactions/{txn['transaction_id']}", json={"transaction_amount": 45})

    assert amount_paid(client, invoice["invoice_id"]) == Decimal("45")


def test_moving_completed_transaction_between_invoices(client, customer, invoice, pay):
    second = client.post(
        "/api/invoices/",
        json={"customer_id": customer["customer_id"], "billing_period": "2024-02", "invoice_amount": 100},
    ).json()["data"]
    txn = pay(invoice["invoice_id"], 60).json()["data"]

    client.put(
        f"/api/transactions/{txn['transaction_id']}",
        json={"invoice_id": second["invoice_id"]},
    )

    assert amount_paid(client, invoice["invoice_id"]) == Decimal("0")
    assert amount_paid(client, second["invoice_id"]) == Decimal("60")


def test_update_with_same_values_keeps_balance(client, invoice, pay):
    txn = pay(invoice["invoice_id"], 30).json()["data"]

    client.put(
        f"/api/transactions/{txn['transaction_id']}",
        json={"transaction_amount": 30, "transaction_type": "Refund"},
    )

    assert amount_paid(client, invoice["invoice_id"]) == Decimal("30")


def test_update_validates_enumerations(client, invoice, pay):
    txn = pay(invoice["invoice_id"], 30).json()["data"]
    url = f"/api/transactions/{txn['transaction_id']}"

    assert client.put(url, json={"platform": "PayPal"}).status_code == 400
    assert client.put(url, json={"transaction_status": "Done"}).status_code == 400
    assert client.put(url, json={"transaction_amount": -5}).status_code == 400
    assert client.put(url, json={"invoice_id": "INV-0-0"}).status_code == 400
    assert client.put(url, json={}).status_code == 400
    assert amount_paid(client, invoice["invoice_id"]) == Decimal("30")


def test_update_missing_transaction_is_404(client):
    response = client.put("/api/transactions/TXN-0-0", json={"platform": "Nequi"})

    assert response.status_code == 404


def test_delete_missing_transaction_is_404(client):
    assert client.delete("/api/transactions/TXN-0-0").status_code == 404


def test_filters_by_platform_and_status(client, invoice, pay):
    pay(invoice["invoice_id"], 10, platform="Nequi", when="2024-01-01T08:00:00")
    pay(invoice["invoice_id"], 20, platform="Nequi", status="Failed", when="2024-01-03T08:00:00")
    pay(invoice["invoice_id"], 30, platform="Daviplata", when="2024-01-02T08:00:00")

    nequi = client.get("/api/transactions/platform/Nequi").json()
    completed = client.get("/api/transactions/status/Completed").json()
    everything = client.get("/api/transactions/").json()

    assert nequi["platform"] == "Nequi"
    assert [Decimal(t["transaction_amount"]) for t in nequi["data"]] == [Decimal("20"), Decimal("10")]
    assert completed["status"] == "Completed"
    assert completed["count"] == 2
    assert [Decimal(t["transaction_amount"]) for t in everything["data"]] == [
        Decimal("20"),
        Decimal("30"),
        Decimal("10"),
    ]
    assert client.get("/api/transactions/platform/Other").json()["count"] == 0
