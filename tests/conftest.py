import pytest
from fastapi.testclient import TestClient

from billing.db.engine import build_engine, get_engine
from billing.db.schema import metadata
from billing.main import app


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'billing.sqlite'}")
    metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(engine):
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def customer(client):
    response = client.post(
        "/api/customers/",
        json={
            "customer_name": "Ana Gómez",
            "customer_address": "Calle 10 # 5-20",
            "customer_phone": "3001234567",
            "customer_email": "ana@example.com",
        },
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def invoice(client, customer):
    response = client.post(
        "/api/invoices/",
        json={
            "customer_id": customer["customer_id"],
            "billing_period": "2024-01",
            "invoice_amount": 100,
        },
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def pay(client):
    """Post a transaction against an invoice and return the response."""

    def _pay(invoice_id, amount, status="Completed", platform="Nequi", when="2024-01-15T10:00:00"):
        return client.post(
            "/api/transactions/",
            json={
                "invoice_id": invoice_id,
                "transaction_datetime": when,
                "transaction_amount": amount,
                "transaction_status": status,
                "transaction_type": "Payment",
                "platform": platform,
            },
        )

    return _pay
