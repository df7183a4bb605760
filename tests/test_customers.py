def test_create_and_get_customer(client, customer):
    assert customer["customer_id"] > 0
    assert customer["customer_name"] == "Ana Gómez"

    response = client.get(f"/api/customers/{customer['customer_id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["customer_email"] == "ana@example.com"


def test_customer_fields_are_optional(client):
    response = client.post("/api/customers/", json={})

    assert response.status_code == 201
    assert response.json()["data"]["customer_name"] is None


def test_list_customers_ordered_by_id(client):
    for name in ("B", "A", "C"):
        client.post("/api/customers/", json={"customer_name": name})

    body = client.get("/api/customers/").json()

    assert body["count"] == 3
    assert [c["customer_name"] for c in body["data"]] == ["B", "A", "C"]


def test_get_missing_customer_is_404(client):
    response = client.get("/api/customers/999")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Customer not found"}


def test_update_customer_changes_only_supplied_fields(client, customer):
    response = client.put(
        f"/api/customers/{customer['customer_id']}",
        json={"customer_phone": "3110000000"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["customer_phone"] == "3110000000"
    assert data["customer_name"] == "Ana Gómez"


def test_update_customer_without_fields_is_rejected(client, customer):
    response = client.put(f"/api/customers/{customer['customer_id']}", json={})

    assert response.status_code == 400
    assert response.json()["error"] == "No fields to update"


def test_delete_customer(client, customer):
    response = client.delete(f"/api/customers/{customer['customer_id']}")

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get(f"/api/customers/{customer['customer_id']}").status_code == 404


def test_delete_customer_with_invoices_is_blocked(client, customer, invoice):
    response = client.delete(f"/api/customers/{customer['customer_id']}")

    assert response.status_code == 400
    assert "related invoices" in response.json()["error"]

    client.delete(f"/api/invoices/{invoice['invoice_id']}")
    assert client.delete(f"/api/customers/{customer['customer_id']}").status_code == 200


def test_delete_missing_customer_is_404(client):
    assert client.delete("/api/customers/42").status_code == 404
