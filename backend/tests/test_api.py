"""HTTP surface: routing, status codes and role checks."""
from decimal import Decimal


def test_daybook_endpoint(client, fresh_batch):
    response = client.post("/sales/", json={
        "items": [{"stock_batch_id": fresh_batch.id, "quantity": "2"}],
        "payment_mode": "CASH",
        "amount_tendered": "50",
    })
    assert response.status_code == 201
    sale = response.json()
    assert Decimal(sale["change_returned"]) == Decimal("10")

    day = sale["sale_date"][:10]
    response = client.get("/reports/daybook", params={"start_date": day, "end_date": f"{day}T23:59:59"})
    assert response.status_code == 200
    daybook = response.json()
    categories = [row["category"] for row in daybook["entries"]]
    assert categories == ["PURCHASE", "SALE"]
    assert Decimal(daybook["closing_balance"]) == Decimal(daybook["opening_balance"]) + 40


def test_daybook_rejects_bad_dates(client):
    assert client.get("/reports/daybook", params={"start_date": "yesterday", "end_date": "2024-01-01"}).status_code == 400
    assert client.get("/reports/daybook", params={"start_date": "2024-02-01", "end_date": "2024-01-01"}).status_code == 400


def test_checkout_validation_is_a_bad_request(client, fresh_batch):
    response = client.post("/sales/", json={
        "items": [{"stock_batch_id": fresh_batch.id, "quantity": "500"}],
        "amount_tendered": "100000",
    })
    assert response.status_code == 400
    assert "left in batch" in response.json()["detail"]


def test_bank_flow_and_summary(client):
    response = client.post("/bank-accounts/", json={"name": "HDFC Current", "opening_balance": "1000"})
    assert response.status_code == 201
    account = response.json()
    assert Decimal(account["balance"]) == Decimal("1000")

    response = client.post("/bank-accounts/transactions/", json={
        "bank_account_id": account["id"], "amount": "200", "type": "IN", "category": "UPI",
    })
    assert response.status_code == 201

    summary = client.get("/reports/bank-summary").json()
    assert Decimal(summary["computed_balance"]) == Decimal("1200")
    assert Decimal(summary["upi_in"]) == Decimal("200")
    assert Decimal(summary["per_account"][0]["balance_drift"]) == 0

    response = client.patch(f"/bank-accounts/{account['id']}", json={"name": "HDFC Savings"})
    assert response.json()["name"] == "HDFC Savings"
    assert Decimal(response.json()["balance"]) == Decimal("1200")


def test_transaction_for_unknown_account_is_rejected(client):
    response = client.post("/bank-accounts/transactions/", json={"bank_account_id": 77, "amount": "5", "type": "OUT"})
    assert response.status_code == 400


def test_customer_statement_endpoint(client):
    customer = client.post("/customers/", json={"name": "Asha", "opening_balance": "120"}).json()
    response = client.post("/customers/payments/", json={"customer_id": customer["id"], "amount": "20"})
    assert response.status_code == 201

    statement = client.get(f"/customers/{customer['id']}/statement").json()
    assert Decimal(statement["closing_balance"]) == Decimal("100")
    assert Decimal(client.get("/customers/").json()[0]["outstanding_balance"]) == Decimal("100")
    assert client.get("/customers/999/statement").status_code == 404


def test_payment_for_unknown_supplier_is_rejected(client):
    response = client.post("/suppliers/payments/", json={"supplier_id": 5, "amount": "10"})
    assert response.status_code == 400


def test_reconciliation_endpoints(client):
    report = client.get("/reports/balance-reconciliation").json()
    assert report == {"checked": 0, "drifts": [], "fixed": False}
    assert client.post("/reports/balance-reconciliation/fix").status_code == 200


def test_staff_cannot_use_admin_endpoints(staff_client, fresh_batch):
    assert staff_client.get("/reports/balance-reconciliation").status_code == 403
    assert staff_client.get("/reports/audit-log").status_code == 403
    assert staff_client.post("/bank-accounts/", json={"name": "X"}).status_code == 403
    assert staff_client.delete("/sales/1").status_code == 403
    assert staff_client.patch("/configurations/stock_old_after_days/", json={"value": "2"}).status_code == 403
    assert staff_client.get("/stock/computed").status_code == 200


def test_configuration_validation(client):
    assert client.patch("/configurations/stock_old_after_days/", json={"value": "-1"}).status_code == 400
    assert client.patch("/configurations/stock_old_after_days/", json={"value": "2"}).status_code == 200
    assert client.get("/configurations/stock-age").json() == {"stock_old_after_days": 2, "stock_damaged_after_days": 2}


def test_missing_token_is_unauthorized(db_session):
    from fastapi.testclient import TestClient
    from database import get_db
    from main import app

    app.dependency_overrides[get_db] = lambda: db_session
    try:
        response = TestClient(app).get("/reports/bank-summary")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 401


def test_audit_log_endpoint(client, fresh_batch):
    sale = client.post("/sales/", json={
        "items": [{"stock_batch_id": fresh_batch.id, "quantity": "1"}],
        "amount_tendered": "20",
    }).json()

    rows = client.get("/reports/audit-log", params={"table_name": "sales", "record_id": sale["id"]}).json()
    assert [row["action"] for row in rows] == ["CREATE"]
    assert rows[0]["new_values"]["id"] == sale["id"]


def test_expense_create_and_read(client):
    response = client.post("/expenses/", json={"category": "Transport", "amount": "40", "payment_mode": "CASH"})
    assert response.status_code == 201
    expense = response.json()

    assert client.get(f"/expenses/{expense['id']}").json()["category"] == "Transport"
    assert client.get("/expenses/999").status_code == 404
    assert client.post("/expenses/", json={"category": "Transport", "amount": "0"}).status_code == 422
