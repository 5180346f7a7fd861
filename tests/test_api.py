"""
HTTP contract tests: status codes, camelCase fields, decimal strings, error bodies.
"""

from app.deps import get_store
from app.errors import InternalError
from main import app


def post_debt(client, name="Car Loan", amount="50000.00"):
    resp = client.post("/api/debts", json={"name": name, "initialAmount": amount})
    assert resp.status_code == 201, resp.text
    return resp.json()


def post_tx(client, **body):
    resp = client.post("/api/transactions", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def seed_reference_data(client):
    car = post_debt(client)
    client.post(
        "/api/investments",
        json={"name": "S&P 500 ETF", "investedAmount": "10000.00", "currentValue": "12500.00"},
    )
    post_tx(client, type="income", category="Salary", amount="8500.00", date="2025-03-01T09:00:00")
    post_tx(client, type="expense", category="Rent", amount="2500.00", date="2025-03-02T09:00:00")
    post_tx(client, type="expense", category="Groceries", amount="450.50", date="2025-03-04T09:00:00")
    post_tx(
        client,
        type="debt_payment",
        category="Loan Repayment",
        amount="1000.00",
        date="2025-03-05T09:00:00",
        debtId=car["id"],
    )
    return car


class TestSummaryApi:
    """GET /api/summary"""

    def test_empty_summary(self, client):
        resp = client.get("/api/summary")
        assert resp.status_code == 200
        body = resp.json()
        assert body["totalIncome"] == "0.00"
        assert body["netPosition"] == "0.00"

    def test_reference_summary(self, client):
        seed_reference_data(client)
        body = client.get("/api/summary").json()
        assert body == {
            "totalIncome": "8500.00",
            "totalExpenses": "2950.50",
            "totalDebtPayments": "1000.00",
            "cashBalance": "4549.50",
            "totalInitialDebt": "50000.00",
            "remainingDebt": "49000.00",
            "totalInvestmentsValue": "12500.00",
            "netPosition": "-31950.50",
        }


class TestTransactionsApi:
    """/api/transactions"""

    def test_create_returns_decimal_strings(self, client):
        body = post_tx(client, type="expense", category="Groceries", amount=450.5, notes="Weekly shopping")
        assert body["amount"] == "450.50"
        assert body["type"] == "expense"
        assert body["debtId"] is None
        assert body["notes"] == "Weekly shopping"
        assert "createdAt" in body
        assert "date" in body

    def test_validation_error_shape(self, client):
        resp = client.post("/api/transactions", json={"type": "expense", "category": "Food", "amount": "-5"})
        assert resp.status_code == 400
        body = resp.json()
        assert body["field"] == "amount"
        assert body["message"]

    def test_rejected_write_leaves_no_state(self, client):
        client.post("/api/transactions", json={"type": "debt_payment", "category": "Loan", "amount": "5"})
        assert client.get("/api/transactions").json() == []

    def test_body_must_be_object(self, client):
        resp = client.post("/api/transactions", json=["expense"])
        assert resp.status_code == 400
        assert "message" in resp.json()

    def test_list_newest_first_with_limit(self, client):
        for day in range(1, 9):
            post_tx(client, type="expense", category="Coffee", amount="3.50", date=f"2025-03-0{day}")
        resp = client.get("/api/transactions", params={"limit": 5})
        assert resp.status_code == 200
        items = resp.json()
        assert len(items) == 5
        dates = [i["date"] for i in items]
        assert dates == sorted(dates, reverse=True)
        assert dates[0].startswith("2025-03-08")

    def test_filters(self, client):
        seed_reference_data(client)
        items = client.get(
            "/api/transactions",
            params={"startDate": "2025-03-02", "endDate": "2025-03-04", "type": "expense"},
        ).json()
        assert [i["category"] for i in items] == ["Groceries", "Rent"]

    def test_invalid_filter(self, client):
        resp = client.get("/api/transactions", params={"type": "refund"})
        assert resp.status_code == 400
        assert resp.json()["field"] == "type"

    def test_get_and_delete(self, client):
        tx = post_tx(client, type="income", category="Salary", amount="10")
        assert client.get(f"/api/transactions/{tx['id']}").json()["amount"] == "10.00"

        resp = client.delete(f"/api/transactions/{tx['id']}")
        assert resp.status_code == 204
        assert client.get(f"/api/transactions/{tx['id']}").status_code == 404

    def test_delete_missing_succeeds(self, client):
        assert client.delete("/api/transactions/999").status_code == 204

    def test_non_integer_id(self, client):
        resp = client.delete("/api/transactions/abc")
        assert resp.status_code == 400
        assert resp.json()["field"] == "transaction_id"

    def test_limit_too_large(self, client):
        resp = client.get("/api/transactions", params={"limit": "99999999999999999999999"})
        assert resp.status_code == 400
        assert resp.json()["field"] == "limit"

    def test_debt_id_too_large(self, client):
        resp = client.post(
            "/api/transactions",
            json={"type": "debt_payment", "category": "Loan", "amount": "5", "debtId": 99999999999999999999999},
        )
        assert resp.status_code == 400
        assert resp.json()["field"] == "debtId"

    def test_path_id_too_large(self, client):
        huge = "99999999999999999999999"
        for url, field in [
            (f"/api/transactions/{huge}", "transaction_id"),
            (f"/api/debts/{huge}", "debt_id"),
            (f"/api/investments/{huge}", "investment_id"),
        ]:
            resp = client.delete(url)
            assert resp.status_code == 400, url
            assert resp.json()["field"] == field
        assert client.get(f"/api/transactions/{huge}").status_code == 400
        assert client.put(f"/api/investments/{huge}", json={"name": "X"}).status_code == 400

    def test_malformed_json_has_no_field(self, client):
        resp = client.post(
            "/api/transactions",
            content="{\"type\": \"expense\",",
            headers={"Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["message"]
        assert "field" not in body


class TestDebtsApi:
    """/api/debts"""

    def test_list_with_progress(self, client):
        seed_reference_data(client)
        [debt] = client.get("/api/debts").json()
        assert debt["name"] == "Car Loan"
        assert debt["initialAmount"] == "50000.00"
        assert debt["paidAmount"] == "1000.00"
        assert debt["remainingAmount"] == "49000.00"
        assert debt["progress"] == "2.00"

    def test_get_single(self, client):
        car = post_debt(client)
        body = client.get(f"/api/debts/{car['id']}").json()
        assert body["progress"] == "0.00"
        assert client.get("/api/debts/999").status_code == 404

    def test_create_validation(self, client):
        resp = client.post("/api/debts", json={"name": "Card", "initialAmount": 0})
        assert resp.status_code == 400
        assert resp.json()["field"] == "initialAmount"

    def test_payment_to_unknown_debt(self, client):
        resp = client.post(
            "/api/transactions",
            json={"type": "debt_payment", "category": "Loan", "amount": "5", "debtId": 77},
        )
        assert resp.status_code == 400
        assert resp.json()["field"] == "debtId"

    def test_delete_keeps_payments(self, client):
        car = seed_reference_data(client)

        assert client.delete(f"/api/debts/{car['id']}").status_code == 204
        assert client.get("/api/debts").json() == []

        payments = client.get("/api/transactions", params={"type": "debt_payment"}).json()
        assert len(payments) == 1
        assert payments[0]["debtId"] == car["id"]

        summary = client.get("/api/summary").json()
        assert summary["totalDebtPayments"] == "1000.00"
        assert summary["remainingDebt"] == "0.00"

    def test_delete_missing_succeeds(self, client):
        assert client.delete("/api/debts/999").status_code == 204


class TestInvestmentsApi:
    """/api/investments"""

    def test_create_and_list_with_roi(self, client):
        resp = client.post(
            "/api/investments",
            json={"name": "S&P 500 ETF", "investedAmount": "10000.00", "currentValue": "12500.00"},
        )
        assert resp.status_code == 201
        assert resp.json()["roi"] == "25.00"

        [inv] = client.get("/api/investments").json()
        assert inv["investedAmount"] == "10000.00"
        assert inv["currentValue"] == "12500.00"
        assert inv["roi"] == "25.00"
        assert "lastUpdated" in inv

    def test_zero_invested_roi(self, client):
        body = client.post(
            "/api/investments",
            json={"name": "Gift", "investedAmount": 0, "currentValue": "100"},
        ).json()
        assert body["roi"] == "0.00"

    def test_partial_update(self, client):
        inv = client.post(
            "/api/investments",
            json={"name": "ETF", "investedAmount": "100.00", "currentValue": "100.00"},
        ).json()

        resp = client.put(f"/api/investments/{inv['id']}", json={"currentValue": "150"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["name"] == "ETF"
        assert body["currentValue"] == "150.00"
        assert body["roi"] == "50.00"
        assert body["lastUpdated"] >= inv["lastUpdated"]

    def test_update_missing(self, client):
        resp = client.put("/api/investments/999", json={"name": "X"})
        assert resp.status_code == 404
        assert resp.json() == {"message": "Investment not found"}

    def test_update_validation(self, client):
        inv = client.post(
            "/api/investments",
            json={"name": "ETF", "investedAmount": "1", "currentValue": "1"},
        ).json()
        resp = client.put(f"/api/investments/{inv['id']}", json={"investedAmount": "-1"})
        assert resp.status_code == 400
        assert resp.json()["field"] == "investedAmount"

    def test_delete(self, client):
        inv = client.post(
            "/api/investments",
            json={"name": "ETF", "investedAmount": "1", "currentValue": "1"},
        ).json()
        assert client.delete(f"/api/investments/{inv['id']}").status_code == 204
        assert client.delete(f"/api/investments/{inv['id']}").status_code == 204
        assert client.get("/api/investments").json() == []


class TestPagesAndErrors:
    """Dashboard, landing, health and internal errors."""

    def test_root_redirects_to_dashboard(self, client):
        resp = client.get("/", follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == "/dashboard"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_dashboard_renders(self, client):
        seed_reference_data(client)
        resp = client.get("/dashboard")
        assert resp.status_code == 200
        assert "Cash Balance" in resp.text
        assert "4549.50" in resp.text
        assert "Car Loan" in resp.text
        assert "25.00%" in resp.text
        assert "2.00%" in resp.text

    def test_dashboard_recent_activity(self, client):
        for day in range(1, 8):
            post_tx(client, type="expense", category=f"Item {day}", amount="1", date=f"2025-03-0{day}")
        text = client.get("/dashboard").text
        for day in range(3, 8):
            assert f"Item {day}" in text
        assert "Item 1" not in text
        assert "Item 2" not in text
        assert text.index("Item 7") < text.index("Item 3")

    def test_internal_error_is_generic(self, client):
        class BrokenStore:
            def snapshot(self):
                raise InternalError("disk on fire")

        app.dependency_overrides[get_store] = lambda: BrokenStore()
        resp = client.get("/api/summary")
        assert resp.status_code == 500
        assert resp.json() == {"message": "Internal server error"}
