from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from budget_tracker.config import DEFAULT_CONFIG, _merge_defaults
from budget_tracker.stores.memory import MemoryStore
from webapp.main import create_app


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def client(store):
    config = _merge_defaults({"store": {"backend": "memory"}}, DEFAULT_CONFIG)
    return TestClient(create_app(config=config, store=store))


def _post_expense(client, **overrides):
    body = {
        "amount": 84.20,
        "description": "Grocery Shopping",
        "category": "Food & Dining",
        "date": datetime.now().isoformat(),
        "isExpense": True,
    }
    body.update(overrides)
    return client.post("/api/transactions", json=body)


def test_create_list_and_get_transaction(client):
    res = _post_expense(client, isRecurring=True)
    assert res.status_code == 201
    created = res.json()
    assert created["id"] == 1
    assert created["amount"] == 84.2
    assert created["isExpense"] is True
    assert created["userId"] == 1
    assert "isRecurring" not in created

    listed = client.get("/api/transactions").json()
    assert [tx["id"] for tx in listed] == [1]
    assert client.get("/api/transactions/1").json()["description"] == "Grocery Shopping"


def test_transaction_validation_errors(client):
    res = _post_expense(client, amount=-3)
    assert res.status_code == 400
    assert res.json() == {"message": "Amount must be positive"}

    res = _post_expense(client, description="ab")
    assert res.status_code == 400
    assert "at least 3" in res.json()["message"]


def test_update_and_delete_transaction(client):
    _post_expense(client)
    res = client.put("/api/transactions/1", json={"amount": "90.10", "category": "Shopping"})
    assert res.status_code == 200
    assert res.json()["amount"] == 90.1
    assert res.json()["category"] == "Shopping"
    assert res.json()["description"] == "Grocery Shopping"

    assert client.delete("/api/transactions/1").status_code == 204
    missing = client.get("/api/transactions/1")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Transaction not found"}
    assert client.delete("/api/transactions/1").status_code == 404
    assert client.put("/api/transactions/1", json={"amount": 5}).status_code == 404


def test_budget_routes(client):
    res = client.post("/api/budgets", json={"category": "Food & Dining", "amount": 500, "period": "monthly"})
    assert res.status_code == 201
    assert res.json()["period"] == "monthly"

    bad = client.post("/api/budgets", json={"category": "Travel", "amount": 50, "period": "weekly"})
    assert bad.status_code == 400
    assert bad.json()["message"] == "Period must be monthly, quarterly, or yearly"

    updated = client.put("/api/budgets/1", json={"amount": 650})
    assert updated.json()["amount"] == 650.0
    assert client.get("/api/budgets").json()[0]["amount"] == 650.0

    assert client.delete("/api/budgets/1").status_code == 204
    assert client.get("/api/budgets/1").status_code == 404


def test_dashboard_endpoint(client):
    now = datetime.now()
    _post_expense(client, date=now.isoformat())
    _post_expense(client, amount=56.80, description="Restaurant Dinner",
                  date=now.isoformat())
    client.post("/api/budgets", json={"category": "Food & Dining", "amount": 500, "period": "monthly"})

    payload = client.get("/api/dashboard").json()
    assert payload["categoryExpenses"] == {"Food & Dining": 141.0}
    assert payload["monthlyExpenses"] == 141.0
    assert payload["budgetUsed"] == 28
    assert payload["budgetStatus"] == [
        {"category": "Food & Dining", "budgeted": 500.0, "spent": 141.0,
         "percentage": 28, "isOverBudget": False}
    ]
    assert [tx["description"] for tx in payload["recentTransactions"]] == [
        "Grocery Shopping", "Restaurant Dinner",
    ]


def test_utc_dates_do_not_break_summaries(client):
    _post_expense(client)
    utc_now = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")
    res = _post_expense(client, amount=20, description="Online order", date=utc_now)
    assert res.status_code == 201

    dashboard = client.get("/api/dashboard")
    assert dashboard.status_code == 200
    assert dashboard.json()["totalExpenses"] == 104.2

    report = client.get("/api/reports", params={"window": "last-quarter"})
    assert report.status_code == 200
    assert report.json()["totalExpenses"] == 104.2


def test_out_of_range_amount_is_rejected(client):
    res = _post_expense(client, amount="1e400")
    assert res.status_code == 400
    assert res.json() == {"message": "Amount must be a number"}
    assert client.get("/api/transactions").json() == []


def test_dashboard_without_budgets(client):
    payload = client.get("/api/dashboard").json()
    assert payload["budgetUsed"] == 0
    assert payload["budgetTotal"] == 0.0
    assert payload["recentTransactions"] == []


def test_reports_and_cash_flow(client):
    _post_expense(client)
    report = client.get("/api/reports", params={"window": "last-30-days"}).json()
    assert report["window"] == "last-30-days"
    assert report["totalExpenses"] == 84.2
    assert report["netSavingsPercentage"] is None

    everything = client.get("/api/reports", params={"window": "everything"}).json()
    assert everything["label"] == "All Time"
    assert everything["totalExpenses"] == 84.2

    series = client.get("/api/charts/cash-flow").json()
    assert len(series) == 1
    assert series[0]["expenses"] == 84.2


def test_categories(client):
    cats = client.get("/api/categories").json()
    assert cats["income"][0] == "Salary"
    assert "Bills & Utilities" in cats["expense"]


def test_seeded_app(tmp_path):
    config = _merge_defaults(
        {"store": {"backend": "sqlite", "db_path": str(tmp_path / "demo.db")}, "seed_demo_data": True},
        DEFAULT_CONFIG,
    )
    client = TestClient(create_app(config=config))
    payload = client.get("/api/dashboard").json()
    assert payload["budgetTotal"] == 1700.0
    assert len(payload["recentTransactions"]) == 5
