# tests/test_routes/test_expense_routes.py
import pytest

from retailpulse.core.enums import UserRole

EXPENSE = {
    "category": "Utilities",
    "description": "Electricity bill",
    "amount": 2400.5,
    "expense_date": "2026-03-05",
    "payment_method": "upi",
}


@pytest.mark.asyncio
async def test_expense_crud(client):
    created = await client.post("/api/expenses", json=EXPENSE)
    assert created.status_code == 201
    expense_id = created.json()["id"]
    assert created.json()["created_by"] is not None

    await client.post("/api/expenses", json={**EXPENSE, "expense_date": "2026-03-09", "amount": 90})
    listed = (await client.get("/api/expenses")).json()
    assert [e["expense_date"] for e in listed] == ["2026-03-09", "2026-03-05"]

    updated = await client.put(f"/api/expenses/{expense_id}", json={"amount": 2500})
    assert updated.json()["amount"] == 2500
    assert updated.json()["category"] == "Utilities"

    assert (await client.delete(f"/api/expenses/{expense_id}")).status_code == 200
    assert (await client.get(f"/api/expenses/{expense_id}")).status_code == 404

    actions = [log["action_type"] for log in (await client.get("/api/admin/audit-logs")).json()]
    assert sorted(actions) == ["create", "create", "delete", "update"]


@pytest.mark.asyncio
async def test_negative_amount_rejected(client):
    assert (await client.post("/api/expenses", json={**EXPENSE, "amount": -1})).status_code == 422


@pytest.mark.asyncio
async def test_missing_expense(client):
    assert (await client.put("/api/expenses/5", json={"amount": 1})).status_code == 404
    assert (await client.delete("/api/expenses/5")).status_code == 404


@pytest.mark.asyncio
async def test_alert_routes(client, make_product, make_user):
    await make_product("Matches", stock=2)

    result = await client.post("/api/stock-alerts/check")
    assert result.status_code == 200
    assert result.json()["low_stock_alerts"] == 1

    alerts = (await client.get("/api/stock-alerts")).json()
    assert alerts[0]["alert_type"] == "low_stock"
    assert alerts[0]["product"]["name"] == "Matches"

    assert (await client.post(f"/api/stock-alerts/{alerts[0]['id']}/acknowledge")).status_code == 200
    assert (await client.get("/api/stock-alerts")).json()[0]["acknowledged"] is True
    assert (await client.post("/api/stock-alerts/999/acknowledge")).status_code == 404

    await make_user("till@test.local", "till-pass", role=UserRole.CASHIER)
    assert (await client.get("/api/stock-alerts", auth=("till@test.local", "till-pass"))).status_code == 403
