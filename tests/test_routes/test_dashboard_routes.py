# tests/test_routes/test_dashboard_routes.py
import pytest


@pytest.mark.asyncio
async def test_dashboard_endpoints_respond(client, sales_history):
    stats = await client.get("/api/dashboard/stats")
    assert stats.status_code == 200
    assert set(stats.json()) >= {"today_revenue", "monthly_revenue", "net_profit", "low_stock_count"}

    daily = (await client.get("/api/dashboard/revenue-trend")).json()
    monthly = (await client.get("/api/dashboard/revenue-trend", params={"view": "monthly"})).json()
    assert len(daily) == 14
    assert len(monthly) == 12

    assert (await client.get("/api/dashboard/top-products", params={"limit": 0})).status_code == 422
    assert (await client.get("/api/dashboard/category-sales")).status_code == 200
    assert (await client.get("/api/dashboard/expenses-by-category")).status_code == 200


@pytest.mark.asyncio
@pytest.mark.parametrize("path", [
    "/api/analytics/summary",
    "/api/analytics/product-sales",
    "/api/analytics/category-profit",
    "/api/analytics/daily-revenue",
    "/api/analytics/payment-methods",
])
@pytest.mark.parametrize("period", ["today", "week", "month"])
async def test_analytics_endpoints_respond(client, sales_history, path, period):
    response = await client.get(path, params={"period": period})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_analytics_rejects_unknown_period(client):
    assert (await client.get("/api/analytics/summary", params={"period": "decade"})).status_code == 422


@pytest.mark.asyncio
async def test_customer_routes(client):
    created = (await client.post("/api/customers/upsert", json={"mobile": "9444444444", "name": "Farah"})).json()

    assert (await client.get("/api/customers/search", params={"q": "944"})).json()[0]["id"] == created["id"]
    assert (await client.get(f"/api/customers/{created['id']}")).json()["tier"] == "Bronze"

    loyalty = await client.post(f"/api/customers/{created['id']}/loyalty", json={"credit_points": 80})
    assert loyalty.json()["credit_points"] == 80

    redeem = await client.post(f"/api/customers/{created['id']}/redeem", json={"points": 80, "bill_amount": 500})
    assert redeem.json() == {"discount": 50.0, "points_used": 50}

    assert (await client.post(f"/api/customers/{created['id']}/redeem",
                              json={"points": 81, "bill_amount": 500})).status_code == 400
    assert (await client.get("/api/customers/4040")).status_code == 404
