# tests/unit/integrations/test_api_source.py
import json
import pytest
import httpx
from datetime import datetime, timezone

from retailpulse.core.exceptions import CatalogFetchError, ProductNotFoundError
from retailpulse.integrations.api_source import ApiCatalogSource

PRODUCTS = [
    {"id": 1, "name": "Rice 5kg", "category": "Grocery", "stock": 0, "cost_price": 300.0, "is_active": True},
    {"id": 2, "name": "Milk", "category": "Dairy", "stock": 8, "cost_price": 25.5, "is_active": False,
     "sku": "MLK-1", "selling_price": 30.0},
]
TRANSACTIONS = [
    {"id": 10, "created_at": "2026-03-14T09:30:00+00:00", "invoice_number": "INV-1",
     "items": [{"product_id": 1, "quantity": 2}, {"product_id": 2, "quantity": 1}]},
    {"id": 11, "created_at": None, "items": []},
]


def make_handler(calls, overrides=None):
    overrides = overrides or {}

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        key = (request.method, request.url.path)
        if key in overrides:
            return overrides[key](request)
        if key == ("GET", "/api/products"):
            return httpx.Response(200, json=PRODUCTS)
        if key == ("GET", "/api/transactions"):
            return httpx.Response(200, json=TRANSACTIONS)
        return httpx.Response(404, json={"detail": "not found"})

    return handler


@pytest.mark.asyncio
async def test_fetch_snapshot_parses_products_and_transactions():
    calls = []
    source = ApiCatalogSource("http://shop.test/", auth=("owner", "pw"), transport=httpx.MockTransport(make_handler(calls)))

    snapshot = await source.fetch_snapshot()

    assert sorted(r.url.path for r in calls) == ["/api/products", "/api/transactions"]
    assert all(r.headers["authorization"].startswith("Basic ") for r in calls)

    assert [p.id for p in snapshot.products] == [1, 2]
    assert snapshot.products[1].is_active is False
    assert snapshot.products[1].cost_price == 25.5

    assert snapshot.sales[0].product_ids == (1, 2)
    assert snapshot.sales[0].created_at == datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)
    assert snapshot.sales[1].created_at is None
    assert snapshot.source == "http://shop.test"
    assert snapshot.taken_at.tzinfo is not None


@pytest.mark.asyncio
async def test_fetch_snapshot_error_status_raises():
    overrides = {("GET", "/api/transactions"): lambda r: httpx.Response(500, text="boom")}
    source = ApiCatalogSource("http://shop.test", transport=httpx.MockTransport(make_handler([], overrides)))

    with pytest.raises(CatalogFetchError):
        await source.fetch_snapshot()


@pytest.mark.asyncio
async def test_transport_errors_propagate_unchanged():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    source = ApiCatalogSource("http://shop.test", transport=httpx.MockTransport(handler))

    with pytest.raises(httpx.ConnectError):
        await source.fetch_snapshot()


@pytest.mark.asyncio
async def test_set_stock_puts_absolute_level():
    calls = []
    overrides = {("PUT", "/api/products/2"): lambda r: httpx.Response(200, json={"id": 2, "stock": 40})}
    source = ApiCatalogSource("http://shop.test", transport=httpx.MockTransport(make_handler(calls, overrides)))

    await source.set_stock(2, 40)

    assert json.loads(calls[0].content) == {"stock": 40}


@pytest.mark.asyncio
async def test_set_stock_unknown_product():
    source = ApiCatalogSource("http://shop.test", transport=httpx.MockTransport(make_handler([])))
    with pytest.raises(ProductNotFoundError):
        await source.set_stock(99, 1)


@pytest.mark.asyncio
async def test_decrease_stock_returns_new_level():
    calls = []
    overrides = {
        ("POST", "/api/inventory/1/decrease"): lambda r: httpx.Response(200, json={"product_id": 1, "stock": 0}),
    }
    source = ApiCatalogSource("http://shop.test", transport=httpx.MockTransport(make_handler(calls, overrides)))

    assert await source.decrease_stock(1, 5) == 0
    assert json.loads(calls[0].content) == {"quantity": 5}


@pytest.mark.asyncio
async def test_decrease_stock_unknown_product_returns_none():
    source = ApiCatalogSource("http://shop.test", transport=httpx.MockTransport(make_handler([])))
    assert await source.decrease_stock(99, 1) is None
