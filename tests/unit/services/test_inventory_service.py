# tests/unit/services/test_inventory_service.py
import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import AsyncMock

from sqlalchemy import select

from retailpulse.core.enums import PaymentMethod, StockStatus
from retailpulse.core.exceptions import ProductNotFoundError, ValidationError
from retailpulse.integrations.base import CatalogSnapshot, ProductRecord, SaleRecord
from retailpulse.integrations.database_source import DatabaseCatalogSource
from retailpulse.models.audit_log import AuditLog
from retailpulse.models.product import Product
from retailpulse.models.transaction import Transaction, TransactionItem
from retailpulse.services.inventory_service import InventoryService

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


async def add_sale(db, when, *products):
    tx = Transaction(
        invoice_number=f"INV-TEST-{when.timestamp()}-{products[0].id}",
        subtotal=10.0,
        total_amount=10.0,
        payment_method=PaymentMethod.CASH,
        created_at=when,
        items=[
            TransactionItem(position=i, product_id=p.id, product_name=p.name, quantity=1, unit_price=10.0, subtotal=10.0)
            for i, p in enumerate(products)
        ],
    )
    db.add(tx)
    await db.commit()
    return tx


# --- against a stub source ---

@pytest.fixture
def stub_source():
    source = AsyncMock()
    source.fetch_snapshot.return_value = CatalogSnapshot(
        products=[
            ProductRecord(id=1, name="A", category="X", stock=0, cost_price=1.0),
            ProductRecord(id=2, name="B", category="X", stock=5, cost_price=1.0),
            ProductRecord(id=3, name="C", category="Y", stock=50, cost_price=1.0),
            ProductRecord(id=4, name="D", category="Y", stock=50, cost_price=1.0),
        ],
        sales=[
            SaleRecord(id=1, created_at=NOW - timedelta(days=1), product_ids=(2,)),
            SaleRecord(id=2, created_at=NOW - timedelta(days=40), product_ids=(3,)),
            SaleRecord(id=3, created_at=NOW - timedelta(days=2), product_ids=(4,)),
        ],
        taken_at=NOW,
    )
    return source


@pytest.mark.asyncio
async def test_filtered_views_each_refetch(stub_source):
    service = InventoryService(stub_source)

    assert [i.id for i in await service.get_out_of_stock()] == [1]
    assert [i.id for i in await service.get_low_stock()] == [2]
    assert [i.id for i in await service.get_dead_stock()] == [3]
    assert stub_source.fetch_snapshot.await_count == 3


@pytest.mark.asyncio
async def test_summary_uses_snapshot_time_by_default(stub_source):
    summary = await InventoryService(stub_source).get_summary()
    assert summary.dead_stock_products == 1
    assert summary.healthy_stock_products == 1


@pytest.mark.asyncio
async def test_explicit_now_overrides_snapshot_time(stub_source):
    # 60 days later nothing has been sold recently
    items = await InventoryService(stub_source).get_all(now=NOW + timedelta(days=60))
    assert {i.id: i.status for i in items}[4] == StockStatus.DEAD


@pytest.mark.asyncio
async def test_get_by_category(stub_source):
    items = await InventoryService(stub_source).get_by_category("Y")
    assert [i.id for i in items] == [3, 4]


@pytest.mark.asyncio
async def test_fetch_errors_propagate(stub_source):
    stub_source.fetch_snapshot.side_effect = ConnectionError("down")
    with pytest.raises(ConnectionError):
        await InventoryService(stub_source).get_all()


@pytest.mark.asyncio
async def test_negative_values_rejected(stub_source):
    service = InventoryService(stub_source)
    with pytest.raises(ValidationError):
        await service.update_stock(1, -1)
    with pytest.raises(ValidationError):
        await service.decrease_stock(1, -2)
    stub_source.set_stock.assert_not_awaited()
    stub_source.decrease_stock.assert_not_awaited()


# --- against the database ---

@pytest.mark.asyncio
async def test_database_snapshot_classifies_sales(db_session, make_product):
    recent = await make_product("Recent", stock=40)
    stale = await make_product("Stale", stock=40)
    await make_product("Retired", stock=40, is_active=False)
    now = datetime.now(timezone.utc)
    await add_sale(db_session, now - timedelta(days=3), recent)
    await add_sale(db_session, now - timedelta(days=45), stale, recent)

    items = await InventoryService(DatabaseCatalogSource(db_session)).get_all(now=now)
    by_name = {i.name: i for i in items}

    assert set(by_name) == {"Recent", "Stale"}
    assert by_name["Recent"].status == StockStatus.HEALTHY
    assert by_name["Stale"].status == StockStatus.DEAD
    assert by_name["Recent"].last_sold == now - timedelta(days=3)


@pytest.mark.asyncio
async def test_decrease_stock_never_goes_negative(db_session, make_product):
    product = await make_product(stock=3)

    new_stock = await InventoryService(DatabaseCatalogSource(db_session)).decrease_stock(product.id, 5)

    assert new_stock == 0
    assert await db_session.scalar(select(Product.stock).where(Product.id == product.id)) == 0


@pytest.mark.asyncio
async def test_decrease_stock_subtracts(db_session, make_product):
    product = await make_product(stock=12)
    assert await InventoryService(DatabaseCatalogSource(db_session)).decrease_stock(product.id, 5) == 7


@pytest.mark.asyncio
async def test_decrease_stock_unknown_product_is_a_no_op(db_session):
    assert await InventoryService(DatabaseCatalogSource(db_session)).decrease_stock(999, 1) is None
    assert (await db_session.execute(select(Product))).scalars().all() == []


@pytest.mark.asyncio
async def test_update_stock_returns_reclassified_item(db_session, make_product):
    product = await make_product(stock=50)

    item = await InventoryService(DatabaseCatalogSource(db_session)).update_stock(product.id, 4, user_id=7)

    assert item.id == product.id
    assert item.stock == 4
    assert item.status == StockStatus.LOW

    log = (await db_session.execute(select(AuditLog))).scalars().one()
    assert log.action == "stock"
    assert log.user_id == 7
    assert log.details["old_values"] == {"stock": 50}
    assert log.details["new_values"] == {"stock": 4}


@pytest.mark.asyncio
async def test_update_stock_inactive_product_returns_none(db_session, make_product):
    product = await make_product(stock=50, is_active=False)
    assert await InventoryService(DatabaseCatalogSource(db_session)).update_stock(product.id, 10) is None


@pytest.mark.asyncio
async def test_update_stock_missing_product_raises(db_session):
    with pytest.raises(ProductNotFoundError):
        await InventoryService(DatabaseCatalogSource(db_session)).update_stock(404, 10)
