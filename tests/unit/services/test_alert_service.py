# tests/unit/services/test_alert_service.py
import pytest
from datetime import date
from unittest.mock import AsyncMock

import httpx

from sqlalchemy import select, update

from retailpulse.core.config import Settings
from retailpulse.core.enums import AlertType
from retailpulse.core.exceptions import AlertNotFoundError
from retailpulse.models.product import Product
from retailpulse.models.stock_alert import StockAlert
from retailpulse.services.alert_service import AlertService
from retailpulse.services.sms_notifier import SmsNotifier

TODAY = date(2026, 3, 15)


@pytest.fixture
def notifier():
    mock = AsyncMock()
    mock.send_alert.return_value = True
    return mock


async def set_stock(db, product_id, stock):
    await db.execute(update(Product).where(Product.id == product_id).values(stock=stock))
    await db.commit()


@pytest.mark.asyncio
async def test_low_stock_alerts_once_until_restocked(db_session, notifier, make_product):
    product = await make_product("Soap", stock=3, sku="SOAP-1")
    service = AlertService(db_session, notifier)

    assert await service.check_low_stock() == (1, 0)
    notifier.send_alert.assert_awaited_once_with("Low stock: Soap (SKU SOAP-1) remaining 3")

    assert await service.check_low_stock() == (0, 0)

    await set_stock(db_session, product.id, 20)
    assert await service.check_low_stock() == (0, 1)

    await set_stock(db_session, product.id, 2)
    assert await service.check_low_stock() == (1, 0)
    assert notifier.send_alert.await_count == 2


@pytest.mark.asyncio
async def test_out_of_stock_alert(db_session, notifier, make_product):
    await make_product("Salt", stock=0)
    await make_product("Sugar", stock=40)
    service = AlertService(db_session, notifier)

    await service.check_low_stock()

    alerts = await service.list_alerts()
    assert len(alerts) == 1
    assert alerts[0].alert_type == AlertType.OUT_OF_STOCK
    assert alerts[0].product.name == "Salt"
    assert alerts[0].sms_sent is True
    assert notifier.send_alert.await_args.args[0].startswith("Out of stock: Salt")


@pytest.mark.asyncio
async def test_inactive_products_are_not_alerted(db_session, notifier, make_product):
    await make_product(stock=0, is_active=False)
    assert await AlertService(db_session, notifier).check_low_stock() == (0, 0)
    notifier.send_alert.assert_not_awaited()


@pytest.mark.asyncio
async def test_unsent_sms_is_recorded(db_session, notifier, make_product):
    notifier.send_alert.return_value = False
    await make_product(stock=1)

    await AlertService(db_session, notifier).check_low_stock()

    alert = (await db_session.execute(select(StockAlert))).scalars().one()
    assert alert.sms_sent is False
    assert alert.sms_sent_at is None


@pytest.mark.asyncio
async def test_expired_products_are_deactivated(db_session, notifier, make_product):
    expired = await make_product("Yogurt", stock=30, expiry_date=date(2026, 3, 14))
    await make_product("Cheese", stock=30, expiry_date=date(2026, 3, 17))
    await make_product("Honey", stock=30, expiry_date=date(2026, 9, 1))
    service = AlertService(db_session, notifier)

    assert await service.check_expired_products(today=TODAY) == (1, 1)

    assert await db_session.scalar(select(Product.is_active).where(Product.id == expired.id)) is False
    messages = [c.args[0] for c in notifier.send_alert.await_args_list]
    assert messages == [
        "Expired products deactivated: Yogurt",
        "Products expiring soon: Cheese (2026-03-17)",
    ]
    alerts = await service.list_alerts()
    assert {a.alert_type for a in alerts} == {AlertType.EXPIRY}
    assert len(alerts) == 2


@pytest.mark.asyncio
async def test_expiring_products_are_alerted_once_a_day(db_session, notifier, make_product):
    await make_product("Cheese", stock=30, expiry_date=date(2026, 3, 16))
    service = AlertService(db_session, notifier)

    await service.check_expired_products(today=TODAY)
    assert await service.check_expired_products(today=TODAY) == (0, 1)

    assert len((await db_session.execute(select(StockAlert))).scalars().all()) == 1


@pytest.mark.asyncio
async def test_run_checks(db_session, notifier, make_product):
    await make_product(stock=2)
    result = await AlertService(db_session, notifier).run_checks()

    assert result.low_stock_alerts == 1
    assert result.resolved_alerts == 0
    assert result.expired_products == 0


@pytest.mark.asyncio
async def test_plain_text_sms_reply_does_not_abort_checks(db_session, make_product):
    expired_id = (await make_product("Yogurt", stock=30, expiry_date=date(2000, 1, 1))).id
    settings = Settings(
        TWILIO_ACCOUNT_SID="AC123",
        TWILIO_AUTH_TOKEN="token",
        TWILIO_FROM_NUMBER="+15550001111",
        ALERT_PHONE="9876543210",
    )
    notifier = SmsNotifier(settings, transport=httpx.MockTransport(lambda r: httpx.Response(201, text="OK")))

    result = await AlertService(db_session, notifier).run_checks()

    assert result.expired_products == 1
    assert await db_session.scalar(select(Product.is_active).where(Product.id == expired_id)) is False


@pytest.mark.asyncio
async def test_acknowledge(db_session, notifier, make_product):
    await make_product(stock=2)
    service = AlertService(db_session, notifier)
    await service.check_low_stock()
    alert = (await service.list_alerts())[0]

    acknowledged = await service.acknowledge(alert.id, user_id=5)
    assert acknowledged.acknowledged is True
    assert acknowledged.acknowledged_at is not None

    with pytest.raises(AlertNotFoundError):
        await service.acknowledge(999)
