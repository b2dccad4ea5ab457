# tests/test_routes/test_sms_routes.py
import pytest
from unittest.mock import AsyncMock

from retailpulse.core.enums import UserRole
from retailpulse.routes import sms as sms_routes


@pytest.fixture
def notifier(mocker):
    instance = mocker.Mock()
    instance.send = AsyncMock(return_value=True)
    mocker.patch.object(sms_routes, "SmsNotifier", return_value=instance)
    return instance


@pytest.mark.asyncio
async def test_send_sms(client, notifier):
    response = await client.post("/api/sms/send", json={"phone": "9876543210", "message": "Shop closed today"})

    assert response.status_code == 200
    assert response.json() == {"message": "SMS sent successfully", "sent": True}
    notifier.send.assert_awaited_once_with("9876543210", "Shop closed today")


@pytest.mark.asyncio
async def test_undelivered_sms_is_reported(client, notifier):
    notifier.send.return_value = False

    response = await client.post("/api/sms/send", json={"phone": "9876543210", "message": "hi"})

    assert response.status_code == 200
    assert response.json()["sent"] is False


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"phone": "9876543210"},
    {"message": "hi"},
    {"phone": " ", "message": "hi"},
])
async def test_phone_and_message_required(client, notifier, payload):
    response = await client.post("/api/sms/send", json=payload)

    assert response.status_code == 400
    assert response.json()["detail"] == "Phone and message required"
    notifier.send.assert_not_awaited()


@pytest.mark.asyncio
async def test_cashier_cannot_send_sms(client, make_user, notifier):
    await make_user("till@test.local", "till-pass", role=UserRole.CASHIER)

    response = await client.post(
        "/api/sms/send",
        json={"phone": "9876543210", "message": "hi"},
        auth=("till@test.local", "till-pass"),
    )

    assert response.status_code == 403
    notifier.send.assert_not_awaited()
