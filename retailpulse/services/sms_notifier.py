"""
Outbound SMS through the Twilio Messages REST API.

Sending is best effort: when Twilio is not configured, or the request fails, the
message is logged and ``send`` returns False. Callers never see an exception.
"""

import logging
import re
from typing import Optional

import httpx

from retailpulse.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class SmsNotifier:

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(
            self.settings.TWILIO_ACCOUNT_SID
            and self.settings.TWILIO_AUTH_TOKEN
            and self.settings.TWILIO_FROM_NUMBER
        )

    def format_number(self, phone: str) -> str:
        """+... is kept, 10 digits get the default country code, anything else is prefixed with +"""
        phone = (phone or "").strip()
        if phone.startswith("+"):
            return phone
        digits = re.sub(r"\D", "", phone)
        if len(digits) == 10:
            return f"+{self.settings.SMS_DEFAULT_COUNTRY_CODE}{digits}"
        return f"+{digits}"

    async def send(self, to: str, body: str) -> bool:
        if not to:
            logger.warning("SMS skipped: no recipient")
            return False

        number = self.format_number(to)
        if not self.configured:
            logger.info(f"SMS not configured, would send to {number}: {body}")
            return False

        sid = self.settings.TWILIO_ACCOUNT_SID
        url = f"{self.settings.TWILIO_API_URL.rstrip('/')}/Accounts/{sid}/Messages.json"
        try:
            async with httpx.AsyncClient(timeout=15.0, transport=self._transport) as client:
                response = await client.post(
                    url,
                    auth=(sid, self.settings.TWILIO_AUTH_TOKEN),
                    data={"To": number, "From": self.settings.TWILIO_FROM_NUMBER, "Body": body},
                )
            if response.status_code >= 400:
                logger.error(f"Twilio rejected SMS to {number}: {response.status_code} {response.text}")
                return False
        except httpx.HTTPError as e:
            logger.error(f"SMS to {number} failed: {str(e)}")
            return False

        try:
            message_sid = response.json().get("sid")
        except (ValueError, AttributeError):
            message_sid = None
        logger.info(f"SMS sent to {number}: {message_sid or response.text[:80]}")
        return True

    async def send_alert(self, body: str) -> bool:
        """Send to the shop's configured alert phone"""
        return await self.send(self.settings.ALERT_PHONE or "", body)
