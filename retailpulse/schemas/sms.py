from typing import Optional

from retailpulse.schemas.base import BaseSchema


class SmsSendRequest(BaseSchema):
    # Both optional so a missing field answers 400 rather than a 422 validation body
    phone: Optional[str] = None
    message: Optional[str] = None


class SmsSendResponse(BaseSchema):
    message: str
    sent: bool
