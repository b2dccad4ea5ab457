# retailpulse/routes/sms.py
import logging

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.enums import UserRole
from retailpulse.core.security import require_roles_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.sms import SmsSendRequest, SmsSendResponse
from retailpulse.services.sms_notifier import SmsNotifier

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sms", tags=["sms"])


@router.post("/send", response_model=SmsSendResponse)
async def send_sms(
    body: SmsSendRequest,
    ctx: RequestContext = Depends(require_roles_context(UserRole.ADMIN, UserRole.OWNER)),
):
    """Send a free-form SMS; delivery is best effort"""
    phone = (body.phone or "").strip()
    message = (body.message or "").strip()
    if not phone or not message:
        raise HTTPException(status_code=400, detail="Phone and message required")

    sent = await SmsNotifier().send(phone, message)
    if not sent:
        logger.warning(f"Manual SMS from user {ctx.user_id} was not delivered")
    return SmsSendResponse(message="SMS sent successfully" if sent else "SMS could not be sent", sent=sent)
