# retailpulse/routes/transactions.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.enums import UserRole
from retailpulse.core.exceptions import NotFoundError, NotificationError, ValidationError
from retailpulse.core.security import get_request_context, require_roles_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.transaction import BulkDeleteRequest, TransactionCreate, TransactionRead
from retailpulse.services.billing_service import BillingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.post("", response_model=TransactionRead, status_code=201)
async def create_transaction(data: TransactionCreate, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await BillingService(ctx.db).create_transaction(data, user_id=ctx.user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[TransactionRead])
async def list_transactions(ctx: RequestContext = Depends(get_request_context)):
    return await BillingService(ctx.db).list_transactions()


@router.post("/bulk-delete")
async def bulk_delete(body: BulkDeleteRequest, ctx: RequestContext = Depends(require_roles_context(UserRole.OWNER))):
    try:
        deleted = await BillingService(ctx.db).bulk_delete(body.ids, user_id=ctx.user_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"deleted": deleted}


@router.get("/{transaction_id}", response_model=TransactionRead)
async def get_transaction(transaction_id: int, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await BillingService(ctx.db).get_transaction(transaction_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")


@router.post("/{transaction_id}/send-sms")
async def send_receipt(
    transaction_id: int,
    ctx: RequestContext = Depends(require_roles_context(UserRole.OWNER, UserRole.ADMIN, UserRole.CASHIER)),
):
    try:
        await BillingService(ctx.db).send_receipt(transaction_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotificationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Receipt sent via SMS"}
