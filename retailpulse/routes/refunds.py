from typing import List

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.exceptions import NotFoundError, ValidationError
from retailpulse.core.security import get_request_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.refund import RefundCreate, RefundRead
from retailpulse.services.refund_service import RefundService

router = APIRouter(prefix="/api/refunds", tags=["refunds"])


@router.post("", response_model=RefundRead, status_code=201)
async def create_refund(data: RefundCreate, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await RefundService(ctx.db).create_refund(data, user_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Transaction not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=List[RefundRead])
async def list_refunds(ctx: RequestContext = Depends(get_request_context)):
    return await RefundService(ctx.db).list_refunds()


@router.get("/transaction/{transaction_id}", response_model=RefundRead)
async def refund_for_transaction(transaction_id: int, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await RefundService(ctx.db).get_for_transaction(transaction_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Refund not found")
