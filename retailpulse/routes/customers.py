from typing import List

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.exceptions import NotFoundError, ValidationError
from retailpulse.core.security import get_request_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.customer import CustomerRead, CustomerUpsert, LoyaltyUpdate, RedeemRequest, RedeemResult
from retailpulse.services.customer_service import CustomerService

router = APIRouter(prefix="/api/customers", tags=["customers"])


@router.get("", response_model=List[CustomerRead])
async def list_customers(ctx: RequestContext = Depends(get_request_context)):
    return await CustomerService(ctx.db).list_customers()


@router.get("/search", response_model=List[CustomerRead])
async def search_customers(q: str = "", ctx: RequestContext = Depends(get_request_context)):
    return await CustomerService(ctx.db).search(q)


@router.post("/upsert", response_model=CustomerRead)
async def upsert_customer(data: CustomerUpsert, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await CustomerService(ctx.db).upsert(data)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{customer_id}", response_model=CustomerRead)
async def get_customer(customer_id: int, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await CustomerService(ctx.db).get_customer(customer_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")


@router.post("/{customer_id}/loyalty", response_model=CustomerRead)
async def update_loyalty(customer_id: int, data: LoyaltyUpdate, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await CustomerService(ctx.db).update_loyalty(customer_id, data)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")


@router.post("/{customer_id}/redeem", response_model=RedeemResult)
async def redeem_points(customer_id: int, data: RedeemRequest, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await CustomerService(ctx.db).redeem(customer_id, data.points, data.bill_amount)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
