# retailpulse/routes/inventory.py
"""
Derived stock views for the inventory dashboard.

Each endpoint re-reads the catalog and sales history and classifies from
scratch; nothing is cached between requests.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.enums import UserRole
from retailpulse.core.exceptions import NotFoundError, ValidationError
from retailpulse.core.security import get_request_context, require_roles_context
from retailpulse.dependencies import RequestContext
from retailpulse.integrations.database_source import DatabaseCatalogSource
from retailpulse.schemas.inventory import InventorySummary, StockDecrease, StockItem, StockUpdate
from retailpulse.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/inventory", tags=["inventory"])


def inventory_for(ctx: RequestContext) -> InventoryService:
    return InventoryService(DatabaseCatalogSource(ctx.db))


@router.get("", response_model=List[StockItem])
async def list_stock(category: Optional[str] = None, ctx: RequestContext = Depends(get_request_context)):
    return await inventory_for(ctx).get_by_category(category, now=ctx.now)


@router.get("/summary", response_model=InventorySummary)
async def stock_summary(ctx: RequestContext = Depends(get_request_context)):
    return await inventory_for(ctx).get_summary(now=ctx.now)


@router.get("/low-stock", response_model=List[StockItem])
async def low_stock(ctx: RequestContext = Depends(get_request_context)):
    return await inventory_for(ctx).get_low_stock(now=ctx.now)


@router.get("/out-of-stock", response_model=List[StockItem])
async def out_of_stock(ctx: RequestContext = Depends(get_request_context)):
    return await inventory_for(ctx).get_out_of_stock(now=ctx.now)


@router.get("/dead-stock", response_model=List[StockItem])
async def dead_stock(ctx: RequestContext = Depends(get_request_context)):
    return await inventory_for(ctx).get_dead_stock(now=ctx.now)


@router.put("/{product_id}/stock", response_model=Optional[StockItem])
async def update_stock(
    product_id: int,
    body: StockUpdate,
    ctx: RequestContext = Depends(require_roles_context(UserRole.ADMIN, UserRole.OWNER)),
):
    """Set absolute stock. Returns the re-classified item, or null for an inactive product."""
    try:
        return await inventory_for(ctx).update_stock(product_id, body.stock, now=ctx.now, user_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{product_id}/decrease")
async def decrease_stock(product_id: int, body: StockDecrease, ctx: RequestContext = Depends(get_request_context)):
    try:
        stock = await inventory_for(ctx).decrease_stock(product_id, body.quantity, user_id=ctx.user_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if stock is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"product_id": product_id, "stock": stock}
