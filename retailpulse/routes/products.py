# retailpulse/routes/products.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.enums import UserRole
from retailpulse.core.exceptions import NotFoundError, ProductCreationError, ValidationError
from retailpulse.core.security import get_request_context, require_roles_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.product import (
    BulkImportResult,
    CategoryGSTRead,
    CategoryGSTUpdate,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)
from retailpulse.services.product_service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

managers = require_roles_context(UserRole.ADMIN, UserRole.OWNER)


@router.get("", response_model=List[ProductRead])
async def list_products(search: Optional[str] = None, ctx: RequestContext = Depends(get_request_context)):
    return await ProductService(ctx.db).list_products(search)


@router.post("", response_model=ProductRead, status_code=201)
async def create_product(product: ProductCreate, ctx: RequestContext = Depends(managers)):
    try:
        return await ProductService(ctx.db).create_product(product, user_id=ctx.user_id)
    except ProductCreationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/bulk-import", response_model=BulkImportResult)
async def bulk_import_products(rows: List[Dict[str, Any]], ctx: RequestContext = Depends(managers)):
    """Rows as parsed from the import CSV; failures are reported per SKU, not raised"""
    if not rows:
        raise HTTPException(status_code=400, detail="No products provided")
    return await ProductService(ctx.db).bulk_import(rows, user_id=ctx.user_id)


@router.get("/categories/gst", response_model=List[CategoryGSTRead])
async def list_category_gst(ctx: RequestContext = Depends(get_request_context)):
    return await ProductService(ctx.db).list_category_gst()


@router.patch("/categories/gst/{name}", response_model=CategoryGSTRead)
async def set_category_gst(name: str, body: CategoryGSTUpdate, ctx: RequestContext = Depends(managers)):
    try:
        return await ProductService(ctx.db).set_category_gst(name, body.gst_rate)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{product_id}", response_model=ProductRead)
async def get_product(product_id: int, ctx: RequestContext = Depends(get_request_context)):
    try:
        return await ProductService(ctx.db).get_product(product_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")


@router.put("/{product_id}", response_model=ProductRead)
async def update_product(product_id: int, product: ProductUpdate, ctx: RequestContext = Depends(managers)):
    try:
        return await ProductService(ctx.db).update_product(product_id, product)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{product_id}")
async def delete_product(product_id: int, ctx: RequestContext = Depends(managers)):
    try:
        await ProductService(ctx.db).delete_product(product_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"message": "Product deleted"}
