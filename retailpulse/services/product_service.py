"""
Purpose: CRUD for the Product catalog and the per-category GST table.

Stock changes made here are plain field updates from the product form; sales
and refunds move stock through BillingService / RefundService instead.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select, exists, or_, func
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.exceptions import ProductCreationError, ProductNotFoundError, ValidationError
from retailpulse.core.utils import model_to_schema, models_to_schemas
from retailpulse.models.category_gst import CategoryGST
from retailpulse.models.product import Product
from retailpulse.schemas.product import (
    BulkImportResult,
    CategoryGSTRead,
    ProductCreate,
    ProductRead,
    ProductUpdate,
)

logger = logging.getLogger(__name__)

MAX_GST_RATE = 28.0


class ProductService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def sku_exists(self, sku: str, exclude_id: Optional[int] = None) -> bool:
        """Check if a SKU already exists."""
        condition = Product.sku == sku
        if exclude_id is not None:
            condition = condition & (Product.id != exclude_id)
        return await self.db.scalar(select(exists().where(condition)))

    async def create_product(self, product_data: ProductCreate, user_id: Optional[int] = None) -> ProductRead:
        """
        Creates a product.

        Raises:
            ProductCreationError: If the SKU is taken or the insert fails
        """
        if await self.sku_exists(product_data.sku):
            raise ProductCreationError(f"SKU '{product_data.sku}' already exists")

        try:
            product = Product(**product_data.model_dump(), created_by=user_id)
            self.db.add(product)
            await self.db.commit()
            await self.db.refresh(product)
            logger.info(f"Created product {product.sku} (id={product.id})")
            return await model_to_schema(product, ProductRead)
        except Exception as e:
            await self.db.rollback()
            raise ProductCreationError(f"Failed to create product: {str(e)}")

    async def bulk_import(self, rows: Iterable[Dict[str, Any]], user_id: Optional[int] = None) -> BulkImportResult:
        """
        Create products one by one. Rows that fail validation or hit a taken SKU
        are counted as failed with a "<sku>: <reason>" message; the rest are kept.
        """
        result = BulkImportResult()
        for position, row in enumerate(rows, start=1):
            label = str(row.get("sku") or "").strip() or f"Row {position}"
            try:
                await self.create_product(ProductCreate.model_validate(row), user_id=user_id)
                result.success += 1
            except SchemaValidationError as e:
                result.failed += 1
                reasons = "; ".join(
                    f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
                )
                result.errors.append(f"{label}: {reasons}")
            except ProductCreationError as e:
                result.failed += 1
                result.errors.append(f"{label}: {str(e)}")

        logger.info(f"Bulk import finished: {result.success} created, {result.failed} failed")
        return result

    async def _get(self, product_id: int) -> Product:
        product = await self.db.get(Product, product_id)
        if not product:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")
        return product

    async def get_product(self, product_id: int) -> ProductRead:
        """
        Raises:
            ProductNotFoundError: If product not found
        """
        return await model_to_schema(await self._get(product_id), ProductRead)

    async def list_products(self, search: Optional[str] = None) -> List[ProductRead]:
        """Newest first. ``search`` matches name, category or SKU, case-insensitively."""
        query = select(Product).order_by(Product.created_at.desc(), Product.id.desc())
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(
                Product.name.ilike(pattern),
                Product.category.ilike(pattern),
                Product.sku.ilike(pattern),
            ))
        result = await self.db.execute(query)
        return await models_to_schemas(result.scalars().all(), ProductRead)

    async def update_product(self, product_id: int, product_data: ProductUpdate) -> ProductRead:
        product = await self._get(product_id)
        changes = product_data.model_dump(exclude_unset=True)

        if changes.get("sku") and await self.sku_exists(changes["sku"], exclude_id=product_id):
            raise ValidationError(f"SKU '{changes['sku']}' already exists")
        if "stock" in changes and changes["stock"] is None:
            changes.pop("stock")

        for key, value in changes.items():
            setattr(product, key, value)

        await self.db.commit()
        await self.db.refresh(product)
        return await model_to_schema(product, ProductRead)

    async def delete_product(self, product_id: int) -> None:
        product = await self._get(product_id)
        await self.db.delete(product)
        await self.db.commit()
        logger.info(f"Deleted product {product_id}")

    async def get_gst_rate(self, category: str) -> float:
        rate = await self.db.scalar(select(CategoryGST.gst_rate).where(CategoryGST.name == category))
        return rate or 0.0

    async def list_category_gst(self) -> List[CategoryGSTRead]:
        """Every category in use with its product count and GST rate (0 when unset)"""
        counts = await self.db.execute(
            select(Product.category, func.count(Product.id))
            .group_by(Product.category)
            .order_by(Product.category)
        )
        rates = dict((await self.db.execute(select(CategoryGST.name, CategoryGST.gst_rate))).all())

        return [
            CategoryGSTRead(name=category, product_count=count, gst_rate=rates.get(category, 0.0))
            for category, count in counts.all()
        ]

    async def set_category_gst(self, category: str, gst_rate: float) -> CategoryGSTRead:
        if gst_rate < 0 or gst_rate > MAX_GST_RATE:
            raise ValidationError(f"GST rate must be between 0 and {MAX_GST_RATE:g}")

        entry = await self.db.scalar(select(CategoryGST).where(CategoryGST.name == category))
        if entry is None:
            entry = CategoryGST(name=category, gst_rate=gst_rate)
            self.db.add(entry)
        else:
            entry.gst_rate = gst_rate
        await self.db.commit()

        count = await self.db.scalar(select(func.count(Product.id)).where(Product.category == category))
        logger.info(f"GST for category '{category}' set to {gst_rate}%")
        return CategoryGSTRead(name=category, gst_rate=gst_rate, product_count=count or 0)
