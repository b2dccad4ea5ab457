import logging
from typing import Dict, List, Optional

from sqlalchemy import select, update, case
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.enums import AuditAction
from retailpulse.core.exceptions import ProductNotFoundError
from retailpulse.core.utils import utc_now
from retailpulse.integrations.base import CatalogSource, CatalogSnapshot, ProductRecord, SaleRecord
from retailpulse.models.product import Product
from retailpulse.models.transaction import Transaction, TransactionItem
from retailpulse.services.audit_logger import AuditLogger

logger = logging.getLogger(__name__)


class DatabaseCatalogSource(CatalogSource):
    """
    Reads the catalog and sales history straight from the database.

    Both reads run inside the session's current transaction and share one
    ``taken_at`` stamp. How consistent the pair is depends on the engine's
    isolation level (see ``DB_ISOLATION_LEVEL``).
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def fetch_snapshot(self) -> CatalogSnapshot:
        taken_at = utc_now()

        product_rows = await self.db.execute(select(Product).order_by(Product.id))
        products = [
            ProductRecord(
                id=p.id,
                name=p.name,
                category=p.category,
                stock=p.stock,
                cost_price=p.cost_price,
                is_active=p.is_active,
                expiry_date=p.expiry_date,
            )
            for p in product_rows.scalars().all()
        ]

        sale_rows = await self.db.execute(
            select(Transaction.id, Transaction.created_at, TransactionItem.product_id)
            .join(TransactionItem, TransactionItem.transaction_id == Transaction.id)
            .order_by(Transaction.created_at.desc(), Transaction.id.desc(), TransactionItem.position)
        )

        grouped: Dict[int, List] = {}
        order: List[int] = []
        for tx_id, created_at, product_id in sale_rows.all():
            if tx_id not in grouped:
                grouped[tx_id] = [created_at, []]
                order.append(tx_id)
            grouped[tx_id][1].append(product_id)

        sales = [
            SaleRecord(id=tx_id, created_at=grouped[tx_id][0], product_ids=tuple(grouped[tx_id][1]))
            for tx_id in order
        ]

        logger.debug(f"Catalog snapshot: {len(products)} products, {len(sales)} transactions")
        return CatalogSnapshot(products=products, sales=sales, taken_at=taken_at, source="database")

    async def set_stock(self, product_id: int, stock: int, user_id: Optional[int] = None) -> None:
        product = await self.db.get(Product, product_id)
        if product is None:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")

        old_stock = product.stock
        product.stock = stock

        await AuditLogger(self.db).log(
            action=AuditAction.STOCK.value,
            user_id=user_id,
            entity_type="product",
            entity_id=product_id,
            old_values={"stock": old_stock},
            new_values={"stock": stock},
            notes=f"Stock set for {product.sku}",
        )
        await self.db.commit()
        logger.info(f"Stock for product {product_id} set {old_stock} -> {stock}")

    async def decrease_stock(self, product_id: int, quantity: int, user_id: Optional[int] = None) -> Optional[int]:
        # Single conditional UPDATE so concurrent decrements cannot lose each other
        result = await self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=case((Product.stock > quantity, Product.stock - quantity), else_=0))
            .execution_options(synchronize_session="fetch")
        )

        if result.rowcount == 0:
            await self.db.rollback()
            logger.warning(f"decrease_stock: product {product_id} not found, nothing changed")
            return None

        await AuditLogger(self.db).log(
            action=AuditAction.STOCK.value,
            user_id=user_id,
            entity_type="product",
            entity_id=product_id,
            new_values={"decreased_by": quantity},
            notes="Stock decreased",
        )
        await self.db.commit()

        new_stock = await self.db.scalar(select(Product.stock).where(Product.id == product_id))
        logger.info(f"Stock for product {product_id} decreased by {quantity} -> {new_stock}")
        return new_stock
