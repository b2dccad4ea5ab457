# retailpulse/services/inventory_service.py
import logging
from datetime import datetime
from typing import List, Optional

from retailpulse.core.enums import StockStatus
from retailpulse.core.exceptions import ValidationError
from retailpulse.integrations.base import CatalogSource
from retailpulse.schemas.inventory import InventorySummary, StockItem
from retailpulse.services import stock_classifier

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Stock views derived from a catalog source.

    Every method re-fetches the full snapshot; there is no cache between calls.
    ``now`` defaults to the snapshot's own timestamp.
    """

    def __init__(self, source: CatalogSource):
        self.source = source

    async def get_all(self, now: Optional[datetime] = None) -> List[StockItem]:
        snapshot = await self.source.fetch_snapshot()
        return stock_classifier.classify_products(snapshot.products, snapshot.sales, now or snapshot.taken_at)

    async def get_summary(self, now: Optional[datetime] = None) -> InventorySummary:
        return stock_classifier.summarize(await self.get_all(now))

    async def get_by_category(self, category: Optional[str], now: Optional[datetime] = None) -> List[StockItem]:
        return stock_classifier.filter_by_category(await self.get_all(now), category)

    async def get_low_stock(self, now: Optional[datetime] = None) -> List[StockItem]:
        return stock_classifier.filter_by_status(await self.get_all(now), StockStatus.LOW)

    async def get_out_of_stock(self, now: Optional[datetime] = None) -> List[StockItem]:
        return stock_classifier.filter_by_status(await self.get_all(now), StockStatus.OUT)

    async def get_dead_stock(self, now: Optional[datetime] = None) -> List[StockItem]:
        return stock_classifier.filter_by_status(await self.get_all(now), StockStatus.DEAD)

    async def update_stock(
        self,
        product_id: int,
        new_stock: int,
        now: Optional[datetime] = None,
        user_id: Optional[int] = None,
    ) -> Optional[StockItem]:
        """
        Set a product's stock and return its re-derived view.

        Returns None when the product exists but is inactive (inactive
        products are not part of the derived views).
        """
        if new_stock < 0:
            raise ValidationError("Stock cannot be negative")

        await self.source.set_stock(product_id, new_stock, user_id=user_id)
        items = await self.get_all(now)
        return next((item for item in items if item.id == product_id), None)

    async def decrease_stock(self, product_id: int, quantity: int, user_id: Optional[int] = None) -> Optional[int]:
        """Lower stock by quantity, clamped at zero. Unknown products are left alone and None is returned."""
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        return await self.source.decrease_stock(product_id, quantity, user_id=user_id)
