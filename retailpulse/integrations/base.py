"""
Purpose: Defines where the inventory views get their products and sales from.

Contents:
ProductRecord / SaleRecord: the minimal facts the stock classifier needs, independent of
whether they were read from the database or from the REST API.
CatalogSnapshot: products and sales read together, stamped with one logical timestamp.
CatalogSource: abstract reader/writer. Implementations fetch everything in full (no paging,
no date filtering) and let transport errors propagate to the caller without retrying.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class ProductRecord:
    id: int
    name: str
    category: str
    stock: int
    cost_price: float
    is_active: bool = True
    expiry_date: Optional[date] = None


@dataclass(frozen=True)
class SaleRecord:
    """A transaction reduced to when it happened and which products it contained."""
    id: int
    created_at: Optional[datetime]
    product_ids: Tuple[int, ...] = ()


@dataclass
class CatalogSnapshot:
    products: List[ProductRecord]
    sales: List[SaleRecord]
    taken_at: datetime
    # populated by sources that know it; informational only
    source: str = field(default="unknown")


class CatalogSource(ABC):

    @abstractmethod
    async def fetch_snapshot(self) -> CatalogSnapshot:
        """Fetch all products and all transactions"""
        pass

    @abstractmethod
    async def set_stock(self, product_id: int, stock: int, user_id: Optional[int] = None) -> None:
        """Set the absolute stock level of a product"""
        pass

    @abstractmethod
    async def decrease_stock(self, product_id: int, quantity: int, user_id: Optional[int] = None) -> Optional[int]:
        """Lower stock by quantity, flooring at zero. Returns the new level, or None if the product is unknown"""
        pass
