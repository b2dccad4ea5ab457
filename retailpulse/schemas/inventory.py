"""
Schemas for derived inventory views.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import Field

from retailpulse.core.enums import StockStatus
from retailpulse.schemas.base import BaseSchema


class StockItem(BaseSchema):
    """A product as seen by the stock dashboard. Recomputed on every call."""
    id: int
    name: str
    category: str
    stock: int
    cost_price: float
    stock_value: float
    last_sold: Optional[datetime] = None
    status: StockStatus
    expiry_date: Optional[date] = None


class InventorySummary(BaseSchema):
    total_stock_value: float
    total_products: int
    healthy_stock_products: int
    low_stock_products: int
    out_of_stock_products: int
    dead_stock_products: int


class StockUpdate(BaseSchema):
    stock: int = Field(ge=0)


class StockDecrease(BaseSchema):
    quantity: int = Field(ge=0)
