"""
Purpose: Derives stock health for the inventory dashboard.

Pure functions over a catalog snapshot. Nothing here touches the database or
the network, and nothing is cached: every call recomputes from its inputs.

Status rules, checked in order:
- stock == 0                       -> out
- stock <= LOW_STOCK_THRESHOLD     -> low
- not sold within DEAD_STOCK_DAYS  -> dead
- otherwise                        -> healthy
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Set

from retailpulse.core.enums import StockStatus
from retailpulse.core.utils import as_utc
from retailpulse.integrations.base import ProductRecord, SaleRecord
from retailpulse.schemas.inventory import InventorySummary, StockItem

LOW_STOCK_THRESHOLD = 10
DEAD_STOCK_DAYS = 30


def recently_sold_ids(sales: Iterable[SaleRecord], now: datetime) -> Set[int]:
    """Product ids appearing in any transaction at or after now - DEAD_STOCK_DAYS"""
    cutoff = as_utc(now) - timedelta(days=DEAD_STOCK_DAYS)
    sold = set()
    for sale in sales:
        created_at = as_utc(sale.created_at)
        if created_at is not None and created_at >= cutoff:
            sold.update(sale.product_ids)
    return sold


def last_sold_at(sales: Iterable[SaleRecord]) -> Dict[int, datetime]:
    """Newest transaction timestamp per product id. Transactions without a timestamp are ignored."""
    dated = [s for s in sales if s.created_at is not None]
    # stable sort keeps input order between equal timestamps
    dated.sort(key=lambda s: as_utc(s.created_at), reverse=True)

    last_sold: Dict[int, datetime] = {}
    for sale in dated:
        for product_id in sale.product_ids:
            if product_id not in last_sold:
                last_sold[product_id] = as_utc(sale.created_at)
    return last_sold


def classify_status(stock: int, recently_sold: bool) -> StockStatus:
    if stock == 0:
        return StockStatus.OUT
    if stock <= LOW_STOCK_THRESHOLD:
        return StockStatus.LOW
    if not recently_sold:
        return StockStatus.DEAD
    return StockStatus.HEALTHY


def classify_products(
    products: Sequence[ProductRecord],
    sales: Sequence[SaleRecord],
    now: datetime,
) -> List[StockItem]:
    """
    One StockItem per active product, in input order.

    Inactive products are dropped. A product's last_sold is the newest
    transaction containing it, regardless of how old.
    """
    sold = recently_sold_ids(sales, now)
    last_sold = last_sold_at(sales)

    items = []
    for product in products:
        if not product.is_active:
            continue
        items.append(StockItem(
            id=product.id,
            name=product.name,
            category=product.category,
            stock=product.stock,
            cost_price=product.cost_price,
            stock_value=product.stock * product.cost_price,
            last_sold=last_sold.get(product.id),
            status=classify_status(product.stock, product.id in sold),
            expiry_date=product.expiry_date,
        ))
    return items


def summarize(items: Sequence[StockItem]) -> InventorySummary:
    """Totals over one classification pass, so the status counts always add up to total_products."""
    counts = {status: 0 for status in StockStatus}
    for item in items:
        counts[item.status] += 1

    return InventorySummary(
        total_stock_value=sum(item.stock_value for item in items),
        total_products=len(items),
        healthy_stock_products=counts[StockStatus.HEALTHY],
        low_stock_products=counts[StockStatus.LOW],
        out_of_stock_products=counts[StockStatus.OUT],
        dead_stock_products=counts[StockStatus.DEAD],
    )


def filter_by_status(items: Iterable[StockItem], status: StockStatus) -> List[StockItem]:
    return [item for item in items if item.status == status]


def filter_by_category(items: Iterable[StockItem], category: Optional[str]) -> List[StockItem]:
    """Exact, case-sensitive match. An empty category means no filter."""
    if not category:
        return list(items)
    return [item for item in items if item.category == category]
