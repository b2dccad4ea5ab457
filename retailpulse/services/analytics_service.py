# retailpulse/services/analytics_service.py
"""
Sales Analytics Service

Revenue and margin breakdowns for a period (today, the last 7 days, or the
current month). Profit here is per line: (selling price - cost price) x quantity,
using the product's current prices. Lines whose product no longer exists are
left out of the product and category breakdowns.
"""

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.enums import DateFilter
from retailpulse.core.utils import as_utc, business_now
from retailpulse.models.product import Product
from retailpulse.models.transaction import Transaction
from retailpulse.schemas.analytics import (
    CategoryProfitData,
    DailyRevenueData,
    PaymentMethodData,
    ProductSalesData,
    SalesSummary,
)
from retailpulse.services.dashboard_service import percentage, start_of_day, start_of_month


def period_bounds(period: DateFilter, now: datetime) -> Tuple[datetime, datetime]:
    """Start of the period and end of today, in now's timezone"""
    today = start_of_day(now)
    end = today + timedelta(days=1) - timedelta(microseconds=1)
    if period == DateFilter.TODAY:
        return today, end
    if period == DateFilter.WEEK:
        return today - timedelta(days=6), end
    return start_of_month(now), end


class SalesAnalyticsService:

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _load(self, period: DateFilter, now: Optional[datetime]):
        now = now or business_now()
        start, end = period_bounds(period, now)

        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.created_at >= as_utc(start), Transaction.created_at <= as_utc(end))
            .order_by(Transaction.created_at)
        )
        transactions = list(result.scalars().all())
        products = {p.id: p for p in (await self.db.execute(select(Product))).scalars().all()}
        return transactions, products, start, end, now

    async def summary(self, period: DateFilter = DateFilter.MONTH, now: Optional[datetime] = None) -> SalesSummary:
        transactions, products, *_ = await self._load(period, now)

        revenue = 0.0
        profit = 0.0
        by_category: Dict[str, float] = defaultdict(float)
        for transaction in transactions:
            revenue += transaction.total_amount
            for item in transaction.items:
                product = products.get(item.product_id)
                if product:
                    profit += (product.selling_price - product.cost_price) * item.quantity
                    by_category[product.category] += item.subtotal

        top_category = max(by_category.items(), key=lambda kv: kv[1])[0] if by_category else "N/A"
        orders = len(transactions)
        return SalesSummary(
            total_revenue=revenue,
            total_profit=profit,
            total_orders=orders,
            average_order_value=revenue / orders if orders else 0.0,
            top_category=top_category,
        )

    async def product_sales(self, period: DateFilter = DateFilter.MONTH, now: Optional[datetime] = None) -> List[ProductSalesData]:
        transactions, products, *_ = await self._load(period, now)

        stats: Dict[int, ProductSalesData] = {}
        for transaction in transactions:
            for item in transaction.items:
                product = products.get(item.product_id)
                if not product:
                    continue
                entry = stats.get(product.id)
                if entry is None:
                    entry = stats[product.id] = ProductSalesData(
                        product_id=product.id,
                        product_name=product.name,
                        category=product.category,
                        quantity_sold=0,
                        revenue=0.0,
                        profit=0.0,
                    )
                entry.quantity_sold += item.quantity
                entry.revenue += item.subtotal
                entry.profit += (product.selling_price - product.cost_price) * item.quantity

        return sorted(stats.values(), key=lambda s: s.revenue, reverse=True)

    async def category_profit(self, period: DateFilter = DateFilter.MONTH, now: Optional[datetime] = None) -> List[CategoryProfitData]:
        transactions, products, *_ = await self._load(period, now)

        stats: Dict[str, Dict[str, float]] = defaultdict(lambda: {"revenue": 0.0, "cost": 0.0})
        for transaction in transactions:
            for item in transaction.items:
                product = products.get(item.product_id)
                if product:
                    stats[product.category]["revenue"] += item.subtotal
                    stats[product.category]["cost"] += product.cost_price * item.quantity

        rows = [
            CategoryProfitData(
                category=category,
                revenue=s["revenue"],
                cost=s["cost"],
                profit=s["revenue"] - s["cost"],
                margin=percentage(s["revenue"] - s["cost"], s["revenue"]),
            )
            for category, s in stats.items()
        ]
        return sorted(rows, key=lambda r: r.profit, reverse=True)

    async def daily_revenue(self, period: DateFilter = DateFilter.MONTH, now: Optional[datetime] = None) -> List[DailyRevenueData]:
        """One row per day of the period, labelled like "Oct 7", zero-filled"""
        transactions, products, start, end, now = await self._load(period, now)

        days: Dict = defaultdict(lambda: {"revenue": 0.0, "orders": 0, "profit": 0.0})
        for transaction in transactions:
            day = as_utc(transaction.created_at).astimezone(now.tzinfo).date()
            days[day]["revenue"] += transaction.total_amount
            days[day]["orders"] += 1
            for item in transaction.items:
                product = products.get(item.product_id)
                if product:
                    days[day]["profit"] += (product.selling_price - product.cost_price) * item.quantity

        rows = []
        current = start.date()
        while current <= end.date():
            s = days.get(current, {"revenue": 0.0, "orders": 0, "profit": 0.0})
            rows.append(DailyRevenueData(
                date=f"{current.strftime('%b')} {current.day}",
                revenue=s["revenue"],
                orders=s["orders"],
                profit=s["profit"],
            ))
            current += timedelta(days=1)
        return rows

    async def payment_methods(self, period: DateFilter = DateFilter.MONTH, now: Optional[datetime] = None) -> List[PaymentMethodData]:
        transactions, *_ = await self._load(period, now)

        stats: Dict[str, Dict] = defaultdict(lambda: {"count": 0, "amount": 0.0})
        for transaction in transactions:
            method = transaction.payment_method.value if transaction.payment_method else "unknown"
            stats[method]["count"] += 1
            stats[method]["amount"] += transaction.total_amount

        total = sum(s["amount"] for s in stats.values())
        rows = [
            PaymentMethodData(method=method.upper(), count=s["count"], amount=s["amount"], percentage=percentage(s["amount"], total))
            for method, s in stats.items()
        ]
        return sorted(rows, key=lambda r: r.amount, reverse=True)
