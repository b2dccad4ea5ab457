# retailpulse/services/dashboard_service.py
"""
Owner dashboard figures.

Only completed sales count. A refunded sale contributes max(0, total - refund) and
its lines are scaled by the same factor, so product and category views agree with
the revenue figures. Profit on the dashboard is an estimate: cost is taken as 75%
of revenue.
"""

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.enums import TrendView
from retailpulse.core.utils import as_utc, business_now
from retailpulse.models.customer import Customer
from retailpulse.models.expense import Expense
from retailpulse.models.product import Product
from retailpulse.models.refund import Refund
from retailpulse.models.transaction import Transaction
from retailpulse.schemas.dashboard import (
    CategorySales,
    DashboardStats,
    ExpenseByCategory,
    RevenueDataPoint,
    TopProduct,
)
from retailpulse.services.stock_classifier import LOW_STOCK_THRESHOLD

logger = logging.getLogger(__name__)

ESTIMATED_COST_RATIO = 0.75
DAILY_TREND_DAYS = 14
MONTHLY_TREND_MONTHS = 12


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def percentage(part: float, whole: float) -> int:
    return round(part / whole * 100) if whole > 0 else 0


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _refund_map(self) -> Dict[int, float]:
        result = await self.db.execute(select(Refund.transaction_id, Refund.refund_amount))
        return {tx_id: max(0.0, amount or 0.0) for tx_id, amount in result.all()}

    async def _completed_since(self, start: datetime) -> List[Transaction]:
        result = await self.db.execute(
            select(Transaction)
            .where(Transaction.payment_status == "completed", Transaction.created_at >= as_utc(start))
            .order_by(Transaction.created_at)
        )
        return list(result.scalars().all())

    @staticmethod
    def adjusted_total(transaction: Transaction, refunds: Dict[int, float]) -> float:
        return max(0.0, transaction.total_amount - refunds.get(transaction.id, 0.0))

    @staticmethod
    def adjusted_lines(transaction: Transaction, refunds: Dict[int, float]) -> List[Tuple[object, float, float]]:
        """(item, quantity, subtotal) per line, scaled down by any refund"""
        total = transaction.total_amount or 0.0
        if not total or not transaction.items:
            return [(item, item.quantity, item.subtotal) for item in transaction.items]

        factor = max(0.0, min(1.0, (total - refunds.get(transaction.id, 0.0)) / total))
        if factor == 0:
            return []
        return [(item, item.quantity * factor, item.subtotal * factor) for item in transaction.items]

    def _local(self, value: datetime, now: datetime) -> datetime:
        return as_utc(value).astimezone(now.tzinfo)

    async def _month_expenses(self, now: datetime) -> List[Expense]:
        first = start_of_month(now).date()
        year, month = shift_month(first.year, first.month, 1)
        result = await self.db.execute(
            select(Expense).where(Expense.expense_date >= first, Expense.expense_date < date(year, month, 1))
        )
        return list(result.scalars().all())

    async def get_stats(self, now: Optional[datetime] = None) -> DashboardStats:
        now = now or business_now()
        today_start = start_of_day(now)
        month_start = start_of_month(now)

        refunds = await self._refund_map()
        monthly = await self._completed_since(month_start)
        today = [t for t in monthly if self._local(t.created_at, now) >= today_start]

        today_revenue = sum(self.adjusted_total(t, refunds) for t in today)
        monthly_revenue = sum(self.adjusted_total(t, refunds) for t in monthly)
        products_sold = sum(qty for t in monthly for _, qty, _ in self.adjusted_lines(t, refunds))

        low_stock = await self.db.scalar(
            select(func.count(Product.id)).where(
                Product.is_active.is_(True),
                Product.stock > 0,
                Product.stock <= LOW_STOCK_THRESHOLD,
            )
        )
        total_products = await self.db.scalar(select(func.count(Product.id)).where(Product.is_active.is_(True)))
        total_customers = await self.db.scalar(select(func.count(Customer.id)))
        expenses = sum(e.amount for e in await self._month_expenses(now))

        return DashboardStats(
            today_revenue=today_revenue,
            monthly_revenue=monthly_revenue,
            net_profit=monthly_revenue - monthly_revenue * ESTIMATED_COST_RATIO - expenses,
            total_products_sold=products_sold,
            low_stock_count=low_stock or 0,
            total_products=total_products or 0,
            total_customers=total_customers or 0,
            monthly_expenses=expenses,
        )

    async def revenue_trend(self, view: TrendView = TrendView.DAILY, now: Optional[datetime] = None) -> List[RevenueDataPoint]:
        """Last 14 days or last 12 months, oldest first, with empty periods as zero"""
        now = now or business_now()
        refunds = await self._refund_map()

        if view == TrendView.MONTHLY:
            first_year, first_month = shift_month(now.year, now.month, -(MONTHLY_TREND_MONTHS - 1))
            start = start_of_month(now).replace(year=first_year, month=first_month)
            keys = [
                "%04d-%02d" % shift_month(first_year, first_month, i)
                for i in range(MONTHLY_TREND_MONTHS)
            ]
            key_for = lambda local: local.strftime("%Y-%m")
        else:
            start = start_of_day(now) - timedelta(days=DAILY_TREND_DAYS - 1)
            keys = [(start + timedelta(days=i)).date().isoformat() for i in range(DAILY_TREND_DAYS)]
            key_for = lambda local: local.date().isoformat()

        revenue: Dict[str, float] = defaultdict(float)
        for transaction in await self._completed_since(start):
            revenue[key_for(self._local(transaction.created_at, now))] += self.adjusted_total(transaction, refunds)

        return [
            RevenueDataPoint(date=key, revenue=revenue.get(key, 0.0), profit=revenue.get(key, 0.0) * 0.25)
            for key in keys
        ]

    async def top_products(self, limit: int = 5, now: Optional[datetime] = None) -> List[TopProduct]:
        now = now or business_now()
        refunds = await self._refund_map()

        stats: Dict[str, Dict] = {}
        for transaction in await self._completed_since(start_of_month(now)):
            for item, qty, subtotal in self.adjusted_lines(transaction, refunds):
                key = item.product_name or str(item.product_id)
                entry = stats.setdefault(key, {"name": key, "sold": 0.0, "revenue": 0.0})
                entry["sold"] += qty
                entry["revenue"] += subtotal

        ranked = sorted(stats.values(), key=lambda s: s["revenue"], reverse=True)
        return [TopProduct(**entry) for entry in ranked[:limit]]

    async def category_sales(self, now: Optional[datetime] = None) -> List[CategorySales]:
        now = now or business_now()
        refunds = await self._refund_map()
        categories = dict((await self.db.execute(select(Product.id, Product.category))).all())

        sales: Dict[str, float] = defaultdict(float)
        for transaction in await self._completed_since(start_of_month(now)):
            for item, _, subtotal in self.adjusted_lines(transaction, refunds):
                sales[categories.get(item.product_id, "Other")] += subtotal

        total = sum(sales.values())
        rows = [
            CategorySales(category=category, sales=amount, percentage=percentage(amount, total))
            for category, amount in sales.items()
        ]
        return sorted(rows, key=lambda r: r.sales, reverse=True)

    async def expenses_by_category(self, now: Optional[datetime] = None) -> List[ExpenseByCategory]:
        now = now or business_now()
        amounts: Dict[str, float] = defaultdict(float)
        for expense in await self._month_expenses(now):
            amounts[expense.category] += expense.amount

        total = sum(amounts.values())
        rows = [
            ExpenseByCategory(category=category, amount=amount, percentage=percentage(amount, total))
            for category, amount in amounts.items()
        ]
        return sorted(rows, key=lambda r: r.amount, reverse=True)
