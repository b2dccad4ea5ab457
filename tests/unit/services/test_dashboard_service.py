# tests/unit/services/test_dashboard_service.py
import pytest
from datetime import datetime, timezone

from retailpulse.core.enums import TrendView
from retailpulse.services.dashboard_service import DashboardService, percentage, shift_month, start_of_month


def test_shift_month_wraps_years():
    assert shift_month(2026, 1, -1) == (2025, 12)
    assert shift_month(2025, 12, 1) == (2026, 1)
    assert shift_month(2026, 3, -11) == (2025, 4)


def test_start_of_month():
    assert start_of_month(datetime(2026, 3, 15, 12, 30, tzinfo=timezone.utc)) == datetime(2026, 3, 1, tzinfo=timezone.utc)


def test_percentage_of_nothing_is_zero():
    assert percentage(5, 0) == 0
    assert percentage(1, 3) == 33


@pytest.mark.asyncio
async def test_stats_count_completed_sales_net_of_refunds(db_session, sales_history, sales_now):
    stats = await DashboardService(db_session).get_stats(sales_now)

    assert stats.today_revenue == 300.0
    # pending sale and last month's sale are excluded, the refunded sale counts as 0
    assert stats.monthly_revenue == 700.0
    assert stats.total_products_sold == 7
    assert stats.monthly_expenses == 100.0
    assert stats.net_profit == pytest.approx(700 - 700 * 0.75 - 100)
    # out-of-stock products are not "low"
    assert stats.low_stock_count == 1
    assert stats.total_products == 3
    assert stats.total_customers == 0


@pytest.mark.asyncio
async def test_daily_trend(db_session, sales_history, sales_now):
    points = await DashboardService(db_session).revenue_trend(TrendView.DAILY, sales_now)

    assert len(points) == 14
    assert points[0].date == "2026-03-02"
    assert points[-1].date == "2026-03-15"
    by_day = {p.date: p for p in points}
    assert by_day["2026-03-15"].revenue == 300.0
    assert by_day["2026-03-15"].profit == 75.0
    assert by_day["2026-03-10"].revenue == 400.0
    assert by_day["2026-03-03"].revenue == 0.0


@pytest.mark.asyncio
async def test_monthly_trend(db_session, sales_history, sales_now):
    points = await DashboardService(db_session).revenue_trend(TrendView.MONTHLY, sales_now)

    assert [p.date for p in points][:2] == ["2025-04", "2025-05"]
    assert points[-1].date == "2026-03"
    assert points[-1].revenue == 700.0
    assert points[-2].revenue == 1000.0
    assert sum(p.revenue for p in points[:-2]) == 0


@pytest.mark.asyncio
async def test_top_products_and_categories(db_session, sales_history, sales_now):
    service = DashboardService(db_session)

    top = await service.top_products(now=sales_now)
    assert [(p.name, p.sold, p.revenue) for p in top] == [("Rice", 7, 700.0)]

    categories = await service.category_sales(now=sales_now)
    assert [(c.category, c.sales, c.percentage) for c in categories] == [("Grocery", 700.0, 100)]


@pytest.mark.asyncio
async def test_expenses_by_category(db_session, sales_history, sales_now):
    rows = await DashboardService(db_session).expenses_by_category(sales_now)
    assert [(r.category, r.amount, r.percentage) for r in rows] == [("Rent", 100.0, 100)]
