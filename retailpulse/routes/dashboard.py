from typing import List

from fastapi import APIRouter, Depends, Query

from retailpulse.core.enums import TrendView
from retailpulse.core.security import get_request_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.dashboard import (
    CategorySales,
    DashboardStats,
    ExpenseByCategory,
    RevenueDataPoint,
    TopProduct,
)
from retailpulse.services.dashboard_service import DashboardService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(ctx: RequestContext = Depends(get_request_context)):
    return await DashboardService(ctx.db).get_stats(now=ctx.now)


@router.get("/revenue-trend", response_model=List[RevenueDataPoint])
async def revenue_trend(view: TrendView = TrendView.DAILY, ctx: RequestContext = Depends(get_request_context)):
    return await DashboardService(ctx.db).revenue_trend(view, now=ctx.now)


@router.get("/top-products", response_model=List[TopProduct])
async def top_products(limit: int = Query(5, ge=1, le=100), ctx: RequestContext = Depends(get_request_context)):
    return await DashboardService(ctx.db).top_products(limit, now=ctx.now)


@router.get("/category-sales", response_model=List[CategorySales])
async def category_sales(ctx: RequestContext = Depends(get_request_context)):
    return await DashboardService(ctx.db).category_sales(now=ctx.now)


@router.get("/expenses-by-category", response_model=List[ExpenseByCategory])
async def expenses_by_category(ctx: RequestContext = Depends(get_request_context)):
    return await DashboardService(ctx.db).expenses_by_category(now=ctx.now)
