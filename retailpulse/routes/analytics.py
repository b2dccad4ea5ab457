from typing import List

from fastapi import APIRouter, Depends

from retailpulse.core.enums import DateFilter
from retailpulse.core.security import get_request_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.analytics import (
    CategoryProfitData,
    DailyRevenueData,
    PaymentMethodData,
    ProductSalesData,
    SalesSummary,
)
from retailpulse.services.analytics_service import SalesAnalyticsService

router = APIRouter(prefix="/api/analytics", tags=["analytics"])


@router.get("/summary", response_model=SalesSummary)
async def sales_summary(period: DateFilter = DateFilter.MONTH, ctx: RequestContext = Depends(get_request_context)):
    return await SalesAnalyticsService(ctx.db).summary(period, now=ctx.now)


@router.get("/product-sales", response_model=List[ProductSalesData])
async def product_sales(period: DateFilter = DateFilter.MONTH, ctx: RequestContext = Depends(get_request_context)):
    return await SalesAnalyticsService(ctx.db).product_sales(period, now=ctx.now)


@router.get("/category-profit", response_model=List[CategoryProfitData])
async def category_profit(period: DateFilter = DateFilter.MONTH, ctx: RequestContext = Depends(get_request_context)):
    return await SalesAnalyticsService(ctx.db).category_profit(period, now=ctx.now)


@router.get("/daily-revenue", response_model=List[DailyRevenueData])
async def daily_revenue(period: DateFilter = DateFilter.MONTH, ctx: RequestContext = Depends(get_request_context)):
    return await SalesAnalyticsService(ctx.db).daily_revenue(period, now=ctx.now)


@router.get("/payment-methods", response_model=List[PaymentMethodData])
async def payment_methods(period: DateFilter = DateFilter.MONTH, ctx: RequestContext = Depends(get_request_context)):
    return await SalesAnalyticsService(ctx.db).payment_methods(period, now=ctx.now)
