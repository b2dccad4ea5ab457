from retailpulse.schemas.base import BaseSchema


class DashboardStats(BaseSchema):
    today_revenue: float
    monthly_revenue: float
    net_profit: float
    total_products_sold: float
    low_stock_count: int
    total_products: int
    total_customers: int
    monthly_expenses: float


class RevenueDataPoint(BaseSchema):
    date: str
    revenue: float
    profit: float


class TopProduct(BaseSchema):
    name: str
    sold: float
    revenue: float


class CategorySales(BaseSchema):
    category: str
    sales: float
    percentage: int


class ExpenseByCategory(BaseSchema):
    category: str
    amount: float
    percentage: int
