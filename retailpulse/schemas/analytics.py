from retailpulse.schemas.base import BaseSchema


class SalesSummary(BaseSchema):
    total_revenue: float
    total_profit: float
    total_orders: int
    average_order_value: float
    top_category: str


class ProductSalesData(BaseSchema):
    product_id: int
    product_name: str
    category: str
    quantity_sold: int
    revenue: float
    profit: float


class CategoryProfitData(BaseSchema):
    category: str
    revenue: float
    cost: float
    profit: float
    margin: int


class DailyRevenueData(BaseSchema):
    date: str
    revenue: float
    orders: int
    profit: float


class PaymentMethodData(BaseSchema):
    method: str
    count: int
    amount: float
    percentage: int
