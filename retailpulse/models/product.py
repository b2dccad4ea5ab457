"""
Catalog model.

Stock is an absolute unit count owned by the product row; sales and refunds
adjust it with single UPDATE statements rather than through a ledger.
"""

from sqlalchemy import Column, Integer, String, Float, Boolean, Date, DateTime, CheckConstraint
from sqlalchemy.sql import func

from retailpulse.core.utils import utc_now
from retailpulse.database import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("cost_price >= 0", name="ck_products_cost_price_non_negative"),
        CheckConstraint("selling_price >= 0", name="ck_products_selling_price_non_negative"),
    )

    # Primary Key and Timestamps
    id = Column(Integer, primary_key=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False)

    # Core Product Information
    name = Column(String(200), nullable=False)
    sku = Column(String(64), nullable=False, unique=True)
    category = Column(String(100), nullable=False, index=True)
    description = Column(String, nullable=True)

    # Pricing Fields
    cost_price = Column(Float, nullable=False, default=0.0)
    selling_price = Column(Float, nullable=False, default=0.0)

    stock = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    expiry_date = Column(Date, nullable=True)

    # Simple user id without foreign key constraint so deleted users keep their products
    created_by = Column(Integer, nullable=True)

    @property
    def stock_value(self) -> float:
        return self.stock * self.cost_price

    def __repr__(self):
        return f"<Product {self.sku} stock={self.stock}>"
