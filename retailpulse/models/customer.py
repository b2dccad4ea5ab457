# retailpulse/models/customer.py

from sqlalchemy import Column, Integer, String, Float, DateTime, Enum
from sqlalchemy.sql import func

from retailpulse.core.enums import LoyaltyTier
from retailpulse.core.utils import utc_now
from retailpulse.database import Base


class Customer(Base):
    """Loyalty customer, identified at the till by mobile number."""

    __tablename__ = "customers"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    mobile = Column(String(20), nullable=False, index=True)
    customer_code = Column(String(32), nullable=False, unique=True)

    credit_points = Column(Integer, nullable=False, default=0)
    points_redeemed = Column(Integer, nullable=False, default=0)
    total_purchases = Column(Float, nullable=False, default=0.0)
    tier = Column(
        Enum(LoyaltyTier, name="loyaltytier", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=LoyaltyTier.BRONZE,
    )

    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Customer {self.customer_code} tier={self.tier}>"
