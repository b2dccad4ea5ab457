from sqlalchemy import Column, Integer, String, Float, Date, DateTime
from sqlalchemy.sql import func

from retailpulse.core.utils import utc_now
from retailpulse.database import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True)
    category = Column(String(100), nullable=False, index=True)
    description = Column(String, nullable=True)
    amount = Column(Float, nullable=False)
    expense_date = Column(Date, nullable=False, index=True)
    payment_method = Column(String(30), nullable=False)
    vendor = Column(String(200), nullable=True)
    receipt_url = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    created_by = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False)
