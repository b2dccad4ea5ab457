from sqlalchemy import Column, Integer, String, Float, Boolean, DateTime, ForeignKey
from sqlalchemy.sql import func

from retailpulse.core.utils import utc_now
from retailpulse.database import Base


class Refund(Base):
    __tablename__ = "refunds"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True)
    refund_amount = Column(Float, nullable=False)
    refund_reason = Column(String, nullable=False)
    points_reversed = Column(Integer, nullable=False, default=0)
    stock_reversed = Column(Boolean, nullable=False, default=True)
    processed_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<Refund tx={self.transaction_id} amount={self.refund_amount}>"
