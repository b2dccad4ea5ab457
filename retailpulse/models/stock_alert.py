# retailpulse/models/stock_alert.py

from sqlalchemy import Column, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from retailpulse.core.enums import AlertType
from retailpulse.core.utils import utc_now
from retailpulse.database import Base


class StockAlert(Base):
    """
    A low-stock, out-of-stock or expiry notice raised for a product.

    Expiry alerts are recorded with a threshold of 0.
    """
    __tablename__ = "stock_alerts"

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    stock = Column(Integer, nullable=False)
    threshold = Column(Integer, nullable=False, default=5)

    sms_sent = Column(Boolean, nullable=False, default=False)
    sms_sent_at = Column(DateTime(timezone=True), nullable=True)
    triggered_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    resolved = Column(Boolean, nullable=False, default=False)

    acknowledged = Column(Boolean, nullable=False, default=False)
    acknowledged_at = Column(DateTime(timezone=True), nullable=True)
    acknowledged_by = Column(Integer, nullable=True)

    product = relationship("Product", lazy="selectin")

    @property
    def alert_type(self) -> AlertType:
        if self.threshold == 0:
            return AlertType.EXPIRY
        if self.stock <= 0:
            return AlertType.OUT_OF_STOCK
        return AlertType.LOW_STOCK

    def __repr__(self):
        return f"<StockAlert product={self.product_id} stock={self.stock}>"
