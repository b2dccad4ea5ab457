from sqlalchemy import Column, Integer, String, Float, DateTime
from sqlalchemy.sql import func

from retailpulse.core.utils import utc_now
from retailpulse.database import Base


class CategoryGST(Base):
    """GST rate (percent, 0-28) applied to every product in a category."""

    __tablename__ = "category_gst"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    gst_rate = Column(Float, nullable=False, default=0.0)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False)
