from datetime import datetime
from typing import Optional
from pydantic import Field

from retailpulse.schemas.base import BaseSchema


class RefundCreate(BaseSchema):
    transaction_id: int
    refund_amount: Optional[float] = Field(default=None, ge=0)
    reason: str = Field(min_length=1)


class RefundRead(BaseSchema):
    id: int
    transaction_id: int
    refund_amount: float
    refund_reason: str
    points_reversed: int
    stock_reversed: bool
    processed_by: Optional[int] = None
    created_at: datetime
