from datetime import datetime
from typing import Optional
from pydantic import Field

from retailpulse.core.enums import LoyaltyTier
from retailpulse.schemas.base import BaseSchema


class CustomerRead(BaseSchema):
    id: int
    name: str
    mobile: str
    customer_code: str
    credit_points: int
    points_redeemed: int
    total_purchases: float
    tier: LoyaltyTier
    created_at: datetime
    updated_at: datetime


class CustomerUpsert(BaseSchema):
    mobile: str = Field(min_length=1)
    name: str = Field(min_length=1)


class LoyaltyUpdate(BaseSchema):
    credit_points: Optional[int] = Field(default=None, ge=0)
    total_purchases: Optional[float] = Field(default=None, ge=0)
    points_redeemed: Optional[int] = Field(default=None, ge=0)
    tier: Optional[LoyaltyTier] = None


class RedeemRequest(BaseSchema):
    points: int = Field(ge=0)
    bill_amount: float = Field(ge=0)


class RedeemResult(BaseSchema):
    discount: float
    points_used: int
