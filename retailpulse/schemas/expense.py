from datetime import date
from typing import Optional
from pydantic import Field

from retailpulse.schemas.base import TimestampedSchema, BaseSchema


class ExpenseBase(BaseSchema):
    category: str = Field(min_length=1)
    description: Optional[str] = None
    amount: float = Field(ge=0)
    expense_date: date
    payment_method: str
    vendor: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(BaseSchema):
    category: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = Field(default=None, ge=0)
    expense_date: Optional[date] = None
    payment_method: Optional[str] = None
    vendor: Optional[str] = None
    receipt_url: Optional[str] = None
    notes: Optional[str] = None


class ExpenseRead(ExpenseBase, TimestampedSchema):
    id: int
    created_by: Optional[int] = None
