from datetime import datetime
from typing import List, Optional
from pydantic import Field

from retailpulse.core.enums import PaymentMethod
from retailpulse.schemas.base import BaseSchema
from retailpulse.schemas.customer import CustomerRead


class TransactionItemCreate(BaseSchema):
    product_id: int
    quantity: int = Field(gt=0)


class TransactionCreate(BaseSchema):
    invoice_number: Optional[str] = None
    customer_id: Optional[int] = None
    items: List[TransactionItemCreate] = []
    discount_percent: float = Field(default=0.0, ge=0, le=100)
    flat_discount: float = Field(default=0.0, ge=0)
    redeem_points: int = Field(default=0, ge=0)
    payment_method: PaymentMethod
    payment_status: str = "completed"
    credit_points_earned: Optional[int] = Field(default=None, ge=0)


class TransactionItemRead(BaseSchema):
    product_id: int
    product_name: str
    quantity: int
    unit_price: float
    subtotal: float
    gst_rate: float
    gst_amount: float
    total_with_gst: float


class TransactionRead(BaseSchema):
    id: int
    invoice_number: str
    customer_id: Optional[int] = None
    customer: Optional[CustomerRead] = None
    items: List[TransactionItemRead]
    subtotal: float
    gst_amount: float
    discount: float
    total_amount: float
    payment_method: PaymentMethod
    payment_status: str
    credit_points_earned: int
    is_refunded: bool
    refund_id: Optional[int] = None
    created_by: Optional[int] = None
    created_at: datetime


class BulkDeleteRequest(BaseSchema):
    ids: List[int] = []


class BillTotals(BaseSchema):
    subtotal: float
    gst_amount: float
    discount: float
    total_amount: float
