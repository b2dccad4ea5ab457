"""
Schemas for product-related API endpoints.
"""

from datetime import date
from typing import List, Optional
from pydantic import Field, field_validator

from retailpulse.schemas.base import BaseSchema, TimestampedSchema


class ProductValidationMixin(BaseSchema):
    """Shared validation for price fields sent from the product form."""

    @field_validator('cost_price', 'selling_price', mode='before', check_fields=False)
    @classmethod
    def validate_price(cls, v):
        if v is None:
            return None
        if v == '':
            return 0.0
        try:
            price = float(v)
        except (ValueError, TypeError):
            raise ValueError('Price must be a valid number')
        if price < 0:
            raise ValueError('Price must not be negative')
        return price

    @field_validator('expiry_date', mode='before', check_fields=False)
    @classmethod
    def validate_expiry_date(cls, v):
        if v == '':
            return None
        return v


class ProductBase(ProductValidationMixin):
    """Base model for product data common to all operations"""
    name: str = Field(min_length=1)
    sku: str = Field(min_length=1)
    category: str = Field(min_length=1)
    cost_price: float
    selling_price: float
    stock: int = Field(ge=0)
    description: Optional[str] = None
    is_active: bool = True
    expiry_date: Optional[date] = None


class ProductCreate(ProductBase):
    pass


class ProductUpdate(ProductValidationMixin):
    """All fields optional; only the fields sent are applied."""
    name: Optional[str] = None
    sku: Optional[str] = None
    category: Optional[str] = None
    cost_price: Optional[float] = None
    selling_price: Optional[float] = None
    stock: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_active: Optional[bool] = None
    expiry_date: Optional[date] = None


class ProductRead(ProductBase, TimestampedSchema):
    id: int
    created_by: Optional[int] = None


class CategoryGSTRead(BaseSchema):
    name: str
    gst_rate: float
    product_count: int = 0


class CategoryGSTUpdate(BaseSchema):
    gst_rate: float = Field(ge=0, le=28)


class BulkImportResult(BaseSchema):
    success: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)
