"""
Schema exports for the application.
"""

# Base schemas
from .base import BaseSchema, TimestampedSchema

from .product import ProductBase, ProductCreate, ProductUpdate, ProductRead, CategoryGSTRead, CategoryGSTUpdate
from .inventory import StockItem, InventorySummary, StockUpdate, StockDecrease
from .customer import CustomerRead, CustomerUpsert, LoyaltyUpdate, RedeemRequest, RedeemResult
from .transaction import (
    TransactionItemCreate,
    TransactionCreate,
    TransactionItemRead,
    TransactionRead,
    BulkDeleteRequest,
    BillTotals,
)
from .refund import RefundCreate, RefundRead
from .expense import ExpenseCreate, ExpenseUpdate, ExpenseRead
from .alert import StockAlertRead, AlertCheckResult
from .audit import AuditLogRead
from .user import UserRead, UserCreate, UserRoleUpdate, UserPasswordReset, UserProfileUpdate
