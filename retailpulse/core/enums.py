"""
Shared enums and constants used across the application.
"""

from enum import Enum


class StockStatus(str, Enum):
    """Derived inventory health of an active product"""
    HEALTHY = "healthy"
    LOW = "low"
    OUT = "out"
    DEAD = "dead"


class UserRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    STAFF = "staff"
    CASHIER = "cashier"


class LoyaltyTier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"


class PaymentMethod(str, Enum):
    CASH = "cash"
    UPI = "upi"
    CARD = "card"


class AlertType(str, Enum):
    EXPIRY = "expiry"
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    BILLING = "billing"
    REFUND = "refund"
    STOCK = "stock"


class DateFilter(str, Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class TrendView(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
