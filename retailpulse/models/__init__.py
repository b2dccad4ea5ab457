from .user import User
from .product import Product
from .category_gst import CategoryGST
from .customer import Customer
from .transaction import Transaction, TransactionItem
from .refund import Refund
from .expense import Expense
from .stock_alert import StockAlert
from .audit_log import AuditLog

# This ensures all models are registered with SQLAlchemy
__all__ = [
    'User',
    'Product',
    'CategoryGST',
    'Customer',
    'Transaction',
    'TransactionItem',
    'Refund',
    'Expense',
    'StockAlert',
    'AuditLog',
]
