"""
Core module exports.
"""
from .enums import (
    StockStatus,
    UserRole,
    LoyaltyTier,
    PaymentMethod,
    AlertType,
    DateFilter,
    TrendView,
)

from .exceptions import (
    BaseServiceError,
    NotFoundError,
    ProductNotFoundError,
    ValidationError,
    InsufficientStockError,
    CatalogFetchError,
)

from .utils import (
    model_to_schema,
    models_to_schemas,
    utc_now,
    as_utc,
)
