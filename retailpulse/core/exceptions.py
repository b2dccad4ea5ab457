class BaseServiceError(Exception):
    """Base exception for all service-related errors."""
    pass

class NotFoundError(BaseServiceError):
    """Base exception for missing entities."""
    pass

class ProductNotFoundError(NotFoundError):
    """Raised when product is not found."""
    pass

class TransactionNotFoundError(NotFoundError):
    """Raised when a transaction is not found."""
    pass

class CustomerNotFoundError(NotFoundError):
    """Raised when a customer is not found."""
    pass

class ExpenseNotFoundError(NotFoundError):
    pass

class RefundNotFoundError(NotFoundError):
    pass

class AlertNotFoundError(NotFoundError):
    pass

class UserNotFoundError(NotFoundError):
    pass

class ValidationError(BaseServiceError):
    """Raised when data validation fails."""
    pass

class ProductCreationError(ValidationError):
    """Raised when product creation fails."""
    pass

class InsufficientStockError(ValidationError):
    """Raised when a sale asks for more units than are in stock."""
    pass

class AlreadyRefundedError(ValidationError):
    """Raised when a refund is requested twice for one transaction."""
    pass

class DuplicateUserError(ValidationError):
    """Raised when an email address is already registered."""
    pass

class OwnerAlreadyExistsError(ValidationError):
    """Raised when a second owner account would be created."""
    pass

class CatalogFetchError(BaseServiceError):
    """Raised when products or transactions cannot be fetched from the API."""
    pass

class NotificationError(BaseServiceError):
    """Raised when the SMS provider rejects a message."""
    pass
