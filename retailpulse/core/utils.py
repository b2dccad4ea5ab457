"""
Utility functions for the application.
"""
import random

from datetime import datetime, timezone
from zoneinfo import ZoneInfo
from typing import Type, TypeVar, List, Optional, Any
from pydantic import BaseModel

from retailpulse.core.config import get_settings

T = TypeVar('T', bound=BaseModel)


async def model_to_schema(db_model: Any, schema_class: Type[T]) -> T:
    """
    Convert a SQLAlchemy model instance to a Pydantic schema instance.

    Args:
        db_model: SQLAlchemy model instance
        schema_class: Pydantic schema class

    Returns:
        Instance of the Pydantic schema
    """
    return schema_class.model_validate(db_model, from_attributes=True)


async def models_to_schemas(db_models: List[Any], schema_class: Type[T]) -> List[T]:
    """Convert a list of SQLAlchemy model instances to Pydantic schema instances."""
    return [await model_to_schema(model, schema_class) for model in db_models]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalise a datetime to an aware UTC value.

    SQLite hands back naive datetimes for timezone-aware columns; those are
    stored as UTC, so a missing tzinfo is read as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def generate_customer_code(now: Optional[datetime] = None) -> str:
    """
    Readable, mostly-unique customer code.

    Format: CUST-YYYYMMDD-XXXX, e.g. CUST-20260102-4837
    """
    now = now or utc_now()
    return f"CUST-{now.strftime('%Y%m%d')}-{random.randint(1000, 9999)}"


def generate_invoice_number(now: Optional[datetime] = None) -> str:
    """
    Invoice number from the date and the millisecond clock.

    Format: INV-YYYYMMDD-NNNN (last four digits of the epoch milliseconds)
    """
    now = now or utc_now()
    sequence = str(int(now.timestamp() * 1000))[-4:]
    return f"INV-{now.strftime('%Y%m%d')}-{sequence}"


def business_now(timezone_name: Optional[str] = None) -> datetime:
    """Current time in the shop's timezone (BUSINESS_TIMEZONE)."""
    if timezone_name is None:
        timezone_name = get_settings().BUSINESS_TIMEZONE
    return utc_now().astimezone(ZoneInfo(timezone_name))
