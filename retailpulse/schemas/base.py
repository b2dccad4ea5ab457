"""
Shared pydantic bases. Every schema reads straight from ORM objects.
"""
from datetime import datetime
from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True
    )


class TimestampedSchema(BaseSchema):
    """For rows carrying created_at / updated_at"""
    created_at: datetime
    updated_at: datetime
