from datetime import datetime
from typing import Optional
from pydantic import Field

from retailpulse.core.enums import UserRole
from retailpulse.schemas.base import BaseSchema


class UserRead(BaseSchema):
    id: int
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime


class UserCreate(BaseSchema):
    name: str = Field(min_length=1)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.CASHIER


class UserRoleUpdate(BaseSchema):
    role: UserRole


class UserPasswordReset(BaseSchema):
    password: str


class UserProfileUpdate(BaseSchema):
    name: Optional[str] = None
    email: Optional[str] = None
