# retailpulse/models/user.py

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum
from sqlalchemy.sql import func

from retailpulse.core.enums import UserRole
from retailpulse.core.utils import utc_now
from retailpulse.database import Base


class User(Base):
    """Staff account. Passwords are stored as bcrypt hashes only."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(120), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(UserRole, name="userrole", native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.STAFF,
    )
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<User {self.email} role={self.role}>"
