# retailpulse/services/user_service.py
"""
Staff accounts.

Passwords are hashed with bcrypt. There is at most one owner: creating or promoting a
second owner is refused. Every change is written to the audit log.
"""

import logging
from typing import List, Optional

import bcrypt
from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.config import Settings, get_settings
from retailpulse.core.enums import AuditAction, UserRole
from retailpulse.core.exceptions import (
    DuplicateUserError,
    OwnerAlreadyExistsError,
    UserNotFoundError,
    ValidationError,
)
from retailpulse.core.utils import model_to_schema, models_to_schemas
from retailpulse.models.user import User
from retailpulse.schemas.user import UserCreate, UserProfileUpdate, UserRead
from retailpulse.services.audit_logger import AuditLogger

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf8"), bcrypt.gensalt()).decode("utf8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf8"), password_hash.encode("utf8"))
    except ValueError:
        # malformed hash
        return False


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.audit = AuditLogger(db)

    async def _get(self, user_id: int) -> User:
        user = await self.db.get(User, user_id)
        if not user:
            raise UserNotFoundError("User not found")
        return user

    async def _owner_exists(self, exclude_id: Optional[int] = None) -> bool:
        condition = User.role == UserRole.OWNER
        if exclude_id is not None:
            condition = condition & (User.id != exclude_id)
        return await self.db.scalar(select(exists().where(condition)))

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.db.scalar(select(User).where(User.email == email))

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """The active user with these credentials, or None"""
        user = await self.get_by_email(email)
        if user is None or not user.is_active:
            return None
        if not verify_password(password, user.password_hash):
            return None
        return user

    async def list_users(self) -> List[UserRead]:
        result = await self.db.execute(select(User).order_by(User.created_at, User.id))
        return await models_to_schemas(result.scalars().all(), UserRead)

    async def create_user(self, data: UserCreate, actor_id: Optional[int] = None) -> UserRead:
        if data.role == UserRole.OWNER and await self._owner_exists():
            raise OwnerAlreadyExistsError("An owner already exists")
        if await self.get_by_email(data.email):
            raise DuplicateUserError("User already exists")

        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
            is_active=True,
        )
        self.db.add(user)
        await self.db.flush()

        await self.audit.log(
            action=AuditAction.CREATE.value,
            user_id=actor_id,
            entity_type="user",
            entity_id=user.id,
            new_values={"name": user.name, "email": user.email, "role": user.role.value},
            notes="User created",
        )
        await self.db.commit()
        await self.db.refresh(user)
        logger.info(f"Created user {user.email} ({user.role.value})")
        return await model_to_schema(user, UserRead)

    async def update_role(self, user_id: int, role: UserRole, actor_id: Optional[int] = None) -> UserRead:
        user = await self._get(user_id)
        if role == UserRole.OWNER and await self._owner_exists(exclude_id=user.id):
            raise OwnerAlreadyExistsError("Only one owner is allowed")

        user.role = role
        await self.audit.log(
            action=AuditAction.UPDATE.value,
            user_id=actor_id,
            entity_type="user",
            entity_id=user.id,
            new_values={"role": role.value},
            notes="User role updated",
        )
        await self.db.commit()
        await self.db.refresh(user)
        return await model_to_schema(user, UserRead)

    async def toggle_status(self, user_id: int, actor_id: Optional[int] = None) -> UserRead:
        user = await self._get(user_id)
        user.is_active = not user.is_active

        await self.audit.log(
            action=AuditAction.UPDATE.value,
            user_id=actor_id,
            entity_type="user",
            entity_id=user.id,
            new_values={"is_active": user.is_active},
            notes="User status toggled",
        )
        await self.db.commit()
        await self.db.refresh(user)
        return await model_to_schema(user, UserRead)

    async def reset_password(self, user_id: int, password: str, actor_id: Optional[int] = None) -> None:
        if not password or len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        user = await self._get(user_id)
        user.password_hash = hash_password(password)

        await self.audit.log(
            action=AuditAction.UPDATE.value,
            user_id=actor_id,
            entity_type="user",
            entity_id=user.id,
            notes="User password reset",
        )
        await self.db.commit()

    async def update_profile(self, user_id: int, data: UserProfileUpdate, actor_id: Optional[int] = None) -> UserRead:
        if not data.name and not data.email:
            raise ValidationError("Nothing to update")

        user = await self._get(user_id)
        if data.email and data.email != user.email:
            other = await self.get_by_email(data.email)
            if other and other.id != user.id:
                raise DuplicateUserError("Email already in use")
            user.email = data.email
        if data.name:
            user.name = data.name

        await self.audit.log(
            action=AuditAction.UPDATE.value,
            user_id=actor_id,
            entity_type="user",
            entity_id=user.id,
            new_values={"name": user.name, "email": user.email},
            notes="User profile updated",
        )
        await self.db.commit()
        await self.db.refresh(user)
        return await model_to_schema(user, UserRead)

    async def delete_user(self, user_id: int, actor_id: Optional[int] = None) -> None:
        user = await self._get(user_id)
        await self.audit.log(
            action=AuditAction.DELETE.value,
            user_id=actor_id,
            entity_type="user",
            entity_id=user.id,
            old_values={"name": user.name, "email": user.email, "role": user.role.value},
            notes="User deleted",
        )
        await self.db.delete(user)
        await self.db.commit()
        logger.info(f"Deleted user {user_id}")

    async def ensure_default_owner(self, settings: Optional[Settings] = None) -> Optional[User]:
        """Create the configured owner account when there are no users at all"""
        settings = settings or get_settings()
        if await self.db.scalar(select(exists().where(User.id.isnot(None)))):
            return None

        user = User(
            name=settings.DEFAULT_OWNER_NAME,
            email=settings.DEFAULT_OWNER_EMAIL,
            password_hash=hash_password(settings.DEFAULT_OWNER_PASSWORD),
            role=UserRole.OWNER,
            is_active=True,
        )
        self.db.add(user)
        await self.db.commit()
        logger.warning(f"Created default owner account {user.email}; change its password")
        return user
