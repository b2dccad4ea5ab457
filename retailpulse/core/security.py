"""
HTTP Basic authentication against the users table
"""

from typing import Callable

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.enums import UserRole
from retailpulse.core.utils import business_now
from retailpulse.dependencies import RequestContext, get_db
from retailpulse.models.user import User
from retailpulse.services.user_service import UserService

security = HTTPBasic()


async def get_current_user(
    credentials: HTTPBasicCredentials = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Email + password checked against the bcrypt hash. Inactive users are refused.
    """
    user = await UserService(db).authenticate(credentials.username, credentials.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Basic"},
        )
    return user


def require_roles(*roles: UserRole) -> Callable:
    """
    Dependency allowing only the given roles
    Usage: @router.post("/", dependencies=[Depends(require_roles(UserRole.OWNER))])
    """
    allowed = {UserRole(r) for r in roles}

    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="You do not have permission to perform this action",
            )
        return user

    return checker


def _context(user_dependency: Callable) -> Callable:
    async def build(
        user: User = Depends(user_dependency),
        db: AsyncSession = Depends(get_db),
    ) -> RequestContext:
        return RequestContext(db=db, user=user, now=business_now())

    return build


get_request_context = _context(get_current_user)


def require_roles_context(*roles: UserRole) -> Callable:
    """Like get_request_context, restricted to the given roles"""
    return _context(require_roles(*roles))
