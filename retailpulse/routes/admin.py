# retailpulse/routes/admin.py
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.enums import UserRole
from retailpulse.core.exceptions import NotFoundError, ValidationError
from retailpulse.core.security import require_roles_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.audit import AuditLogRead
from retailpulse.schemas.user import UserCreate, UserPasswordReset, UserProfileUpdate, UserRead, UserRoleUpdate
from retailpulse.services.audit_logger import AuditLogger
from retailpulse.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

managers = require_roles_context(UserRole.ADMIN, UserRole.OWNER)


@router.get("/users", response_model=List[UserRead])
async def list_users(ctx: RequestContext = Depends(managers)):
    return await UserService(ctx.db).list_users()


@router.post("/users", response_model=UserRead, status_code=201)
async def create_user(data: UserCreate, ctx: RequestContext = Depends(managers)):
    try:
        return await UserService(ctx.db).create_user(data, actor_id=ctx.user_id)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/users/{user_id}/role", response_model=UserRead)
async def update_role(user_id: int, data: UserRoleUpdate, ctx: RequestContext = Depends(managers)):
    try:
        return await UserService(ctx.db).update_role(user_id, data.role, actor_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/users/{user_id}/status", response_model=UserRead)
async def toggle_status(user_id: int, ctx: RequestContext = Depends(managers)):
    try:
        return await UserService(ctx.db).toggle_status(user_id, actor_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")


@router.patch("/users/{user_id}/password")
async def reset_password(user_id: int, data: UserPasswordReset, ctx: RequestContext = Depends(managers)):
    try:
        await UserService(ctx.db).reset_password(user_id, data.password, actor_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Password updated"}


@router.patch("/users/{user_id}", response_model=UserRead)
async def update_profile(user_id: int, data: UserProfileUpdate, ctx: RequestContext = Depends(managers)):
    try:
        return await UserService(ctx.db).update_profile(user_id, data, actor_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/users/{user_id}")
async def delete_user(user_id: int, ctx: RequestContext = Depends(managers)):
    try:
        await UserService(ctx.db).delete_user(user_id, actor_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "User deleted"}


@router.get("/audit-logs", response_model=List[AuditLogRead])
async def list_audit_logs(ctx: RequestContext = Depends(managers)):
    return await AuditLogger(ctx.db).list_logs()


@router.delete("/audit-logs")
async def clear_audit_logs(ctx: RequestContext = Depends(require_roles_context(UserRole.OWNER))):
    deleted = await AuditLogger(ctx.db).clear_logs()
    return {"deleted": deleted}
