from fastapi import APIRouter, Depends

from retailpulse.core.security import get_current_user
from retailpulse.models.user import User
from retailpulse.schemas.user import UserRead

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.get("/me", response_model=UserRead)
async def current_user(user: User = Depends(get_current_user)):
    return user
