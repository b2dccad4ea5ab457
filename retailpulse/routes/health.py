from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.dependencies import get_db
from retailpulse.scheduler import get_scheduler_status

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    """Basic health check"""
    return {"status": "healthy", "service": "RetailPulse"}


@router.get("/health/db")
async def database_health(db: AsyncSession = Depends(get_db)):
    """Check database connectivity"""
    try:
        await db.execute(text("SELECT 1"))
        return {"status": "healthy", "database": "connected"}
    except Exception as e:
        return {"status": "unhealthy", "database": "error", "error": str(e)}


@router.get("/health/scheduler")
async def scheduler_health():
    return await get_scheduler_status()
