from typing import List

from fastapi import APIRouter, Depends, HTTPException

from retailpulse.core.enums import UserRole
from retailpulse.core.exceptions import NotFoundError
from retailpulse.core.security import require_roles_context
from retailpulse.dependencies import RequestContext
from retailpulse.schemas.alert import AlertCheckResult, StockAlertRead
from retailpulse.services.alert_service import AlertService

router = APIRouter(prefix="/api/stock-alerts", tags=["alerts"])

managers = require_roles_context(UserRole.OWNER, UserRole.ADMIN)


@router.get("", response_model=List[StockAlertRead])
async def list_alerts(ctx: RequestContext = Depends(managers)):
    return await AlertService(ctx.db).list_alerts()


@router.post("/check", response_model=AlertCheckResult)
async def run_alert_checks(ctx: RequestContext = Depends(managers)):
    return await AlertService(ctx.db).run_checks()


@router.post("/{alert_id}/acknowledge")
async def acknowledge_alert(alert_id: int, ctx: RequestContext = Depends(managers)):
    try:
        await AlertService(ctx.db).acknowledge(alert_id, user_id=ctx.user_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Alert not found")
    return {"message": "Alert acknowledged"}
