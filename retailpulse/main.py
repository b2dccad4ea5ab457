# retailpulse/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from retailpulse import models  # noqa: F401  registers every table on Base.metadata
from retailpulse.core.config import get_settings
from retailpulse.core.logging_config import configure_logging
from retailpulse.database import Base, async_session, engine
from retailpulse.routes import (
    admin,
    alerts,
    analytics,
    auth,
    customers,
    dashboard,
    expenses,
    health,
    inventory,
    products,
    refunds,
    sms,
    transactions,
)
from retailpulse.scheduler import start_scheduler, stop_scheduler
from retailpulse.services.user_service import UserService

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    settings = get_settings()

    if settings.AUTO_CREATE_TABLES:
        logger.info("Creating database tables")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async with async_session() as db:
        await UserService(db).ensure_default_owner(settings)

    await start_scheduler()
    try:
        yield  # This is where the app runs
    finally:
        await stop_scheduler()


app = FastAPI(
    title="RetailPulse",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(products.router)
app.include_router(inventory.router)
app.include_router(transactions.router)
app.include_router(customers.router)
app.include_router(refunds.router)
app.include_router(expenses.router)
app.include_router(alerts.router)
app.include_router(sms.router)
app.include_router(admin.router)
app.include_router(dashboard.router)
app.include_router(analytics.router)
app.include_router(health.router)  # Health check should be accessible without auth


@app.get("/")
async def root():
    return {"service": "RetailPulse", "docs": "/docs"}
