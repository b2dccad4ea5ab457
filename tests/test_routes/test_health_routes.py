# tests/test_routes/test_health_routes.py
import pytest


@pytest.mark.asyncio
async def test_health(client):
    assert (await client.get("/health")).json() == {"status": "healthy", "service": "RetailPulse"}


@pytest.mark.asyncio
async def test_database_health(client):
    assert (await client.get("/health/db")).json()["database"] == "connected"


@pytest.mark.asyncio
async def test_scheduler_health_before_start(client):
    assert (await client.get("/health/scheduler")).json() == {"status": "not_initialized", "jobs": []}
