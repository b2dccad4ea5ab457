# retailpulse/database.py

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from contextlib import asynccontextmanager
from retailpulse.core.config import get_settings
import os

settings = get_settings()

# Use environment variable directly if settings is empty
database_url = settings.DATABASE_URL or os.environ.get('DATABASE_URL', '')
if not database_url:
    raise ValueError("DATABASE_URL is not set in environment variables")

# Convert postgresql:// to postgresql+asyncpg:// for async support
if database_url.startswith('postgresql://'):
    database_url = database_url.replace('postgresql://', 'postgresql+asyncpg://', 1)


def build_engine_options(url: str) -> dict:
    """Engine keyword arguments for the given database URL."""
    options = {"echo": settings.DB_ECHO, "future": True}
    if settings.DB_ISOLATION_LEVEL:
        options["isolation_level"] = settings.DB_ISOLATION_LEVEL
    # SQLite engines use a static/singleton pool that rejects sizing arguments
    if not url.startswith("sqlite"):
        options.update(
            pool_size=10,
            max_overflow=20,
            pool_timeout=30,
            pool_recycle=1800,
        )
    return options


engine = create_async_engine(database_url, **build_engine_options(database_url))

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

Base = declarative_base()


@asynccontextmanager
async def get_session() -> AsyncSession:
    session = async_session()
    try:
        yield session
    finally:
        await session.close()
