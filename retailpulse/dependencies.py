from dataclasses import dataclass
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.database import async_session
from retailpulse.models.user import User


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


@dataclass
class RequestContext:
    """What a request runs with: its session, the signed-in user and the shop clock."""
    db: AsyncSession
    user: User
    now: datetime

    @property
    def user_id(self) -> int:
        return self.user.id

