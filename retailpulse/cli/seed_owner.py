# retailpulse/cli/seed_owner.py
import asyncio
import click

from retailpulse.core.enums import UserRole
from retailpulse.core.exceptions import ValidationError
from retailpulse.database import async_session
from retailpulse.schemas.user import UserCreate
from retailpulse.services.user_service import UserService


@click.command()
@click.option("--name", required=True)
@click.option("--email", required=True)
@click.password_option()
def seed_owner(name: str, email: str, password: str):
    """Create the owner account"""

    async def _seed():
        async with async_session() as db:
            user = await UserService(db).create_user(
                UserCreate(name=name, email=email, password=password, role=UserRole.OWNER)
            )
        click.echo(f"Owner created: {user.email} (id={user.id})")

    try:
        asyncio.run(_seed())
    except ValidationError as e:
        raise click.ClickException(str(e))


if __name__ == "__main__":
    seed_owner()
