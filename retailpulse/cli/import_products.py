# retailpulse/cli/import_products.py
"""
Bulk-create products from a CSV file.

    python -m retailpulse.cli.import_products products.csv
"""

import asyncio
import click

from retailpulse.core.exceptions import ValidationError
from retailpulse.database import async_session
from retailpulse.services.csv_handler import ProductCSVHandler


@click.command()
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--user-id", type=int, default=None, help="Recorded as the creator of each product")
def import_products(csv_file: str, user_id: int):
    """Import products from CSV_FILE, skipping rows that fail"""

    async def _import():
        async with async_session() as db:
            return await ProductCSVHandler(db).import_csv(csv_file, user_id=user_id)

    try:
        result = asyncio.run(_import())
    except ValidationError as e:
        raise click.ClickException(str(e))

    click.echo(f"Imported: {result.success}  Failed: {result.failed}")
    for error in result.errors:
        click.echo(f"  {error}")


if __name__ == "__main__":
    import_products()
