# retailpulse/cli/stock_report.py
"""
Print the stock dashboard of a running RetailPulse instance.

    python -m retailpulse.cli.stock_report --base-url http://localhost:8000 --email owner@shop --password ...
"""

import asyncio
import click

from retailpulse.core.enums import StockStatus
from retailpulse.integrations.api_source import ApiCatalogSource
from retailpulse.services import stock_classifier
from retailpulse.services.inventory_service import InventoryService


@click.command()
@click.option("--base-url", default="http://localhost:8000", show_default=True)
@click.option("--email", envvar="RETAILPULSE_EMAIL", required=True)
@click.option("--password", envvar="RETAILPULSE_PASSWORD", required=True)
@click.option("--status", type=click.Choice([s.value for s in StockStatus]), default=None,
              help="Only list products with this status")
def stock_report(base_url: str, email: str, password: str, status: str):
    """Summarise stock health from the REST API"""
    service = InventoryService(ApiCatalogSource(base_url, auth=(email, password)))

    items = asyncio.run(service.get_all())
    summary = stock_classifier.summarize(items)
    if status:
        items = stock_classifier.filter_by_status(items, StockStatus(status))

    click.echo(f"Products: {summary.total_products}  Stock value: {summary.total_stock_value:.2f}")
    click.echo(
        f"Healthy: {summary.healthy_stock_products}  Low: {summary.low_stock_products}  "
        f"Out: {summary.out_of_stock_products}  Dead: {summary.dead_stock_products}"
    )
    for item in items:
        last_sold = item.last_sold.strftime("%Y-%m-%d") if item.last_sold else "never"
        click.echo(f"{item.id:>6}  {item.status.value:<8} {item.stock:>6}  {last_sold:<10}  {item.name}")


if __name__ == "__main__":
    stock_report()
