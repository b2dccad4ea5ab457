# tests/unit/cli/test_stock_report.py
import httpx
from click.testing import CliRunner

from retailpulse.cli import stock_report as stock_report_module
from retailpulse.cli.stock_report import stock_report
from retailpulse.integrations.api_source import ApiCatalogSource

PRODUCTS = [
    {"id": 1, "name": "Candles", "category": "Home", "stock": 0, "cost_price": 5.0},
    {"id": 2, "name": "Incense", "category": "Home", "stock": 40, "cost_price": 2.0},
]


def fake_source(transactions):
    def handler(request):
        if request.url.path == "/api/products":
            return httpx.Response(200, json=PRODUCTS)
        return httpx.Response(200, json=transactions)

    def build(base_url, auth=None):
        return ApiCatalogSource(base_url, auth=auth, transport=httpx.MockTransport(handler))

    return build


def test_report_lists_every_product(mocker):
    mocker.patch.object(stock_report_module, "ApiCatalogSource", side_effect=fake_source([]))

    result = CliRunner().invoke(stock_report, ["--email", "o@shop", "--password", "pw"])

    assert result.exit_code == 0, result.output
    assert "Products: 2  Stock value: 80.00" in result.output
    assert "Healthy: 0  Low: 0  Out: 1  Dead: 1" in result.output
    assert "Candles" in result.output and "Incense" in result.output


def test_report_status_filter(mocker):
    mocker.patch.object(stock_report_module, "ApiCatalogSource", side_effect=fake_source([]))

    result = CliRunner().invoke(stock_report, ["--email", "o@shop", "--password", "pw", "--status", "dead"])

    assert result.exit_code == 0, result.output
    assert "Incense" in result.output
    assert "Candles" not in result.output


def test_report_requires_credentials():
    result = CliRunner().invoke(stock_report, [], env={"RETAILPULSE_EMAIL": "", "RETAILPULSE_PASSWORD": ""})
    assert result.exit_code != 0


def test_report_reads_one_snapshot(mocker):
    seen = []

    def handler(request):
        seen.append(request.url.path)
        if request.url.path == "/api/products":
            return httpx.Response(200, json=PRODUCTS)
        return httpx.Response(200, json=[])

    mocker.patch.object(
        stock_report_module,
        "ApiCatalogSource",
        side_effect=lambda base_url, auth=None: ApiCatalogSource(base_url, auth=auth, transport=httpx.MockTransport(handler)),
    )

    result = CliRunner().invoke(stock_report, ["--email", "o@shop", "--password", "pw", "--status", "out"])

    assert result.exit_code == 0, result.output
    assert seen.count("/api/products") == 1
    # summary still covers every product when the listing is filtered
    assert "Products: 2" in result.output
    assert "Incense" not in result.output
