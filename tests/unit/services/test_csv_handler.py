# tests/unit/services/test_csv_handler.py
import io

import pytest

from retailpulse.core.exceptions import ValidationError
from retailpulse.services.csv_handler import ProductCSVHandler

TEMPLATE = (
    "Name,Category,Cost_Price,Selling_Price,Stock,SKU,Description\n"
    '"Sample Product","Groceries",100,150,50,SKU001,"Optional, with comma"\n'
    '"Another Product","Dairy",80,120,30,SKU002,""\n'
)


def test_read_rows_normalises_headers_and_blanks():
    rows = ProductCSVHandler(None).read_rows(io.StringIO(TEMPLATE))

    assert rows[0] == {
        "name": "Sample Product",
        "category": "Groceries",
        "cost_price": "100",
        "selling_price": "150",
        "stock": "50",
        "sku": "SKU001",
        "description": "Optional, with comma",
        "expiry_date": None,
    }
    assert rows[1]["description"] is None


def test_missing_columns_are_named():
    with pytest.raises(ValidationError, match="Missing required columns: stock, sku"):
        ProductCSVHandler(None).read_rows(io.StringIO("name,category,cost_price,selling_price\nTea,Bev,1,2\n"))


@pytest.mark.parametrize("text", ["", "name,category,cost_price,selling_price,stock,sku\n"])
def test_file_without_data_rows(text):
    with pytest.raises(ValidationError, match="at least one data row"):
        ProductCSVHandler(None).read_rows(io.StringIO(text))


@pytest.mark.asyncio
async def test_import_csv_reports_failed_rows(db_session, make_product):
    await make_product("Existing", sku="SKU002")

    result = await ProductCSVHandler(db_session).import_csv(io.StringIO(TEMPLATE), user_id=1)

    assert (result.success, result.failed) == (1, 1)
    assert result.errors == ["SKU002: SKU 'SKU002' already exists"]
