# retailpulse/services/csv_handler.py
"""
Bulk product import from CSV.

The file needs a header row with name, category, cost_price, selling_price,
stock and sku; description and expiry_date are optional. Header names are
matched case-insensitively. Rows are created one at a time through
ProductService.bulk_import, so one bad row never blocks the rest.
"""

import logging
from typing import Dict, IO, List, Optional, Tuple, Union

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from retailpulse.core.exceptions import ValidationError
from retailpulse.schemas.product import BulkImportResult
from retailpulse.services.product_service import ProductService

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ('name', 'category', 'cost_price', 'selling_price', 'stock', 'sku')
OPTIONAL_COLUMNS = ('description', 'expiry_date')

CsvSource = Union[str, IO]


def load_frame(source: CsvSource) -> pd.DataFrame:
    """Read every cell as text; blank cells stay empty strings."""
    try:
        df = pd.read_csv(source, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError:
        raise ValidationError("CSV file must have a header row and at least one data row")
    df.columns = [str(column).strip().lower() for column in df.columns]
    return df


def validate_template(df: pd.DataFrame) -> Tuple[bool, List[str]]:
    missing = [column for column in REQUIRED_COLUMNS if column not in df.columns]
    return len(missing) == 0, missing


def frame_to_rows(df: pd.DataFrame) -> List[Dict]:
    rows = []
    for _, row in df.iterrows():
        record = {column: str(row[column]).strip() for column in REQUIRED_COLUMNS}
        for column in OPTIONAL_COLUMNS:
            value = str(row[column]).strip() if column in df.columns else ''
            record[column] = value or None
        rows.append(record)
    return rows


class ProductCSVHandler:
    """Reads a product CSV and feeds its rows to ProductService.bulk_import"""

    def __init__(self, session: AsyncSession):
        self.session = session

    def read_rows(self, source: CsvSource) -> List[Dict]:
        """
        Raises:
            ValidationError: If the file is empty, has no data rows or lacks required columns
        """
        df = load_frame(source)
        valid, missing = validate_template(df)
        if not valid:
            raise ValidationError(f"Missing required columns: {', '.join(missing)}")
        if df.empty:
            raise ValidationError("CSV file must have a header row and at least one data row")
        return frame_to_rows(df)

    async def import_csv(self, source: CsvSource, user_id: Optional[int] = None) -> BulkImportResult:
        rows = self.read_rows(source)
        logger.info(f"Importing {len(rows)} products from CSV")
        return await ProductService(self.session).bulk_import(rows, user_id=user_id)
