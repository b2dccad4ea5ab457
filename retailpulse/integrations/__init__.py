from .base import CatalogSource, CatalogSnapshot, ProductRecord, SaleRecord
from .database_source import DatabaseCatalogSource
from .api_source import ApiCatalogSource

__all__ = [
    'CatalogSource',
    'CatalogSnapshot',
    'ProductRecord',
    'SaleRecord',
    'DatabaseCatalogSource',
    'ApiCatalogSource',
]
