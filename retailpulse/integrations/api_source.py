"""
httpx client for reading the catalog from a running RetailPulse API.

Used by tooling that runs outside the API process (see ``retailpulse.cli.stock_report``).
Transport errors (``httpx.RequestError``) are not caught; non-2xx responses raise
``CatalogFetchError``.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

import httpx

from retailpulse.core.exceptions import CatalogFetchError, ProductNotFoundError
from retailpulse.core.utils import utc_now
from retailpulse.integrations.base import CatalogSource, CatalogSnapshot, ProductRecord, SaleRecord
from retailpulse.schemas.base import BaseSchema

logger = logging.getLogger(__name__)


class _ProductPayload(BaseSchema):
    id: int
    name: str
    category: str
    stock: int = 0
    cost_price: float = 0.0
    is_active: bool = True
    expiry_date: Optional[date] = None


class _ItemPayload(BaseSchema):
    product_id: int


class _TransactionPayload(BaseSchema):
    id: int
    created_at: Optional[datetime] = None
    items: List[_ItemPayload] = []


class ApiCatalogSource(CatalogSource):

    def __init__(
        self,
        base_url: str,
        auth: Optional[Tuple[str, str]] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth = auth
        self.timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            timeout=self.timeout,
            transport=self._transport,
        )

    @staticmethod
    def _check(response: httpx.Response, what: str) -> None:
        if response.status_code >= 400:
            logger.error(f"RetailPulse API error ({what}): {response.status_code} {response.text}")
            raise CatalogFetchError(f"Failed to {what}: HTTP {response.status_code}")

    async def fetch_snapshot(self) -> CatalogSnapshot:
        async with self._client() as client:
            products_response, transactions_response = await asyncio.gather(
                client.get("/api/products"),
                client.get("/api/transactions"),
            )
        taken_at = utc_now()

        self._check(products_response, "fetch products")
        self._check(transactions_response, "fetch transactions")

        products = [
            ProductRecord(**_ProductPayload.model_validate(raw).model_dump())
            for raw in products_response.json() or []
        ]
        sales = []
        for raw in transactions_response.json() or []:
            tx = _TransactionPayload.model_validate(raw)
            sales.append(SaleRecord(
                id=tx.id,
                created_at=tx.created_at,
                product_ids=tuple(item.product_id for item in tx.items),
            ))

        return CatalogSnapshot(products=products, sales=sales, taken_at=taken_at, source=self.base_url)

    async def set_stock(self, product_id: int, stock: int, user_id: Optional[int] = None) -> None:
        async with self._client() as client:
            response = await client.put(f"/api/products/{product_id}", json={"stock": stock})
        if response.status_code == 404:
            raise ProductNotFoundError(f"Product with ID {product_id} not found")
        self._check(response, f"update stock for product {product_id}")

    async def decrease_stock(self, product_id: int, quantity: int, user_id: Optional[int] = None) -> Optional[int]:
        async with self._client() as client:
            response = await client.post(
                f"/api/inventory/{product_id}/decrease",
                json={"quantity": quantity},
            )
        if response.status_code == 404:
            return None
        self._check(response, f"decrease stock for product {product_id}")
        return response.json().get("stock")
