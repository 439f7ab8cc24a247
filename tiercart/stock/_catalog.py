"""
Catalog client — GET /products/{id} over httpx.

Note: Every failure comes back as Error(CatalogError); nothing raises
out of fetch_product(). What to do with the error is the validator's
StockCheckPolicy decision, not the client's.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from combinators import flow, lift as L
from tiercart._types import Lazy, ProductId
from tiercart.stock._types import ProductRecord, CatalogError, CatalogErrorKind

logger = logging.getLogger(__name__)


class ProductNotFound(LookupError):
    """Envelope reported no product."""


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog Client
# ═══════════════════════════════════════════════════════════════════════════════


class CatalogClient:
    """
    Read-only client for the catalog product endpoint.

    Example:
        async with httpx.AsyncClient(base_url="https://shop.example/api") as http:
            catalog = CatalogClient(http)
            result = await catalog.fetch_product("42")

    Note: Timeouts belong to the injected httpx client. A stuck call
    stalls only the operation awaiting it.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        price_scale: int = 1,
        retries: int = 0,
        retry_delay: float = 0.0,
    ) -> None:
        self._http = http
        self._price_scale = price_scale
        self._retries = retries
        self._retry_delay = retry_delay

    def fetch_product(self, product_id: ProductId) -> Lazy[ProductRecord, CatalogError]:
        """
        Fetch live stock and price data for one product.

        Connection errors are retried `retries` times; NOT_FOUND, HTTP and
        PARSE errors are final.
        """

        async def _fetch() -> ProductRecord:
            logger.debug("GET /products/%s", product_id)
            response = await self._http.get(f"/products/{quote(str(product_id), safe='')}")
            response.raise_for_status()
            return self._parse(product_id, response.json())

        lazy = L.catching_async(_fetch, on_error=lambda e: to_catalog_error(product_id, e))
        if self._retries <= 0:
            return lazy
        return (
            flow(lazy)
            .retry(
                times=self._retries + 1,
                delay_seconds=self._retry_delay,
                retry_on=lambda err: err.kind is CatalogErrorKind.CONNECTION,
            )
            .compile()
        )

    def _parse(self, product_id: ProductId, payload: Any) -> ProductRecord:
        if not isinstance(payload, dict):
            raise ValueError(f"Expected JSON object, got {type(payload).__name__}")
        data = payload.get("data")
        if not payload.get("success") or not data:
            raise ProductNotFound(product_id)
        if not isinstance(data, dict):
            raise ValueError("Envelope data is not an object")
        return ProductRecord.from_payload(data, self._price_scale)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> CatalogClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


# ═══════════════════════════════════════════════════════════════════════════════
# Exception → CatalogError
# ═══════════════════════════════════════════════════════════════════════════════


def to_catalog_error(product_id: ProductId, exc: Exception) -> CatalogError:
    """Classify an exception raised while fetching a product."""
    match exc:
        case ProductNotFound():
            return CatalogError(CatalogErrorKind.NOT_FOUND, "Product not found", product_id)
        case httpx.HTTPStatusError(response=response) if response.status_code == 404:
            return CatalogError(CatalogErrorKind.NOT_FOUND, "Product not found", product_id)
        case httpx.HTTPStatusError(response=response):
            return CatalogError(
                CatalogErrorKind.HTTP,
                f"Catalog responded {response.status_code}",
                product_id,
            )
        case httpx.TransportError():
            return CatalogError(CatalogErrorKind.CONNECTION, str(exc) or type(exc).__name__, product_id)
        case ValueError() | TypeError() | KeyError() | ArithmeticError():
            return CatalogError(CatalogErrorKind.PARSE, str(exc), product_id)
        case _:
            return CatalogError(CatalogErrorKind.CONNECTION, repr(exc), product_id)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CatalogClient",
    "ProductNotFound",
    "to_catalog_error",
)
