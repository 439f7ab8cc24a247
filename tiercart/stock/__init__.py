"""
Stock — catalog access and availability checks.

    from tiercart import stock as S

    async with httpx.AsyncClient(base_url=url, timeout=5.0) as http:
        validator = S.StockValidator(S.CatalogClient(http), policy=S.FAIL_OPEN)
        availability = await validator.check_availability("42", 3)
"""

from __future__ import annotations

from tiercart.stock._types import (
    UNLIMITED,
    DEFAULT_LOW_STOCK_THRESHOLD,
    ProductRecord,
    Availability,
    StockStatus,
    CatalogErrorKind,
    CatalogError,
)
from tiercart.stock._policy import (
    StockCheckPolicy,
    FAIL_OPEN,
    FAIL_CLOSED,
    UNVERIFIED_REASON,
    NOT_FOUND_REASON,
)
from tiercart.stock._catalog import (
    CatalogClient,
    ProductNotFound,
    to_catalog_error,
)
from tiercart.stock._validator import (
    ProductSource,
    assess,
    stock_status,
    StockValidator,
)

__all__ = (
    # Types
    "UNLIMITED",
    "DEFAULT_LOW_STOCK_THRESHOLD",
    "ProductRecord",
    "Availability",
    "StockStatus",
    "CatalogErrorKind",
    "CatalogError",
    # Policy
    "StockCheckPolicy",
    "FAIL_OPEN",
    "FAIL_CLOSED",
    "UNVERIFIED_REASON",
    "NOT_FOUND_REASON",
    # Catalog
    "CatalogClient",
    "ProductNotFound",
    "to_catalog_error",
    # Validator
    "ProductSource",
    "assess",
    "stock_status",
    "StockValidator",
)
