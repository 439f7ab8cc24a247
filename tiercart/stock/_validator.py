"""
Stock validator — "is this quantity fulfillable now?".
"""

from __future__ import annotations

import logging
from typing import Protocol

from kungfu import Ok, Error

from tiercart._types import Lazy, ProductId
from tiercart.stock._types import (
    UNLIMITED,
    DEFAULT_LOW_STOCK_THRESHOLD,
    ProductRecord,
    Availability,
    StockStatus,
    CatalogError,
)
from tiercart.stock._policy import StockCheckPolicy, FAIL_OPEN

logger = logging.getLogger(__name__)


class ProductSource(Protocol):
    """Anything that can fetch a live product record."""

    def fetch_product(self, product_id: ProductId) -> Lazy[ProductRecord, CatalogError]: ...


# ═══════════════════════════════════════════════════════════════════════════════
# assess() — Pure Availability Rule
# ═══════════════════════════════════════════════════════════════════════════════


def assess(record: ProductRecord, requested_quantity: int) -> Availability:
    """
    Availability of requested_quantity given live product data.

    Rules, in order:
        stock tracking off           → available, UNLIMITED
        stock >= requested           → available
        stock == 0 and backorders    → available, 0
        otherwise                    → not available
    """
    if not record.stock_enabled:
        return Availability(True, "Stock tracking disabled", UNLIMITED, record)

    stock = record.stock_quantity
    if stock >= requested_quantity:
        return Availability(True, "Stock available", stock, record)
    if stock == 0 and record.allow_backorders:
        return Availability(True, "Available for backorder", 0, record)

    reason = f"Only {stock} available" if stock > 0 else "Out of stock"
    return Availability(False, reason, max(stock, 0), record)


def stock_status(
    record: ProductRecord,
    low_stock_threshold: int | None = None,
) -> StockStatus | None:
    """
    Display classification, or None when stock tracking is disabled.

    Threshold precedence: explicit argument, then the product's own
    lowStockThreshold, then DEFAULT_LOW_STOCK_THRESHOLD.
    """
    if not record.stock_enabled:
        return None
    threshold = low_stock_threshold
    if threshold is None:
        threshold = record.low_stock_threshold
    if threshold is None:
        threshold = DEFAULT_LOW_STOCK_THRESHOLD

    qty = record.stock_quantity
    if qty > threshold:
        return StockStatus.IN_STOCK
    if qty > 0:
        return StockStatus.LOW_STOCK
    if qty == 0 and record.allow_backorders:
        return StockStatus.ON_BACKORDER
    return StockStatus.OUT_OF_STOCK


# ═══════════════════════════════════════════════════════════════════════════════
# Stock Validator
# ═══════════════════════════════════════════════════════════════════════════════


class StockValidator:
    """
    Async stock check against the catalog.

    Example:
        validator = StockValidator(catalog, policy=FAIL_OPEN)
        availability = await validator.check_availability("42", 3)
        if not availability.available:
            print(availability.reason)

    Note: Never raises and never returns an error. Catalog failures are
    turned into an Availability by the policy.
    """

    def __init__(
        self,
        source: ProductSource,
        policy: StockCheckPolicy = FAIL_OPEN,
        low_stock_threshold: int | None = None,
    ) -> None:
        self._source = source
        self._policy = policy
        self._low_stock_threshold = low_stock_threshold

    @property
    def policy(self) -> StockCheckPolicy:
        return self._policy

    async def check_availability(self, product_id: ProductId, requested_quantity: int) -> Availability:
        result = await self._source.fetch_product(product_id)
        match result:
            case Ok(record):
                availability = assess(record, requested_quantity)
                if not availability.available:
                    logger.info(
                        "Stock check rejected %s x%d: %s",
                        product_id,
                        requested_quantity,
                        availability.reason,
                    )
                return availability
            case Error(err):
                decision = self._policy.decide(err)
                logger.warning(
                    "Stock for %s unverifiable (%s: %s); %s -> available=%s",
                    product_id,
                    err.kind.name,
                    err.message,
                    self._policy.name,
                    decision.available,
                )
                return decision

    async def status(self, product_id: ProductId) -> StockStatus | None:
        """
        Display classification from live data.

        None when stock tracking is off or the catalog cannot answer;
        the policy never invents a status.
        """
        result = await self._source.fetch_product(product_id)
        match result:
            case Ok(record):
                return stock_status(record, self._low_stock_threshold)
            case Error(err):
                logger.warning("No stock status for %s (%s: %s)", product_id, err.kind.name, err.message)
                return None


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "ProductSource",
    "assess",
    "stock_status",
    "StockValidator",
)
