"""
connect() — wire config, catalog, validator, persistence and store.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from tiercart._config import CartConfig
from tiercart.cart import CartStore
from tiercart.persistence import CartPersistence, Medium
from tiercart.stock import CatalogClient, StockValidator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def connect(
    config: CartConfig,
    medium: Medium,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[CartStore]:
    """
    Open a CartStore restored from medium.

    Example:
        async with connect(CartConfig.from_env(), FileMedium("~/.shop")) as store:
            await store.add_to_cart(CartCandidate("42", "Widget", 2000))

    The catalog HTTP client is closed on exit; the medium is left alone.
    """
    async with httpx.AsyncClient(
        base_url=config.catalog_url,
        timeout=config.timeout.total_seconds(),
        transport=transport,
    ) as http:
        catalog = CatalogClient(
            http,
            price_scale=config.price_scale,
            retries=config.catalog_retries,
        )
        validator = StockValidator(
            catalog,
            policy=config.policy,
            low_stock_threshold=config.low_stock_threshold,
        )
        persistence = CartPersistence(medium, key=config.storage_key)
        store = await CartStore.open(validator, persistence)
        logger.info(
            "Cart connected to %s (%s, %s)",
            config.catalog_url,
            config.policy.name,
            medium.name,
        )
        yield store


__all__ = ("connect",)
