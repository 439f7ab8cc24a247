"""
Configuration — immutable settings with fluent builders.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from tiercart.persistence import DEFAULT_STORAGE_KEY
from tiercart.stock import StockCheckPolicy, FAIL_OPEN

ENV_PREFIX = "TIERCART_"

# ═══════════════════════════════════════════════════════════════════════════════
# Cart Config
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartConfig:
    """
    Cart engine configuration.

    Example:
        config = (
            CartConfig()
            .with_catalog("https://shop.example/api")
            .with_timeout(seconds=5)
            .with_policy(FAIL_CLOSED)
        )

    Note: Immutable — each method returns a new CartConfig.
    """

    catalog_url: str = "http://localhost:8000/api"
    timeout: timedelta = timedelta(seconds=10)
    catalog_retries: int = 0
    policy: StockCheckPolicy = FAIL_OPEN
    storage_key: str = DEFAULT_STORAGE_KEY
    price_scale: int = 1
    low_stock_threshold: int | None = None

    def with_catalog(self, url: str, *, retries: int | None = None) -> CartConfig:
        """Catalog base URL; products are read from {url}/products/{id}."""
        if not url.strip():
            raise ValueError("Catalog URL must not be empty")
        if retries is not None and retries < 0:
            raise ValueError("retries must be >= 0")
        return replace(
            self,
            catalog_url=url.strip().rstrip("/"),
            catalog_retries=self.catalog_retries if retries is None else retries,
        )

    def with_timeout(
        self,
        *,
        seconds: float | None = None,
        delta: timedelta | None = None,
    ) -> CartConfig:
        """
        HTTP timeout for catalog calls.

        Example:
            .with_timeout(seconds=5)
        """
        timeout = delta if delta is not None else timedelta(seconds=10 if seconds is None else seconds)
        if timeout.total_seconds() <= 0:
            raise ValueError("Timeout must be positive")
        return replace(self, timeout=timeout)

    def with_policy(self, policy: StockCheckPolicy) -> CartConfig:
        return replace(self, policy=policy)

    def with_storage_key(self, key: str) -> CartConfig:
        if not key:
            raise ValueError("Storage key must not be empty")
        return replace(self, storage_key=key)

    def with_price_scale(self, scale: int) -> CartConfig:
        """Minor units per catalog price unit (100 for cents from decimal prices)."""
        if scale < 1:
            raise ValueError("price_scale must be >= 1")
        return replace(self, price_scale=scale)

    def with_low_stock_threshold(self, threshold: int) -> CartConfig:
        """Override every product's own lowStockThreshold (default: theirs, else 10)."""
        if threshold < 0:
            raise ValueError("low_stock_threshold must be >= 0")
        return replace(self, low_stock_threshold=threshold)

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> CartConfig:
        """
        Read TIERCART_* variables (after loading a .env file if present).

            TIERCART_CATALOG_URL       catalog base URL
            TIERCART_TIMEOUT           seconds
            TIERCART_CATALOG_RETRIES   extra attempts on connection errors
            TIERCART_STOCK_POLICY      fail_open | fail_closed
            TIERCART_STORAGE_KEY       persistence key
            TIERCART_PRICE_SCALE       minor units per catalog unit
            TIERCART_LOW_STOCK         low stock threshold
        """
        load_dotenv(dotenv_path=env_file)
        config = cls()

        if url := _env("CATALOG_URL"):
            config = config.with_catalog(url)
        if timeout := _env("TIMEOUT"):
            config = config.with_timeout(seconds=float(timeout))
        if retries := _env("CATALOG_RETRIES"):
            config = config.with_catalog(config.catalog_url, retries=int(retries))
        if policy := _env("STOCK_POLICY"):
            try:
                config = config.with_policy(StockCheckPolicy[policy.upper()])
            except KeyError:
                raise ValueError(f"Unknown stock policy: {policy!r}") from None
        if key := _env("STORAGE_KEY"):
            config = config.with_storage_key(key)
        if scale := _env("PRICE_SCALE"):
            config = config.with_price_scale(int(scale))
        if threshold := _env("LOW_STOCK"):
            config = config.with_low_stock_threshold(int(threshold))
        return config


def _env(name: str) -> str | None:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


__all__ = (
    "ENV_PREFIX",
    "CartConfig",
)
