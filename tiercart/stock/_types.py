"""
Stock types — catalog records, availability answers, errors.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Final

from tiercart._types import ProductId
from tiercart.pricing import PriceSchedule

UNLIMITED: Final = math.inf
"""available_quantity when no ceiling applies."""

DEFAULT_LOW_STOCK_THRESHOLD: Final = 10

# ═══════════════════════════════════════════════════════════════════════════════
# Product Record — Catalog Snapshot
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ProductRecord:
    """
    Live product data from GET /products/{id}.

    Carries both the stock fields (for validation) and the price
    schedule (for re-stamping unit prices) from a single fetch.
    """

    id: ProductId
    stock_enabled: bool
    stock_quantity: int
    allow_backorders: bool
    schedule: PriceSchedule
    low_stock_threshold: int | None = None

    @classmethod
    def from_payload(cls, data: Mapping[str, Any], price_scale: int = 1) -> ProductRecord:
        """
        Parse the `data` object of the catalog envelope.

        Raises ValueError / TypeError on malformed fields.
        """
        if "id" not in data:
            raise ValueError("Product payload has no id")
        threshold = data.get("lowStockThreshold")
        return cls(
            id=str(data["id"]),
            stock_enabled=_flag(data.get("stockEnabled")),
            stock_quantity=_count(data.get("stockQuantity") or 0, "stockQuantity"),
            allow_backorders=_flag(data.get("allowBackorders")),
            schedule=PriceSchedule.from_payload(data, price_scale),
            low_stock_threshold=_count(threshold, "lowStockThreshold") if threshold is not None else None,
        )


def _count(raw: Any, field: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"Invalid {field}: {raw!r}") from e


def _flag(raw: Any) -> bool:
    # catalog sends 0/1 and "0"/"1" as often as true/false
    if isinstance(raw, str):
        return raw.strip().lower() in ("1", "true", "yes")
    return bool(raw)


# ═══════════════════════════════════════════════════════════════════════════════
# Availability — Validator Answer
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Availability:
    """
    Answer to "can requested_quantity be fulfilled now?".

    available_quantity is UNLIMITED when no ceiling applies, and 0 for
    a backorderable product with no stock (callers must not clamp to it).
    verified is False when the answer came from the StockCheckPolicy
    rather than from live data.
    """

    available: bool
    reason: str
    available_quantity: int | float
    product: ProductRecord | None = None
    verified: bool = True

    @property
    def is_unlimited(self) -> bool:
        return self.available_quantity == UNLIMITED


# ═══════════════════════════════════════════════════════════════════════════════
# Stock Status
# ═══════════════════════════════════════════════════════════════════════════════


class StockStatus(Enum):
    """Display classification of a product's stock level."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    ON_BACKORDER = "on_backorder"
    OUT_OF_STOCK = "out_of_stock"


# ═══════════════════════════════════════════════════════════════════════════════
# Catalog Errors
# ═══════════════════════════════════════════════════════════════════════════════


class CatalogErrorKind(Enum):
    """Catalog call error kinds."""

    NOT_FOUND = auto()  # Envelope without success/data
    CONNECTION = auto()  # Transport failure or timeout
    HTTP = auto()  # Non-2xx status
    PARSE = auto()  # Malformed JSON or product fields


@dataclass(frozen=True, slots=True)
class CatalogError:
    """Catalog call error."""

    kind: CatalogErrorKind
    message: str
    product_id: ProductId | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "UNLIMITED",
    "DEFAULT_LOW_STOCK_THRESHOLD",
    "ProductRecord",
    "Availability",
    "StockStatus",
    "CatalogErrorKind",
    "CatalogError",
)
