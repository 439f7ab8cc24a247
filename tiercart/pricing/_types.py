"""
Pricing types — tiers, schedules, quotes.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any

from tiercart._types import Money

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Pricing Tier — Priority Order
# ═══════════════════════════════════════════════════════════════════════════════


class PricingTier(Enum):
    """
    Named price tiers, highest priority first.

    Note: Declaration order IS evaluation order. Thresholds do not decide
    priority, a higher tier wins as soon as its own min_qty is met.
    """

    DISTRIBUTOR = "distributor"
    WHOLESALE = "wholesale"
    RETAIL = "retail"
    LEGACY = "legacy"

    @property
    def display(self) -> str:
        if self is PricingTier.LEGACY:
            return "Standard"
        return self.value.capitalize()


# ═══════════════════════════════════════════════════════════════════════════════
# Money Parsing
# ═══════════════════════════════════════════════════════════════════════════════


def parse_money(raw: Any, scale: int = 1) -> Money | None:
    """
    Convert a catalog price into minor units.

    Accepts ints, floats and numeric strings. Returns None for null.
    Raises ValueError for anything else. Rounds half up to whole minor
    units and logs a warning when that drops a fraction.

    Example:
        parse_money("12.50", scale=100)  # 1250
        parse_money(100)                 # 100
    """
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"Invalid price: {raw!r}")
    try:
        amount = Decimal(str(raw)) * scale
        whole = amount.quantize(Decimal(1), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Invalid price: {raw!r}") from e
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"Invalid price: {raw!r}")
    if whole != amount:
        logger.warning("Price %r rounded to %s minor units (price_scale=%d)", raw, whole, scale)
    return int(whole)


def _parse_qty(raw: Any) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, bool):
        raise ValueError(f"Invalid quantity: {raw!r}")
    try:
        return int(Decimal(str(raw)))
    except (InvalidOperation, ValueError, OverflowError) as e:
        raise ValueError(f"Invalid quantity: {raw!r}") from e


# ═══════════════════════════════════════════════════════════════════════════════
# Price Tier & Schedule
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PriceTier:
    """Single tier: unit price applied from min_qty upwards."""

    price: Money
    min_qty: int = 1


@dataclass(frozen=True, slots=True)
class PriceSchedule:
    """
    Per-product price ladder, owned by the catalog.

    distributor / wholesale / retail are optional; price is the legacy
    flat price and always exists as the terminal fallback.

    Example:
        schedule = PriceSchedule(
            price=20,
            retail=PriceTier(price=20),
            wholesale=PriceTier(price=15, min_qty=20),
            distributor=PriceTier(price=10, min_qty=50),
        )
    """

    price: Money
    retail: PriceTier | None = None
    wholesale: PriceTier | None = None
    distributor: PriceTier | None = None

    def tier(self, name: PricingTier) -> PriceTier | None:
        match name:
            case PricingTier.DISTRIBUTOR:
                return self.distributor
            case PricingTier.WHOLESALE:
                return self.wholesale
            case PricingTier.RETAIL:
                return self.retail
            case PricingTier.LEGACY:
                return PriceTier(price=self.price, min_qty=1)

    @classmethod
    def from_payload(cls, data: Mapping[str, Any], price_scale: int = 1) -> PriceSchedule:
        """
        Build from catalog product fields.

        Note: distributor/wholesale need both price and min qty, retail only
        needs a price (min qty defaults to 1). The legacy price falls back to
        retail when the catalog omits it.

        Raises ValueError on malformed values.
        """
        retail_price = parse_money(data.get("retailPrice"), price_scale)
        price = parse_money(data.get("price"), price_scale)
        if price is None:
            price = retail_price if retail_price is not None else 0

        retail = None
        if retail_price is not None:
            retail = PriceTier(retail_price, _parse_qty(data.get("retailMinQty")) or 1)

        return cls(
            price=price,
            retail=retail,
            wholesale=_gated_tier(data, "wholesale", price_scale),
            distributor=_gated_tier(data, "distributor", price_scale),
        )


def _gated_tier(data: Mapping[str, Any], prefix: str, price_scale: int) -> PriceTier | None:
    price = parse_money(data.get(f"{prefix}Price"), price_scale)
    min_qty = _parse_qty(data.get(f"{prefix}MinQty"))
    if price is None or min_qty is None:
        return None
    return PriceTier(price, min_qty)


# ═══════════════════════════════════════════════════════════════════════════════
# Quote & Warnings
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """Resolved price for a quantity, with the tier that produced it."""

    tier: PricingTier
    unit_price: Money
    min_qty: int | None
    quantity: int

    @property
    def total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True, slots=True)
class ScheduleWarning:
    """
    Threshold ordering that contradicts tier priority.

    `shadowed` can only apply below `dominant.min_qty`, yet `dominant`
    wins at or above its own, lower-or-equal threshold.
    """

    dominant: PricingTier
    shadowed: PricingTier
    dominant_min_qty: int
    shadowed_min_qty: int

    @property
    def message(self) -> str:
        return (
            f"{self.dominant.display} min qty {self.dominant_min_qty} <= "
            f"{self.shadowed.display} min qty {self.shadowed_min_qty}; "
            f"{self.shadowed.display} tier is unreachable at or above "
            f"{self.dominant_min_qty}"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "PricingTier",
    "PriceTier",
    "PriceSchedule",
    "PriceQuote",
    "ScheduleWarning",
    "parse_money",
)
