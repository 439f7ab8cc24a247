"""
Pricing resolver — pure tier selection.
"""

from __future__ import annotations

from itertools import combinations

from tiercart._types import Money
from tiercart.pricing._types import (
    PricingTier,
    PriceSchedule,
    PriceQuote,
    ScheduleWarning,
)

_GATED = (PricingTier.DISTRIBUTOR, PricingTier.WHOLESALE, PricingTier.RETAIL)

# ═══════════════════════════════════════════════════════════════════════════════
# resolve_tier() — Which Tier Applies
# ═══════════════════════════════════════════════════════════════════════════════


def resolve_tier(schedule: PriceSchedule, quantity: int) -> PricingTier:
    """
    Pick the first tier, in priority order, whose min_qty is met.

    Total: quantities below 1 are evaluated as 1, and LEGACY always matches.
    """
    quantity = max(quantity, 1)
    for name in _GATED:
        tier = schedule.tier(name)
        if tier is not None and quantity >= tier.min_qty:
            return name
    return PricingTier.LEGACY


# ═══════════════════════════════════════════════════════════════════════════════
# resolve_unit_price() — Unit Price For Quantity
# ═══════════════════════════════════════════════════════════════════════════════


def resolve_unit_price(schedule: PriceSchedule, quantity: int) -> Money:
    """
    Unit price for quantity.

    Example:
        schedule = PriceSchedule(
            price=20,
            retail=PriceTier(20),
            wholesale=PriceTier(15, min_qty=20),
            distributor=PriceTier(10, min_qty=50),
        )
        resolve_unit_price(schedule, 5)   # 20
        resolve_unit_price(schedule, 25)  # 15
        resolve_unit_price(schedule, 75)  # 10
    """
    return quote(schedule, quantity).unit_price


def quote(schedule: PriceSchedule, quantity: int) -> PriceQuote:
    """Resolve unit price and report the tier it came from."""
    name = resolve_tier(schedule, quantity)
    tier = schedule.tier(name)
    if name is PricingTier.LEGACY or tier is None:
        return PriceQuote(PricingTier.LEGACY, schedule.price, None, quantity)
    return PriceQuote(name, tier.price, tier.min_qty, quantity)


def describe_quote(q: PriceQuote) -> str:
    """
    Human-readable tier label.

    Example:
        describe_quote(quote(schedule, 25))  # "Wholesale (Min Qty: 20)"
    """
    if q.min_qty is None:
        return q.tier.display
    return f"{q.tier.display} (Min Qty: {q.min_qty})"


# ═══════════════════════════════════════════════════════════════════════════════
# schedule_warnings() — Flag, Never Fix
# ═══════════════════════════════════════════════════════════════════════════════


def schedule_warnings(schedule: PriceSchedule) -> tuple[ScheduleWarning, ...]:
    """
    Report tier pairs whose thresholds contradict priority order.

    Note: Resolution is NOT changed by a warning. Owners configure tiers
    independently and priority order stays the rule.
    """
    present = [(name, tier) for name in _GATED if (tier := schedule.tier(name)) is not None]
    return tuple(
        ScheduleWarning(
            dominant=high,
            shadowed=low,
            dominant_min_qty=high_tier.min_qty,
            shadowed_min_qty=low_tier.min_qty,
        )
        for (high, high_tier), (low, low_tier) in combinations(present, 2)
        if high_tier.min_qty <= low_tier.min_qty
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "resolve_tier",
    "resolve_unit_price",
    "quote",
    "describe_quote",
    "schedule_warnings",
)
