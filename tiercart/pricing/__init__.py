"""
Pricing — tiered unit price resolution.

    from tiercart import pricing as P

    schedule = P.PriceSchedule(
        price=20,
        retail=P.PriceTier(20),
        wholesale=P.PriceTier(15, min_qty=20),
    )
    P.resolve_unit_price(schedule, 25)  # 15
"""

from __future__ import annotations

from tiercart.pricing._types import (
    PricingTier,
    PriceTier,
    PriceSchedule,
    PriceQuote,
    ScheduleWarning,
    parse_money,
)
from tiercart.pricing._resolve import (
    resolve_tier,
    resolve_unit_price,
    quote,
    describe_quote,
    schedule_warnings,
)

__all__ = (
    "PricingTier",
    "PriceTier",
    "PriceSchedule",
    "PriceQuote",
    "ScheduleWarning",
    "parse_money",
    "resolve_tier",
    "resolve_unit_price",
    "quote",
    "describe_quote",
    "schedule_warnings",
)
