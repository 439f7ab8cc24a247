"""
Core types for tiercart.

Re-exports from kungfu + shared type aliases.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Domain Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type ProductId = str
"""Opaque catalog product identifier. Stable key inside the cart."""

type Money = int
"""Amount in the store's minor currency unit."""

type Lazy[T, E] = LazyCoroResult[T, E]
"""Lazy async computation that may fail."""

type Unsubscribe = Callable[[], None]
"""Detaches a previously registered listener."""

# ═══════════════════════════════════════════════════════════════════════════════
# Line Item — One Product In The Cart
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class LineItem:
    """
    One product the shopper intends to buy.

    Mutable on purpose: quantity changes update the same object so
    observers can diff by identity.

    display_name / thumbnail_ref are snapshots taken when the product was
    added, for rendering while the catalog is unreachable.
    unit_price is the price stamped for the current quantity.
    """

    product_id: ProductId
    display_name: str
    thumbnail_ref: str
    unit_price: Money
    quantity: int

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Aliases
    "ProductId",
    "Money",
    "Lazy",
    "Unsubscribe",
    # Domain
    "LineItem",
)
