"""
Cart types — candidates, snapshots, mutation outcomes.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum, auto

from tiercart._types import LineItem, Money, ProductId

# ═══════════════════════════════════════════════════════════════════════════════
# Candidate — What The Presentation Layer Adds
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartCandidate:
    """
    Product the shopper asked to add.

    unit_price is the price the shopper saw; it is stamped only when
    the catalog cannot supply a live schedule.
    """

    product_id: ProductId
    display_name: str
    unit_price: Money
    thumbnail_ref: str = ""
    quantity: int = 1


# ═══════════════════════════════════════════════════════════════════════════════
# Snapshot — Read-Only Observable State
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartSnapshot:
    """
    Cart state after a committed transition.

    Note: items are the store's own LineItem objects, in cart order, so
    renderers can diff by identity. Treat them as read-only.
    version increases by one per committed transition.
    """

    items: tuple[LineItem, ...]
    is_open: bool
    version: int

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(self.items)

    def get(self, product_id: ProductId) -> LineItem | None:
        for item in self.items:
            if item.product_id == product_id:
                return item
        return None

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Money:
        return sum(item.line_total for item in self.items)


type Listener = Callable[[CartSnapshot], None]

# ═══════════════════════════════════════════════════════════════════════════════
# Outcomes
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class CartChange:
    """
    Committed mutation.

    notice carries a user-facing message when the committed quantity
    differs from the requested one (stock ceiling).
    priced is False when the unit price was carried forward because no
    live schedule was available.
    """

    product_id: ProductId
    previous_quantity: int
    quantity: int
    unit_price: Money
    notice: str | None = None
    priced: bool = True
    persisted: bool = True


class RejectionKind(Enum):
    """Why a mutation did not happen."""

    NOT_IN_CART = auto()  # Line absent; no-op
    BELOW_MINIMUM = auto()  # Decrement at quantity 1
    INVALID_QUANTITY = auto()  # set_quantity below 1
    OUT_OF_STOCK = auto()  # Nothing available, no backorders
    INSUFFICIENT_STOCK = auto()  # Fewer available than requested
    UNVERIFIED = auto()  # Catalog unavailable under FAIL_CLOSED


@dataclass(frozen=True, slots=True)
class CartRejection:
    """Mutation rejected; cart and storage are unchanged."""

    kind: RejectionKind
    reason: str
    product_id: ProductId

    @property
    def is_silent(self) -> bool:
        """True for no-ops that need no message for the shopper."""
        return self.kind in (RejectionKind.NOT_IN_CART, RejectionKind.BELOW_MINIMUM)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "CartCandidate",
    "CartSnapshot",
    "Listener",
    "CartChange",
    "RejectionKind",
    "CartRejection",
)
