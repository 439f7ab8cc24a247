"""
Cart store — the cart state machine.

Per line, per product:

    Absent ──add──▶ Present(q) ──increment / set / decrement──▶ Present(q')
      ▲                 │
      └──remove/clear───┘

Every committed transition is persisted, then broadcast. Rejected
transitions touch neither the cart nor storage.
"""

from __future__ import annotations

import logging
from typing import Protocol

from kungfu import Result, Ok, Error, is_ok

from tiercart._types import LineItem, ProductId, Unsubscribe
from tiercart.cart._flight import KeyedSingleFlight
from tiercart.cart._types import (
    CartCandidate,
    CartSnapshot,
    Listener,
    CartChange,
    RejectionKind,
    CartRejection,
)
from tiercart.persistence import CartPersistence
from tiercart.pricing import resolve_unit_price
from tiercart.stock import Availability, StockStatus

logger = logging.getLogger(__name__)

type Mutation = Result[CartChange, CartRejection]


class AvailabilityChecker(Protocol):
    async def check_availability(self, product_id: ProductId, requested_quantity: int) -> Availability: ...

    async def status(self, product_id: ProductId) -> StockStatus | None: ...


# ═══════════════════════════════════════════════════════════════════════════════
# Ceiling Rule
# ═══════════════════════════════════════════════════════════════════════════════


def _settle(
    product_id: ProductId,
    availability: Availability,
    requested: int,
    *,
    clamp: bool,
) -> Result[tuple[int, str | None], CartRejection]:
    """
    Quantity to commit for requested, and a notice when it was lowered.

    clamp=True lets add/set fall back to the stock ceiling; increment
    never clamps.
    """
    if availability.available:
        return Ok((requested, None))
    if not availability.verified:
        return Error(CartRejection(RejectionKind.UNVERIFIED, availability.reason, product_id))

    ceiling = int(availability.available_quantity)
    if ceiling < 1:
        return Error(CartRejection(RejectionKind.OUT_OF_STOCK, availability.reason, product_id))
    if clamp:
        return Ok((ceiling, availability.reason))
    return Error(CartRejection(RejectionKind.INSUFFICIENT_STOCK, availability.reason, product_id))


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Store
# ═══════════════════════════════════════════════════════════════════════════════


class CartStore:
    """
    Ordered, deduplicated line items plus a visibility flag.

    Example:
        store = await CartStore.open(validator, persistence)
        result = await store.add_to_cart(CartCandidate("42", "Widget", 2000))
        match result:
            case Ok(change):
                print(change.quantity, change.notice)
            case Error(rejection):
                print(rejection.reason)

    Note: Mutations on the same product run one at a time in call order;
    different products proceed concurrently. Mutations never raise:
    rejections come back as Error(CartRejection). Persistence failures
    are logged and reported through CartChange.persisted.
    """

    def __init__(
        self,
        validator: AvailabilityChecker,
        persistence: CartPersistence,
        items: list[LineItem] | None = None,
    ) -> None:
        self._validator = validator
        self._persistence = persistence
        self._items: list[LineItem] = []
        self._index: dict[ProductId, LineItem] = {}
        for item in items or ():
            if item.product_id not in self._index:
                self._items.append(item)
                self._index[item.product_id] = item
        self._is_open = False
        self._version = 0
        self._listeners: list[Listener] = []
        self._flight = KeyedSingleFlight()

    @classmethod
    async def open(cls, validator: AvailabilityChecker, persistence: CartPersistence) -> CartStore:
        """Store seeded from persistence; the cart starts closed."""
        items = await persistence.load()
        logger.debug("Cart restored with %d line item(s)", len(items))
        return cls(validator, persistence, items)

    # ─────────────────────────────────────────────────────────────────────────
    # Reads
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def snapshot(self) -> CartSnapshot:
        return CartSnapshot(tuple(self._items), self._is_open, self._version)

    @property
    def is_open(self) -> bool:
        return self._is_open

    async def stock_status(self, product_id: ProductId) -> StockStatus | None:
        """Live stock badge for a product, or None when unknown."""
        return await self._validator.status(product_id)

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Call listener with a fresh snapshot after every committed transition.

        The returned callable detaches the listener; calling it twice is harmless.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    async def add_to_cart(self, candidate: CartCandidate) -> Mutation:
        """
        Add candidate, or raise the existing line's quantity to candidate.quantity.

        A new line opens the cart. Quantities below 1 count as 1.
        """
        pid = candidate.product_id
        requested = max(candidate.quantity, 1)
        async with self._flight.hold(pid):
            if pid in self._index:
                return await self._replace_quantity(pid, requested)

            availability = await self._validator.check_availability(pid, requested)
            match _settle(pid, availability, requested, clamp=True):
                case Error(rejection):
                    return Error(rejection)
                case Ok((quantity, notice)):
                    return await self._insert(candidate, quantity, availability, notice)

    async def increment_quantity(self, product_id: ProductId) -> Mutation:
        """Quantity + 1, only if stock covers it; never clamps."""
        async with self._flight.hold(product_id):
            item = self._index.get(product_id)
            if item is None:
                return self._not_in_cart(product_id)

            requested = item.quantity + 1
            availability = await self._validator.check_availability(product_id, requested)
            if self._index.get(product_id) is not item:
                # Removed or cleared while the stock check was in flight
                return self._not_in_cart(product_id)

            match _settle(product_id, availability, requested, clamp=False):
                case Error(rejection):
                    return Error(rejection)
                case Ok((quantity, notice)):
                    return await self._apply(item, quantity, availability, notice)

    async def decrement_quantity(self, product_id: ProductId) -> Mutation:
        """Quantity - 1; a line at 1 stays at 1 and nothing is written."""
        async with self._flight.hold(product_id):
            item = self._index.get(product_id)
            if item is None:
                return self._not_in_cart(product_id)
            if item.quantity <= 1:
                return Error(
                    CartRejection(RejectionKind.BELOW_MINIMUM, "Quantity cannot go below 1", product_id)
                )
            previous = item.quantity
            item.quantity -= 1
            logger.debug("Decremented %s to %d", product_id, item.quantity)
            persisted = await self._commit()
            return Ok(CartChange(product_id, previous, item.quantity, item.unit_price, persisted=persisted))

    async def set_quantity(self, product_id: ProductId, quantity: int) -> Mutation:
        """
        Set an exact quantity, clamped to the stock ceiling.

        Quantities below 1 are rejected without a stock check; remove the
        line instead.
        """
        if quantity < 1:
            return Error(
                CartRejection(RejectionKind.INVALID_QUANTITY, "Quantity must be at least 1", product_id)
            )
        async with self._flight.hold(product_id):
            if product_id not in self._index:
                return self._not_in_cart(product_id)
            return await self._replace_quantity(product_id, quantity)

    async def remove_from_cart(self, product_id: ProductId) -> Mutation:
        async with self._flight.hold(product_id):
            item = self._index.pop(product_id, None)
            if item is None:
                return self._not_in_cart(product_id)
            self._items.remove(item)
            logger.debug("Removed %s", product_id)
            persisted = await self._commit()
            return Ok(CartChange(product_id, item.quantity, 0, item.unit_price, persisted=persisted))

    async def clear_cart(self) -> bool:
        """
        Empty the cart. Always one write and one broadcast, even when empty.

        Returns whether the write succeeded.
        """
        self._items.clear()
        self._index.clear()
        logger.debug("Cleared cart")
        return await self._commit()

    def open_cart(self) -> None:
        self._set_open(True)

    def close_cart(self) -> None:
        self._set_open(False)

    def toggle_cart(self) -> None:
        self._set_open(not self._is_open)

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    async def _insert(
        self,
        candidate: CartCandidate,
        quantity: int,
        availability: Availability,
        notice: str | None,
    ) -> Mutation:
        pid = candidate.product_id
        if availability.product is not None:
            unit_price, priced = resolve_unit_price(availability.product.schedule, quantity), True
        else:
            unit_price, priced = candidate.unit_price, False

        item = LineItem(pid, candidate.display_name, candidate.thumbnail_ref, unit_price, quantity)
        self._items.append(item)
        self._index[pid] = item
        self._is_open = True
        logger.debug("Added %s x%d at %d", pid, quantity, unit_price)
        persisted = await self._commit()
        return Ok(CartChange(pid, 0, quantity, unit_price, notice, priced, persisted))

    async def _replace_quantity(self, product_id: ProductId, requested: int) -> Mutation:
        # Caller holds the flight for product_id
        item = self._index[product_id]
        availability = await self._validator.check_availability(product_id, requested)
        if self._index.get(product_id) is not item:
            return self._not_in_cart(product_id)

        match _settle(product_id, availability, requested, clamp=True):
            case Error(rejection):
                return Error(rejection)
            case Ok((quantity, notice)):
                return await self._apply(item, quantity, availability, notice)

    async def _apply(
        self,
        item: LineItem,
        quantity: int,
        availability: Availability,
        notice: str | None,
    ) -> Mutation:
        previous = item.quantity
        item.quantity = quantity
        priced = availability.product is not None
        if priced:
            item.unit_price = resolve_unit_price(availability.product.schedule, quantity)
        logger.debug("Set %s %d -> %d at %d", item.product_id, previous, quantity, item.unit_price)
        persisted = await self._commit()
        return Ok(CartChange(item.product_id, previous, quantity, item.unit_price, notice, priced, persisted))

    async def _commit(self) -> bool:
        self._version += 1
        result = await self._persistence.save(self._items)
        self._broadcast()
        return is_ok(result)

    def _set_open(self, is_open: bool) -> None:
        if self._is_open == is_open:
            return
        self._is_open = is_open
        self._version += 1
        self._broadcast()

    def _broadcast(self) -> None:
        snapshot = self.snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Cart listener %r failed", listener)

    @staticmethod
    def _not_in_cart(product_id: ProductId) -> Mutation:
        return Error(CartRejection(RejectionKind.NOT_IN_CART, "Product is not in the cart", product_id))


__all__ = (
    "AvailabilityChecker",
    "CartStore",
)
