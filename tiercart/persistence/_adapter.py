"""
Persistence adapter — save/load the committed cart.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from kungfu import Result, Ok, Error

from tiercart._types import LineItem
from tiercart.persistence._codec import SnapshotError, encode_items, decode_items
from tiercart.persistence._medium import Medium

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tiercart:cart"


@dataclass(frozen=True, slots=True)
class PersistenceError:
    """Medium write failure."""

    message: str
    cause: Exception | None = None


# ═══════════════════════════════════════════════════════════════════════════════
# Cart Persistence
# ═══════════════════════════════════════════════════════════════════════════════


class CartPersistence:
    """
    Stores line items under a single namespaced key.

    Example:
        persistence = CartPersistence(FileMedium("~/.shop"), key="shop:cart")
        items = await persistence.load()
        await persistence.save(items)

    Note: save() encodes immediately and writes in call order, so the
    medium ends on the last committed state even when writes overlap.
    The visibility flag is never part of the payload.
    """

    def __init__(self, medium: Medium, key: str = DEFAULT_STORAGE_KEY) -> None:
        self._medium = medium
        self._key = key
        self._write_lock = asyncio.Lock()

    @property
    def medium(self) -> Medium:
        return self._medium

    @property
    def key(self) -> str:
        return self._key

    async def save(self, items: Sequence[LineItem]) -> Result[None, PersistenceError]:
        payload = encode_items(items)
        async with self._write_lock:
            try:
                await self._medium.write(self._key, payload)
            except Exception as e:
                logger.error("Cart write to %s failed: %s", self._medium.name, e)
                return Error(PersistenceError(f"Failed to write {self._key}: {e}", e))
        logger.debug("Saved %d line item(s) to %s", len(items), self._medium.name)
        return Ok(None)

    async def load(self) -> list[LineItem]:
        """
        Restore the stored cart.

        Missing, unreadable, corrupt or foreign data yields [] and never raises.
        """
        try:
            raw = await self._medium.read(self._key)
        except Exception as e:
            logger.warning("Cart read from %s failed, starting empty: %s", self._medium.name, e)
            return []
        if raw is None:
            return []
        try:
            items = decode_items(raw)
        except SnapshotError as e:
            logger.warning("Discarding stored cart under %r: %s", self._key, e)
            return []
        logger.debug("Loaded %d line item(s) from %s", len(items), self._medium.name)
        return items


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "DEFAULT_STORAGE_KEY",
    "PersistenceError",
    "CartPersistence",
)
