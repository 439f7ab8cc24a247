"""
tiercart — cart state and tiered pricing for storefronts.

    from tiercart import pricing as P   # Tier resolution
    from tiercart import stock as S     # Catalog + availability
    from tiercart import persistence as D  # Durable snapshots
    from tiercart import cart as K      # The cart store

    async with connect(CartConfig.from_env(), FileMedium("~/.shop")) as store:
        await store.add_to_cart(K.CartCandidate("42", "Widget", 2000, quantity=25))
"""

from tiercart import pricing
from tiercart import stock
from tiercart import persistence
from tiercart import cart
from tiercart._types import (
    Result,
    Ok,
    Error,
    ProductId,
    Money,
    Lazy,
    Unsubscribe,
    LineItem,
)
from tiercart._config import ENV_PREFIX, CartConfig
from tiercart._connect import connect
from tiercart._logging import LOG_FORMAT, configure_logging
from tiercart.cart import (
    CartCandidate,
    CartSnapshot,
    CartChange,
    RejectionKind,
    CartRejection,
    CartStore,
)
from tiercart.persistence import MemoryMedium, FileMedium
from tiercart.stock import FAIL_OPEN, FAIL_CLOSED

__version__ = "0.1.0"

__all__ = (
    "pricing",
    "stock",
    "persistence",
    "cart",
    "Result",
    "Ok",
    "Error",
    "ProductId",
    "Money",
    "Lazy",
    "Unsubscribe",
    "LineItem",
    "ENV_PREFIX",
    "CartConfig",
    "connect",
    "LOG_FORMAT",
    "configure_logging",
    "CartCandidate",
    "CartSnapshot",
    "CartChange",
    "RejectionKind",
    "CartRejection",
    "CartStore",
    "MemoryMedium",
    "FileMedium",
    "FAIL_OPEN",
    "FAIL_CLOSED",
)
