"""
Cart — the stateful line-item store.

    from tiercart import cart as K

    store = await K.CartStore.open(validator, persistence)
    store.subscribe(render)

    match await store.add_to_cart(K.CartCandidate("42", "Widget", 2000, quantity=3)):
        case Ok(change) if change.notice:
            toast(change.notice)       # clamped to stock
        case Error(rejection) if not rejection.is_silent:
            toast(rejection.reason)
"""

from __future__ import annotations

from tiercart.cart._types import (
    CartCandidate,
    CartSnapshot,
    Listener,
    CartChange,
    RejectionKind,
    CartRejection,
)
from tiercart.cart._flight import KeyedSingleFlight
from tiercart.cart._store import (
    AvailabilityChecker,
    CartStore,
)

__all__ = (
    # Types
    "CartCandidate",
    "CartSnapshot",
    "Listener",
    "CartChange",
    "RejectionKind",
    "CartRejection",
    # Concurrency
    "KeyedSingleFlight",
    # Store
    "AvailabilityChecker",
    "CartStore",
)
