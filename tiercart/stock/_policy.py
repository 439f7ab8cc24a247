"""
Stock check policy — what an unverifiable check answers.
"""

from __future__ import annotations

from enum import Enum, auto

from tiercart.stock._types import (
    UNLIMITED,
    Availability,
    CatalogError,
    CatalogErrorKind,
)

UNVERIFIED_REASON = "Stock could not be verified"
NOT_FOUND_REASON = "Product not found"

# ═══════════════════════════════════════════════════════════════════════════════
# Stock Check Policy
# ═══════════════════════════════════════════════════════════════════════════════


class StockCheckPolicy(Enum):
    """
    Behaviour when the catalog cannot answer (network, parse, not found).

    FAIL_OPEN: Permit the mutation as if stock were unlimited.
               Use when: A catalog outage must not block shoppers; the
               order endpoint enforces stock again at submission.

    FAIL_CLOSED: Reject the mutation.
                 Use when: Client-side stock enforcement must be strict.
    """

    FAIL_OPEN = auto()
    FAIL_CLOSED = auto()

    def decide(self, error: CatalogError) -> Availability:
        """Availability answer for a failed catalog call."""
        match self:
            case StockCheckPolicy.FAIL_OPEN:
                return Availability(
                    available=True,
                    reason=UNVERIFIED_REASON,
                    available_quantity=UNLIMITED,
                    verified=False,
                )
            case StockCheckPolicy.FAIL_CLOSED:
                reason = (
                    NOT_FOUND_REASON
                    if error.kind is CatalogErrorKind.NOT_FOUND
                    else UNVERIFIED_REASON
                )
                return Availability(
                    available=False,
                    reason=reason,
                    available_quantity=0,
                    verified=False,
                )


# Singleton instances for convenience
FAIL_OPEN = StockCheckPolicy.FAIL_OPEN
FAIL_CLOSED = StockCheckPolicy.FAIL_CLOSED


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "StockCheckPolicy",
    "FAIL_OPEN",
    "FAIL_CLOSED",
    "UNVERIFIED_REASON",
    "NOT_FOUND_REASON",
)
