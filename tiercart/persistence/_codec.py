"""
Snapshot codec — line items <-> JSON array.

Wire format (one element per line item, cart order):

    [{"productId": "42", "displayName": "Shea Butter", "thumbnailRef": "img/42.jpg",
      "unitPrice": 100, "quantity": 2}]

There is no version field. Unknown keys are ignored on read so additive
changes stay readable by older builds.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from tiercart._types import LineItem


class SnapshotError(ValueError):
    """Stored value is not a well-formed cart."""


def encode_items(items: Sequence[LineItem]) -> str:
    return json.dumps(
        [
            {
                "productId": item.product_id,
                "displayName": item.display_name,
                "thumbnailRef": item.thumbnail_ref,
                "unitPrice": item.unit_price,
                "quantity": item.quantity,
            }
            for item in items
        ],
        ensure_ascii=False,
    )


def decode_items(raw: str) -> list[LineItem]:
    """
    Parse and validate a stored cart.

    Raises SnapshotError on any structural mismatch: not JSON (or nested
    too deeply to parse), not an array, an element that is not an object,
    a missing or mistyped field, quantity < 1, negative price, or a repeated productId.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise SnapshotError(f"Not JSON: {e}") from e
    if not isinstance(data, list):
        raise SnapshotError(f"Expected array, got {type(data).__name__}")

    items: list[LineItem] = []
    seen: set[str] = set()
    for index, entry in enumerate(data):
        item = _decode_item(index, entry)
        if item.product_id in seen:
            raise SnapshotError(f"[{index}] duplicate productId {item.product_id!r}")
        seen.add(item.product_id)
        items.append(item)
    return items


def _decode_item(index: int, entry: Any) -> LineItem:
    if not isinstance(entry, dict):
        raise SnapshotError(f"[{index}] expected object")

    product_id = entry.get("productId")
    if isinstance(product_id, int) and not isinstance(product_id, bool):
        product_id = str(product_id)
    if not isinstance(product_id, str) or not product_id:
        raise SnapshotError(f"[{index}] bad productId")

    display_name = entry.get("displayName")
    if not isinstance(display_name, str):
        raise SnapshotError(f"[{index}] bad displayName")

    thumbnail_ref = entry.get("thumbnailRef")
    if thumbnail_ref is None:
        thumbnail_ref = ""
    if not isinstance(thumbnail_ref, str):
        raise SnapshotError(f"[{index}] bad thumbnailRef")

    unit_price = _whole(entry.get("unitPrice"))
    if unit_price is None or unit_price < 0:
        raise SnapshotError(f"[{index}] bad unitPrice")

    quantity = _whole(entry.get("quantity"))
    if quantity is None or quantity < 1:
        raise SnapshotError(f"[{index}] bad quantity")

    return LineItem(
        product_id=product_id,
        display_name=display_name,
        thumbnail_ref=thumbnail_ref,
        unit_price=unit_price,
        quantity=quantity,
    )


def _whole(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    return None


__all__ = (
    "SnapshotError",
    "encode_items",
    "decode_items",
)
