"""
Persistence — durable cart snapshots.

    from tiercart import persistence as D

    persistence = D.CartPersistence(D.FileMedium("/var/lib/shop"))
    items = await persistence.load()

    # SQLite via SQLAlchemy
    medium, engine = await D.create_sqlalchemy_medium("sqlite+aiosqlite:///cart.db")
"""

from __future__ import annotations

from tiercart.persistence._medium import (
    Medium,
    MemoryMedium,
    FileMedium,
)
from tiercart.persistence._codec import (
    SnapshotError,
    encode_items,
    decode_items,
)
from tiercart.persistence._adapter import (
    DEFAULT_STORAGE_KEY,
    PersistenceError,
    CartPersistence,
)
from tiercart.persistence._sqlalchemy import (
    CartStateTable,
    SQLAlchemyMedium,
    create_sqlalchemy_medium,
)

__all__ = (
    # Media
    "Medium",
    "MemoryMedium",
    "FileMedium",
    # Codec
    "SnapshotError",
    "encode_items",
    "decode_items",
    # Adapter
    "DEFAULT_STORAGE_KEY",
    "PersistenceError",
    "CartPersistence",
    # SQLAlchemy
    "CartStateTable",
    "SQLAlchemyMedium",
    "create_sqlalchemy_medium",
)
