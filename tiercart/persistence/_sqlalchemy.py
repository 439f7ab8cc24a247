"""
SQLAlchemy integration — key/value medium over an async session factory.

Usage:
    medium, engine = await create_sqlalchemy_medium("sqlite+aiosqlite:///cart.db")
    persistence = CartPersistence(medium)
    ...
    await engine.dispose()

Or bring your own engine; call `CartStateTable.metadata.create_all` on it first.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import String, DateTime, Text, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

# ═══════════════════════════════════════════════════════════════════════════════
# Model
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class CartStateTable(Base):
    """One row per storage key; value holds the serialized cart."""

    __tablename__ = "tiercart_state"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemy Medium
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyMedium:
    """
    Medium backed by the tiercart_state table.

    Note: Each call opens its own session and commits. Errors propagate
    to the persistence adapter, which reports them.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @property
    def name(self) -> str:
        return "sqlalchemy"

    async def read(self, key: str) -> str | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(CartStateTable.value).where(CartStateTable.key == key)
            )
            return result.scalar_one_or_none()

    async def write(self, key: str, value: str) -> None:
        async with self._session_factory() as session:
            row = await session.get(CartStateTable, key)
            if row is None:
                session.add(CartStateTable(key=key, value=value, updated_at=datetime.now()))
            else:
                row.value = value
                row.updated_at = datetime.now()
            await session.commit()

    async def delete(self, key: str) -> bool:
        async with self._session_factory() as session:
            row = await session.get(CartStateTable, key)
            if row is None:
                return False
            await session.delete(row)
            await session.commit()
            return True


# ═══════════════════════════════════════════════════════════════════════════════
# Setup
# ═══════════════════════════════════════════════════════════════════════════════


async def create_sqlalchemy_medium(
    url: str = "sqlite+aiosqlite:///:memory:",
) -> tuple[SQLAlchemyMedium, AsyncEngine]:
    """Create engine + table and return (medium, engine)."""
    engine = create_async_engine(url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    return SQLAlchemyMedium(async_sessionmaker(engine, expire_on_commit=False)), engine


__all__ = (
    "Base",
    "CartStateTable",
    "SQLAlchemyMedium",
    "create_sqlalchemy_medium",
)
