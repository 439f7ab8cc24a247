"""
Storage media — raw key/value backends behind the persistence adapter.
"""

from __future__ import annotations

import asyncio
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

# ═══════════════════════════════════════════════════════════════════════════════
# Medium Protocol — Users Implement This
# ═══════════════════════════════════════════════════════════════════════════════


class Medium(Protocol):
    """
    Durable client-side storage protocol.

    Implement this for custom backends (browser bridge, keyring, Redis...).
    Methods may raise; the adapter catches and reports.

    Example:
        class RedisMedium:
            def __init__(self, client: Redis) -> None:
                self.client = client

            @property
            def name(self) -> str:
                return "redis"

            async def read(self, key: str) -> str | None:
                data = await self.client.get(key)
                return data.decode() if data else None

            async def write(self, key: str, value: str) -> None:
                await self.client.set(key, value)

            async def delete(self, key: str) -> bool:
                return await self.client.delete(key) > 0
    """

    @property
    def name(self) -> str:
        """Medium name for logs."""
        ...

    async def read(self, key: str) -> str | None:
        """Stored value, or None if never written."""
        ...

    async def write(self, key: str, value: str) -> None:
        """Replace the stored value."""
        ...

    async def delete(self, key: str) -> bool:
        """Delete key. Returns True if existed."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Medium — Ephemeral / Tests
# ═══════════════════════════════════════════════════════════════════════════════


class MemoryMedium:
    """
    In-process dict storage.

    Note: writes counts every successful write(); tests use it to
    assert one write per committed transition.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})
        self.writes = 0

    @property
    def name(self) -> str:
        return "memory"

    async def read(self, key: str) -> str | None:
        return self._data.get(key)

    async def write(self, key: str, value: str) -> None:
        self._data[key] = value
        self.writes += 1

    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None


# ═══════════════════════════════════════════════════════════════════════════════
# File Medium — One File Per Key
# ═══════════════════════════════════════════════════════════════════════════════

_UNSAFE = re.compile(r"[^A-Za-z0-9._-]")


class FileMedium:
    """
    Files under a directory, replaced atomically on write.

    Example:
        medium = FileMedium(Path.home() / ".tiercart")

    Note: Disk access runs in a worker thread via asyncio.to_thread.
    """

    def __init__(self, directory: str | os.PathLike[str]) -> None:
        self._dir = Path(directory)

    @property
    def name(self) -> str:
        return "file"

    def path_for(self, key: str) -> Path:
        return self._dir / f"{_UNSAFE.sub('_', key)}.json"

    async def read(self, key: str) -> str | None:
        return await asyncio.to_thread(self._read, self.path_for(key))

    async def write(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, self.path_for(key), value)

    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._delete, self.path_for(key))

    @staticmethod
    def _read(path: Path) -> str | None:
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, target: Path, value: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self._dir, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(tmp, target)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    @staticmethod
    def _delete(path: Path) -> bool:
        if not path.exists():
            return False
        path.unlink()
        return True


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Medium",
    "MemoryMedium",
    "FileMedium",
)
