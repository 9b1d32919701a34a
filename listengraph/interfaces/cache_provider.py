"""Cache contract used to memoise genre lookups across graph builds.

The bundled implementation is process-local (``MemoryCacheProvider``); a
shared store such as Redis can be swapped in by implementing this class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Async key-value cache.

    ``None`` is reserved to mean "not cached", so callers that need to
    remember an empty answer must store a non-``None`` value such as ``()``.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value for *key*, or ``None`` when absent or expired."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Store *value*; *ttl* (seconds) is a hint backends may ignore."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Drop *key*; missing keys are ignored."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...
