from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import Any


class StorageBackend(ABC):
    """Asynchronous key-value store holding the profile and application history."""

    name: str = "abstract"

    @abstractmethod
    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        """Return stored values for ``keys``."""

    @abstractmethod
    async def set(self, values: Mapping[str, Any]) -> None:
        """Persist every key in ``values``, replacing what was there."""
