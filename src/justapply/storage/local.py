from __future__ import annotations

import asyncio
import json
import logging
import os
import threading
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from justapply.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class LocalFileStorage(StorageBackend):
    """
    Fallback store: a JSON file mapping each key to a text value.

    Every value is serialised to JSON text on write. On read a non-empty text
    value is parsed back, and kept as the raw string when it is not valid
    JSON. Unknown keys come back as ``None``.
    """

    name = "local"

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.Lock()

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        return await asyncio.to_thread(self._get_sync, list(keys))

    async def set(self, values: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._set_sync, dict(values))

    def _get_sync(self, keys: list[str]) -> dict[str, Any]:
        with self._lock:
            items = self._read_items()

        result: dict[str, Any] = {}
        for key in keys:
            raw = items.get(key)
            result[key] = raw
            if raw:
                try:
                    result[key] = json.loads(raw)
                except ValueError:
                    pass
        return result

    def _set_sync(self, values: dict[str, Any]) -> None:
        with self._lock:
            items = self._read_items()
            for key, value in values.items():
                items[key] = json.dumps(value)
            self._write_items(items)

    def _read_items(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _write_items(self, items: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(items, indent=2), encoding="utf-8")
        os.replace(tmp_path, self.path)
        logger.debug("Wrote %d keys to %s", len(items), self.path)
