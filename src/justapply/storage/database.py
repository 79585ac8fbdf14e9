from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import Engine, select

from justapply.db.models import KeyValueEntry
from justapply.db.session import make_session_factory
from justapply.storage.base import StorageBackend


class DatabaseStorage(StorageBackend):
    """
    Structured key-value store backed by a SQLAlchemy ``kv_store`` table.

    Values are kept in a JSON column and come back with the type they were
    written with. Keys that were never written are left out of ``get`` results.
    """

    name = "database"

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = make_session_factory(engine)

    async def get(self, keys: Iterable[str]) -> dict[str, Any]:
        return await asyncio.to_thread(self._get_sync, list(keys))

    async def set(self, values: Mapping[str, Any]) -> None:
        await asyncio.to_thread(self._set_sync, dict(values))

    def _get_sync(self, keys: list[str]) -> dict[str, Any]:
        if not keys:
            return {}
        with self._session_factory() as session:
            rows = session.scalars(select(KeyValueEntry).where(KeyValueEntry.key.in_(keys))).all()
            return {row.key: row.value for row in rows}

    def _set_sync(self, values: dict[str, Any]) -> None:
        with self._session_factory() as session:
            for key, value in values.items():
                session.merge(KeyValueEntry(key=key, value=value))
            session.commit()
