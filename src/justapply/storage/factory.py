from __future__ import annotations

import logging

from sqlalchemy import Engine
from sqlalchemy.exc import SQLAlchemyError

from justapply.config import Settings, get_settings
from justapply.db import models  # noqa: F401
from justapply.db.base import Base
from justapply.db.session import build_engine
from justapply.storage.base import StorageBackend
from justapply.storage.database import DatabaseStorage
from justapply.storage.local import LocalFileStorage

logger = logging.getLogger(__name__)


def _connect_database(database_url: str) -> Engine:
    engine = build_engine(database_url)
    with engine.connect():
        pass
    Base.metadata.create_all(bind=engine)
    return engine


def open_storage(settings: Settings | None = None) -> StorageBackend:
    settings = settings or get_settings()

    if settings.storage_backend == "local":
        return LocalFileStorage(settings.local_storage_path)

    if settings.storage_backend == "database":
        return DatabaseStorage(_connect_database(settings.database_url))

    try:
        engine = _connect_database(settings.database_url)
    except (SQLAlchemyError, ImportError, OSError) as exc:
        logger.warning(
            "Database storage unavailable (%s); falling back to %s",
            exc,
            settings.local_storage_path,
        )
        return LocalFileStorage(settings.local_storage_path)

    logger.debug("Using database storage at %s", settings.database_url)
    return DatabaseStorage(engine)
