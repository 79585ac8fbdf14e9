from __future__ import annotations

from pathlib import Path

from sqlalchemy import Engine

from justapply.config import Settings, get_settings
from justapply.db import models  # noqa: F401
from justapply.db.base import Base
from justapply.db.session import get_engine


def ensure_data_directories(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    paths: list[Path] = [
        settings.data_dir,
        settings.download_dir,
        settings.local_storage_path.parent,
    ]
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database(engine: Engine | None = None) -> dict[str, object]:
    ensure_data_directories()
    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine)
    return {"tables": sorted(Base.metadata.tables)}
