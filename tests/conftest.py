from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from justapply.config import Settings, get_settings
from justapply.db.session import get_engine


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path: Path) -> Iterator[Settings]:
    monkeypatch.setattr("justapply.logging_config._LOG_CONFIGURED", True)
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("DOWNLOAD_DIR", str(tmp_path / "data" / "downloads"))
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'justapply.db'}")
    monkeypatch.setenv("LOCAL_STORAGE_PATH", str(tmp_path / "data" / "local_storage.json"))
    monkeypatch.setenv("STORAGE_BACKEND", "auto")
    monkeypatch.setenv("RELAY_BASE_URL", "http://relay.test")
    monkeypatch.setenv("CORS_ORIGINS", "*")
    get_settings.cache_clear()
    get_engine.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
    get_engine.cache_clear()


@pytest.fixture
def resume_file(tmp_path: Path) -> Path:
    path = tmp_path / "resume.tex"
    path.write_text(
        "\\documentclass{article}\n\\begin{document}\nJane Doe -- Backend Engineer\n\\end{document}\n",
        encoding="utf-8",
    )
    return path
