from __future__ import annotations

import logging
from pathlib import Path

from justapply.config import get_settings
from justapply.logging_config import LOG_FORMAT, build_handlers, configure_logging


def test_build_handlers_adds_file_handler_when_configured(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "justapply.log"
    handlers = build_handlers(log_file)
    try:
        assert [type(handler) for handler in handlers] == [logging.StreamHandler, logging.FileHandler]
        assert all(handler.formatter._fmt == LOG_FORMAT for handler in handlers)
        assert log_file.parent.is_dir()
    finally:
        for handler in handlers:
            handler.close()


def test_configure_logging_writes_to_log_file_once(monkeypatch, tmp_path: Path) -> None:
    log_file = tmp_path / "justapply.log"
    monkeypatch.setenv("LOG_FILE", str(log_file))
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setattr("justapply.logging_config._LOG_CONFIGURED", False)
    get_settings.cache_clear()

    root = logging.getLogger()
    previous_level = root.level
    handlers = configure_logging()
    try:
        assert configure_logging() == []
        assert root.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING

        logging.getLogger("justapply.test").info("relay ready")
        for handler in handlers:
            handler.flush()
        assert "INFO [justapply.test] relay ready" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in handlers:
            root.removeHandler(handler)
            handler.close()
        root.setLevel(previous_level)
