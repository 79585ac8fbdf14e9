from __future__ import annotations

import logging
from pathlib import Path

from justapply.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
QUIET_LOGGERS = ("httpx", "httpcore", "multipart")

_LOG_CONFIGURED = False


def build_handlers(log_file: Path | None = None) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    formatter = logging.Formatter(LOG_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging() -> list[logging.Handler]:
    """Attach stderr (and optional file) handlers to the root logger once."""
    global _LOG_CONFIGURED
    if _LOG_CONFIGURED:
        return []

    settings = get_settings()
    root = logging.getLogger()
    root.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    handlers = build_handlers(settings.log_file)
    for handler in handlers:
        root.addHandler(handler)

    # request-per-line loggers
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    _LOG_CONFIGURED = True
    return handlers
