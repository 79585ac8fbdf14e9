from __future__ import annotations

import asyncio
import logging
import threading
from types import TracebackType
from typing import Any

import uvicorn

from justapply.api.app import create_app
from justapply.config import Settings, get_settings

logger = logging.getLogger(__name__)


class FatalFaultGuard:
    """
    Treats uncaught exceptions and unretrieved task exceptions as fatal.

    The fault is logged, the server is asked to stop accepting connections and
    ``run_server`` exits with status 1 so a process manager can restart it.
    """

    def __init__(self, server: uvicorn.Server):
        self.server = server
        self.fault: BaseException | None = None

    def _trip(self, fault: BaseException) -> None:
        if self.fault is None:
            self.fault = fault
        self.server.should_exit = True

    def uncaught_exception(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        traceback: TracebackType | None,
    ) -> None:
        logger.critical("Uncaught exception", exc_info=(exc_type, exc, traceback))
        self._trip(exc)

    def thread_excepthook(self, args: threading.ExceptHookArgs) -> None:
        if args.exc_value is not None:
            self.uncaught_exception(args.exc_type, args.exc_value, args.exc_traceback)

    def loop_exception_handler(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception") or RuntimeError(context.get("message", "unhandled loop error"))
        logger.critical("Unhandled rejection: %s", context.get("message", ""), exc_info=exc)
        self._trip(exc)


def build_server(settings: Settings, host: str | None = None, port: int | None = None) -> uvicorn.Server:
    config = uvicorn.Config(
        create_app(settings),
        host=host or settings.app_host,
        port=port or settings.port,
        log_config=None,
    )
    return uvicorn.Server(config)


def run_server(settings: Settings | None = None, *, host: str | None = None, port: int | None = None) -> int:
    settings = settings or get_settings()
    server = build_server(settings, host=host, port=port)
    guard = FatalFaultGuard(server)

    async def _serve() -> None:
        asyncio.get_running_loop().set_exception_handler(guard.loop_exception_handler)
        logger.info("Server running on port %s", server.config.port)
        await server.serve()

    previous_thread_hook = threading.excepthook
    threading.excepthook = guard.thread_excepthook
    try:
        asyncio.run(_serve())
    except Exception as exc:
        guard.uncaught_exception(type(exc), exc, exc.__traceback__)
    finally:
        threading.excepthook = previous_thread_hook

    if guard.fault is not None:
        logger.critical("Shut down after fatal fault: %s", guard.fault)
        return 1
    return 0
