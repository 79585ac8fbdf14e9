from __future__ import annotations

import asyncio
import gc
import threading
import time
from types import SimpleNamespace

from justapply.api import runner
from justapply.api.runner import FatalFaultGuard, build_server, run_server
from justapply.config import Settings


class FakeServer:
    """Stands in for ``uvicorn.Server``; ``serve`` runs until asked to exit."""

    def __init__(self, fault=None):
        self.config = SimpleNamespace(port=0)
        self.should_exit = False
        self.fault = fault

    async def serve(self) -> None:
        if self.fault is not None:
            await self.fault()
        deadline = time.monotonic() + 5
        while not self.should_exit and time.monotonic() < deadline:
            await asyncio.sleep(0.01)


def _run_with(monkeypatch, server: FakeServer, settings: Settings) -> int:
    monkeypatch.setattr(runner, "build_server", lambda settings, host=None, port=None: server)
    return run_server(settings)


def test_guard_trips_uvicorn_server_on_loop_fault(isolated_settings: Settings) -> None:
    server = build_server(isolated_settings)
    guard = FatalFaultGuard(server)
    error = RuntimeError("background boom")

    loop = asyncio.new_event_loop()
    try:
        guard.loop_exception_handler(loop, {"message": "Task exception", "exception": error})
    finally:
        loop.close()

    assert server.should_exit is True
    assert guard.fault is error


def test_guard_trips_on_thread_fault(isolated_settings: Settings) -> None:
    server = build_server(isolated_settings)
    guard = FatalFaultGuard(server)
    error = ValueError("worker died")

    guard.thread_excepthook(
        SimpleNamespace(exc_type=ValueError, exc_value=error, exc_traceback=None, thread=None)
    )

    assert server.should_exit is True
    assert guard.fault is error


def test_run_server_exits_cleanly_without_faults(monkeypatch, isolated_settings: Settings) -> None:
    server = FakeServer()
    server.should_exit = True
    assert _run_with(monkeypatch, server, isolated_settings) == 0


def test_unretrieved_task_exception_shuts_server_down(monkeypatch, isolated_settings: Settings, caplog) -> None:
    async def orphan_task() -> None:
        async def boom() -> None:
            raise RuntimeError("background boom")

        task = asyncio.get_running_loop().create_task(boom())
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        del task
        gc.collect()

    server = FakeServer(fault=orphan_task)

    assert _run_with(monkeypatch, server, isolated_settings) == 1
    assert server.should_exit is True
    assert "background boom" in caplog.text


def test_thread_exception_shuts_server_down(monkeypatch, isolated_settings: Settings) -> None:
    async def crashing_thread() -> None:
        def work() -> None:
            raise RuntimeError("thread boom")

        thread = threading.Thread(target=work)
        thread.start()
        thread.join()

    server = FakeServer(fault=crashing_thread)
    previous_hook = threading.excepthook

    assert _run_with(monkeypatch, server, isolated_settings) == 1
    assert server.should_exit is True
    assert threading.excepthook is previous_hook


def test_exception_escaping_serve_is_fatal(monkeypatch, isolated_settings: Settings) -> None:
    async def crash() -> None:
        raise OSError("address already in use")

    server = FakeServer(fault=crash)
    assert _run_with(monkeypatch, server, isolated_settings) == 1
