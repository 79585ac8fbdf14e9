from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from justapply.core.profile import (
    format_application_history,
    is_setup_complete,
    list_applications,
    load_profile,
    reload_application,
    save_setup,
)
from justapply.storage import LocalFileStorage
from justapply.types import Application


def _storage(tmp_path: Path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "store.json")


def test_setup_requires_email_and_resume(tmp_path: Path, resume_file: Path) -> None:
    storage = _storage(tmp_path)
    assert asyncio.run(save_setup(storage, email="", resume_path=resume_file)) == "Please fill in all fields"
    assert asyncio.run(save_setup(storage, email="jane@example.com", resume_path=None)) == "Please fill in all fields"
    assert asyncio.run(is_setup_complete(storage)) is False


def test_setup_saves_profile_and_resets_history(tmp_path: Path, resume_file: Path) -> None:
    storage = _storage(tmp_path)
    asyncio.run(storage.set({"applications": [Application(company="Old", job_role="Dev", description="x").to_store()]}))

    message = asyncio.run(save_setup(storage, email="jane@example.com", resume_path=resume_file))

    assert message == "Setup saved successfully!"
    profile = asyncio.run(load_profile(storage))
    assert profile is not None
    assert profile.email == "jane@example.com"
    assert profile.resume_name == "resume.tex"
    assert profile.resume_content == resume_file.read_text(encoding="utf-8")
    assert asyncio.run(list_applications(storage)) == []


def test_reload_application_returns_job_fields(tmp_path: Path) -> None:
    storage = _storage(tmp_path)
    apps = [
        Application(company="Acme", job_role="SRE", description="on-call"),
        Application(company="Globex", job_role="Analyst", description="SQL"),
    ]
    asyncio.run(storage.set({"applications": [app.to_store() for app in apps]}))

    form = asyncio.run(reload_application(storage, 1))
    assert (form.company, form.job_role, form.description) == ("Globex", "Analyst", "SQL")

    with pytest.raises(IndexError):
        asyncio.run(reload_application(storage, 2))


def test_format_application_history() -> None:
    apps = [Application(company="Acme", job_role="SRE", description="", date="2026-03-01T10:00:00.000Z")]
    assert format_application_history(apps) == [
        "Previous Applications",
        "[0] Acme - SRE (Applied: 2026-03-01)",
    ]
