from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from justapply.storage.base import StorageBackend
from justapply.types import APPLICATIONS_KEY, PROFILE_KEYS, Application, JobForm, UserProfile

logger = logging.getLogger(__name__)


async def save_setup(storage: StorageBackend, *, email: str, resume_path: Path | None) -> str:
    """Store the profile from a resume file and start an empty application history."""
    if not email or resume_path is None:
        return "Please fill in all fields"

    try:
        resume_content = Path(resume_path).read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Failed to read resume %s: %s", resume_path, exc)
        return f"Error: {exc}"

    profile = UserProfile(email=email, resume_content=resume_content, resume_name=Path(resume_path).name)
    await storage.set({**profile.to_store(), APPLICATIONS_KEY: []})
    logger.info("Saved setup for %s with resume %s", email, profile.resume_name)
    return "Setup saved successfully!"


async def load_profile(storage: StorageBackend) -> UserProfile | None:
    data = await storage.get(PROFILE_KEYS)
    if not all(data.get(key) for key in PROFILE_KEYS):
        return None
    return UserProfile(
        email=str(data["email"]),
        resume_content=str(data["resumeContent"]),
        resume_name=str(data["resumeName"]),
    )


async def is_setup_complete(storage: StorageBackend) -> bool:
    data = await storage.get(["email", "resumeContent"])
    return bool(data.get("email") and data.get("resumeContent"))


def parse_applications(raw: object) -> list[Application]:
    if not raw or not isinstance(raw, list):
        return []
    return [Application.model_validate(item) for item in raw]


async def list_applications(storage: StorageBackend) -> list[Application]:
    data = await storage.get([APPLICATIONS_KEY])
    return parse_applications(data.get(APPLICATIONS_KEY))


async def reload_application(storage: StorageBackend, index: int) -> JobForm:
    """Job-detail fields of a previous application, for resubmission."""
    applications = await list_applications(storage)
    if index < 0 or index >= len(applications):
        raise IndexError(f"no saved application at index {index}")
    app = applications[index]
    return JobForm(company=app.company, job_role=app.job_role, description=app.description)


def _applied_on(value: str) -> str:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        return value


def format_application_history(applications: list[Application]) -> list[str]:
    lines = ["Previous Applications"]
    for index, app in enumerate(applications):
        lines.append(f"[{index}] {app.company} - {app.job_role} (Applied: {_applied_on(app.date)})")
    return lines
