from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Callable
from pathlib import Path

from justapply.config import Settings, get_settings
from justapply.core.document import annotate_resume, validate_document
from justapply.core.profile import parse_applications
from justapply.core.relay import RelayClient
from justapply.errors import ConnectivityError, JustApplyError
from justapply.storage.base import StorageBackend
from justapply.types import (
    APPLICATIONS_KEY,
    PROFILE_KEYS,
    Application,
    JobForm,
    SubmissionResult,
    SubmissionStage,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')

StatusCallback = Callable[[str], None]


def output_filename(company: str, job_role: str) -> str:
    return _UNSAFE_FILENAME_CHARS.sub("_", f"{company}_{job_role}.pdf")


class SubmissionWorkflow:
    """
    One submission attempt: health check, field validation, annotation,
    document validation, record persistence, upload and response handling.

    The application record is persisted before the upload, so a failed upload
    leaves an entry in the history without a generated document. Nothing is
    rolled back on failure.
    """

    def __init__(
        self,
        storage: StorageBackend,
        relay: RelayClient,
        *,
        settings: Settings | None = None,
        on_status: StatusCallback | None = None,
    ):
        self.storage = storage
        self.relay = relay
        self.settings = settings or get_settings()
        self.on_status = on_status
        self.stage: SubmissionStage = "health_check"

    def _status(self, message: str) -> None:
        logger.info("[%s] %s", self.stage, message)
        if self.on_status is not None:
            self.on_status(message)

    def _result(self, status: SubmissionStatus, message: str, **extra) -> SubmissionResult:
        self._status(message)
        return SubmissionResult(status=status, stage=self.stage, message=message, **extra)

    async def submit(self, form: JobForm, *, page_url: str = "") -> SubmissionResult:
        self.stage = "health_check"
        try:
            return await self._run(form, page_url)
        except JustApplyError as exc:
            return self._result("failed", f"Error: {exc.message}")
        except Exception as exc:
            logger.exception("Processing error at stage %s", self.stage)
            return self._result("failed", f"Error: {exc}")

    async def _run(self, form: JobForm, page_url: str) -> SubmissionResult:
        self._status("Checking server status...")
        if not await self.relay.check_health():
            raise ConnectivityError("Backend server is not responding. Please try again later.")

        self.stage = "field_validation"
        if not form.is_complete():
            return self._result("invalid", "Please fill in all job details")

        stored = await self.storage.get([*PROFILE_KEYS, APPLICATIONS_KEY])
        if not all(stored.get(key) for key in PROFILE_KEYS):
            return self._result("invalid", "Please complete the initial setup first")
        email = str(stored["email"])
        applications = parse_applications(stored.get(APPLICATIONS_KEY))

        self.stage = "document_annotation"
        self._status("Processing...")
        document = annotate_resume(
            str(stored["resumeContent"]),
            str(stored["resumeName"]),
            company=form.company,
            job_role=form.job_role,
            description=form.description,
        )

        self.stage = "document_validation"
        validate_document(document, max_bytes=self.settings.max_upload_bytes)

        self.stage = "record_persistence"
        applications.append(
            Application(
                company=form.company,
                job_role=form.job_role,
                description=form.description,
                url=page_url,
            )
        )
        await self.storage.set({APPLICATIONS_KEY: [app.to_store() for app in applications]})

        self.stage = "upload"
        self._status("Sending to server...")
        response = await self.relay.upload(
            document,
            username=email,
            company=form.company,
            job_role=form.job_role,
        )

        self.stage = "response_validation"
        pdf_bytes = self.relay.extract_document(response)

        self.stage = "complete"
        output_path = await asyncio.to_thread(
            self._save_download, output_filename(form.company, form.job_role), pdf_bytes
        )
        form.clear()
        return self._result(
            "completed",
            "Resume processed successfully!",
            output_path=output_path,
            applications=applications,
        )

    def _save_download(self, filename: str, content: bytes) -> Path:
        download_dir = Path(self.settings.download_dir)
        download_dir.mkdir(parents=True, exist_ok=True)
        path = download_dir / filename
        path.write_bytes(content)
        return path
