from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SubmissionStatus = Literal["completed", "invalid", "failed"]
SubmissionStage = Literal[
    "health_check",
    "field_validation",
    "document_annotation",
    "document_validation",
    "record_persistence",
    "upload",
    "response_validation",
    "complete",
]

PROFILE_KEYS = ("email", "resumeContent", "resumeName")
APPLICATIONS_KEY = "applications"


def utc_now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class StoredRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_store(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


class UserProfile(StoredRecord):
    email: str
    resume_content: str = Field(alias="resumeContent")
    resume_name: str = Field(alias="resumeName")


class Application(StoredRecord):
    company: str
    job_role: str = Field(alias="jobRole")
    description: str
    date: str = Field(default_factory=utc_now_iso)
    url: str = ""


class JobDetails(StoredRecord):
    company: str = ""
    job_role: str = Field(default="", alias="jobRole")
    job_description: str = Field(default="", alias="jobDescription")


class JobForm(BaseModel):
    company: str = ""
    job_role: str = ""
    description: str = ""

    @classmethod
    def from_details(cls, details: JobDetails) -> JobForm:
        return cls(company=details.company, job_role=details.job_role, description=details.job_description)

    def is_complete(self) -> bool:
        return bool(self.company and self.job_role and self.description)

    def clear(self) -> None:
        self.company = ""
        self.job_role = ""
        self.description = ""


class SubmissionResult(BaseModel):
    status: SubmissionStatus
    stage: SubmissionStage
    message: str
    output_path: Path | None = None
    applications: list[Application] = Field(default_factory=list)


class HealthStatus(BaseModel):
    status: Literal["ok", "error"]
    timestamp: str = Field(default_factory=utc_now_iso)
