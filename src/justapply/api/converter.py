from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ConversionRequest:
    filename: str
    content: bytes
    content_type: str
    username: str = ""
    company: str = ""
    job_role: str = ""


class DocumentConverter(Protocol):
    def convert(self, request: ConversionRequest) -> bytes | None:
        """Return the generated PDF, or ``None`` when nothing was produced."""


class StubConverter:
    """Accepts every upload and produces no document."""

    def convert(self, request: ConversionRequest) -> bytes | None:
        logger.info(
            "Received %s (%d bytes) for username=%s company=%s jobRole=%s; no conversion configured",
            request.filename,
            len(request.content),
            request.username,
            request.company,
            request.job_role,
        )
        return None
