from __future__ import annotations

import json
import logging

import httpx

from justapply.config import Settings, get_settings
from justapply.core.document import AnnotatedDocument
from justapply.errors import ConnectivityError, ServerResponseError

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"


class RelayClient:
    """Client for the conversion server's ``/health`` and ``/convert`` endpoints."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = (base_url or self.settings.relay_base_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=float(self.settings.relay_timeout_sec),
            transport=transport,
        )

    async def __aenter__(self) -> RelayClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def check_health(self) -> bool:
        logger.debug("Checking backend health at %s", self.base_url)
        try:
            response = await self._client.get(
                "/health",
                headers={"Accept": "application/json", "Content-Type": "application/json"},
            )
            logger.debug(
                "Health response status=%s content_type=%s cors=%s",
                response.status_code,
                response.headers.get("content-type"),
                response.headers.get("access-control-allow-origin"),
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Health check error: %s", exc)
            return False

        if not response.is_success:
            logger.warning("Health check failed: %s", data)
            return False

        return isinstance(data, dict) and data.get("status") == "ok"

    async def upload(
        self,
        document: AnnotatedDocument,
        *,
        username: str,
        company: str,
        job_role: str,
    ) -> httpx.Response:
        logger.debug(
            "Uploading %s (%d bytes) to %s/convert for username=%s company=%s jobRole=%s",
            document.name,
            document.size,
            self.base_url,
            username,
            company,
            job_role,
        )
        try:
            response = await self._client.post(
                "/convert",
                files={"file": (document.name, document.content, document.media_type)},
                data={"username": username, "company": company, "jobRole": job_role},
                headers={"Accept": "application/pdf, application/json"},
            )
        except httpx.TransportError as exc:
            raise ConnectivityError(f"Could not reach conversion server: {exc}") from exc
        return response

    def extract_document(self, response: httpx.Response) -> bytes:
        """Generated PDF from an upload response, or ``ServerResponseError``."""
        if not response.is_success:
            logger.error("Server response text: %s", response.text)
            raise ServerResponseError(self._error_message(response), status_code=response.status_code)

        content_type = response.headers.get("content-type", "")
        if PDF_MEDIA_TYPE not in content_type:
            raise ServerResponseError("Invalid response format from server", status_code=response.status_code)

        if not response.content:
            raise ServerResponseError("Received empty PDF file", status_code=response.status_code)

        return response.content

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        fallback = f"Server Error ({response.status_code})"
        try:
            payload = json.loads(response.text)
        except ValueError:
            return fallback
        if isinstance(payload, dict) and payload.get("error"):
            return str(payload["error"])
        return fallback
