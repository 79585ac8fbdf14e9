"""Exceptions raised by the submission client."""

from __future__ import annotations


class JustApplyError(Exception):
    """Base class for errors reported to the user as a status message."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConnectivityError(JustApplyError):
    """The relay server could not be reached (health check or upload)."""


class DocumentValidationError(JustApplyError):
    """The annotated resume failed validation before upload."""


class ServerResponseError(JustApplyError):
    """
    The relay server answered, but not with a usable document.

    Attributes:
        message: Server-supplied error when parseable, else a generic description
        status_code: HTTP status of the response, if any
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)
