from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from justapply.types import HealthStatus


class HealthResponse(HealthStatus):
    pass


class ConvertAckResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str = "File processed successfully"


class ErrorResponse(BaseModel):
    status: Literal["error"] = "error"
    error: str
