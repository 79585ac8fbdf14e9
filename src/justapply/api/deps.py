from __future__ import annotations

from fastapi import Request

from justapply.api.converter import DocumentConverter
from justapply.config import Settings


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_converter(request: Request) -> DocumentConverter:
    return request.app.state.converter
