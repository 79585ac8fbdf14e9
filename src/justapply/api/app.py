from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from justapply.api.converter import DocumentConverter, StubConverter
from justapply.api.routes import router as relay_router
from justapply.api.schemas import ErrorResponse
from justapply.config import Settings, get_settings

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Accept", "Origin", "X-Requested-With"]
CORS_EXPOSED_HEADERS = ["Content-Type", "Content-Length"]


def create_app(settings: Settings | None = None, converter: DocumentConverter | None = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.converter = converter or StubConverter()

    origins = settings.cors_origin_list or ["*"]

    def allowed_origin(request: Request) -> str:
        if "*" in origins:
            return "*"
        origin = request.headers.get("origin", "")
        return origin if origin in origins else origins[0]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=False,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
        expose_headers=CORS_EXPOSED_HEADERS,
    )

    @app.middleware("http")
    async def cors_headers(request: Request, call_next) -> Response:
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = allowed_origin(request)
        response.headers["Access-Control-Allow-Methods"] = ", ".join(CORS_METHODS)
        response.headers["Access-Control-Allow-Headers"] = ", ".join(CORS_HEADERS)
        return response

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        if any(tuple(error.get("loc", ()))[:2] == ("body", "file") for error in errors):
            message = "No file uploaded"
        else:
            message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
        return JSONResponse(
            status_code=400,
            content=ErrorResponse(error=message).model_dump(),
            headers={"Access-Control-Allow-Origin": allowed_origin(request)},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error("Global error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"status": "error", "error": str(exc) or "Internal server error"},
            headers={"Access-Control-Allow-Origin": allowed_origin(request)},
        )

    app.include_router(relay_router)
    return app
