"""FastAPI entry point exposing the PromptStudio REST API."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import pydantic
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, get_settings
from .errors import ApiError
from .schemas import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
    RemixRequest,
    RemixResponse,
)
from .service import PromptStudioService, get_promptstudio_service
from .utils import run_until_disconnected

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Startup: load and validate settings. Shutdown: close the upstream client."""
    try:
        settings = get_settings()
    except pydantic.ValidationError as exc:
        logger.error("Refusing to start: %s", exc)
        raise

    logging.getLogger().setLevel(settings.log_level)
    if not settings.google_image_model:
        logger.warning("IMAGE_MODEL is not set; Google image generation will be rejected.")
    if not settings.google_remix_model:
        logger.warning("REMIX_MODEL is not set; prompt remixing will be rejected.")
    logger.info("Backend server listening on http://%s:%s", settings.host, settings.port)

    yield

    if get_promptstudio_service.cache_info().currsize:
        await get_promptstudio_service().aclose()
    logger.info("Shutdown complete.")


app = FastAPI(title="PromptStudio Backend", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# ----------------------------------------------------------------------
# Error handling
# ----------------------------------------------------------------------
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Rejected malformed body on %s: %s", request.url.path, exc.errors())
    return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body.")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Unknown method on a known path is reported like any unmatched route.
    if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
        return _error(status.HTTP_404_NOT_FOUND, "Not Found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


# ----------------------------------------------------------------------
# Routes
# ----------------------------------------------------------------------
@app.get("/health", response_model=HealthResponse, summary="Health Check Endpoint")
async def healthcheck(
    settings: Settings = Depends(get_settings),
    service: PromptStudioService = Depends(get_promptstudio_service),
):
    return HealthResponse(
        status="ok",
        providers=service.configured_providers,
        imageModel=settings.google_image_model,
        remixModel=settings.google_remix_model if service.remix_available else None,
    )


@app.post(
    "/api/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Generate an image from a prompt",
)
async def generate(
    request: Request,
    payload: Optional[GenerateRequest] = None,
    service: PromptStudioService = Depends(get_promptstudio_service),
):
    return await run_until_disconnected(request, service.handle_generate(payload or GenerateRequest()))


@app.post(
    "/api/remix",
    response_model=RemixResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Rewrite a prompt to be more descriptive",
)
async def remix(
    request: Request,
    payload: Optional[RemixRequest] = None,
    service: PromptStudioService = Depends(get_promptstudio_service),
):
    return await run_until_disconnected(request, service.handle_remix(payload or RemixRequest()))


__all__ = ["app"]


def main() -> None:  # pragma: no cover - convenience entry point
    import uvicorn

    try:
        settings = get_settings()
    except pydantic.ValidationError as exc:
        logging.basicConfig(format=LOG_FORMAT, stream=sys.stderr)
        logger.error("ERROR: %s", exc)
        sys.exit(1)
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, stream=sys.stdout)
    uvicorn.run("promptstudio.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":  # pragma: no cover
    main()
