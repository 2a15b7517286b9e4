"""Error taxonomy shared by the router and the provider adapters.

Every failure is raised as an :class:`ApiError` subclass carrying the HTTP
status and the human-readable message that end up in the
``{"success": false, "error": ...}`` wire shape.
"""

from __future__ import annotations

import logging
from enum import Enum

import httpx

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    GENERATE = "generate"
    REMIX = "remix"


# (failure verb, service noun) per operation
_WORDING = {
    Operation.GENERATE: ("generate image", "image generation"),
    Operation.REMIX: ("remix prompt", "prompt remix"),
}


class ApiError(Exception):
    """Base class for failures reported to the client."""

    status_code: int = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ApiError):
    status_code = 400


class ConfigError(ApiError):
    status_code = 500


class UpstreamHttpError(ApiError):
    """The provider answered with a non-2xx status; error statuses are passed through."""

    def __init__(self, operation: Operation, status_code: int | None, message: str | None = None) -> None:
        verb, _ = _WORDING[operation]
        super().__init__(
            message or f"Failed to {verb} due to API error.",
            status_code or 500,
        )


class UpstreamUnreachableError(ApiError):
    def __init__(self, operation: Operation) -> None:
        _, noun = _WORDING[operation]
        super().__init__(f"No response received from {noun} service.")


class RequestSetupError(ApiError):
    def __init__(self, operation: Operation, reason: str) -> None:
        verb, _ = _WORDING[operation]
        super().__init__(f"Failed to {verb}: {reason}" if reason else f"Failed to {verb}.")


class UpstreamFormatError(ApiError):
    def __init__(self, operation: Operation) -> None:
        _, noun = _WORDING[operation]
        super().__init__(f"Invalid response format received from {noun} API.")


class ClientClosedRequestError(ApiError):
    """The client went away before the upstream call finished."""

    status_code = 499

    def __init__(self) -> None:
        super().__init__("Client closed request.")


def extract_upstream_message(response: httpx.Response) -> str | None:
    """Best-effort ``error.message`` (or string ``error``) from an upstream error body."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message
    elif isinstance(error, str) and error.strip():
        return error
    return None


# Raised by httpx before anything reaches the network.
_SETUP_ERRORS = (httpx.UnsupportedProtocol, httpx.LocalProtocolError, httpx.InvalidURL)


def normalize_upstream_error(exc: BaseException, operation: Operation) -> ApiError:
    """Classify a failure from an adapter into exactly one :class:`ApiError`."""
    if isinstance(exc, ApiError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        response = exc.response
        logger.error(
            "Upstream %s call failed with status %s: %s",
            operation.value,
            response.status_code,
            response.text,
        )
        # redirects are not followed; only client and server errors keep their status
        status_code = response.status_code if response.status_code >= 400 else None
        return UpstreamHttpError(
            operation,
            status_code,
            extract_upstream_message(response),
        )

    if isinstance(exc, _SETUP_ERRORS):
        logger.error("Could not send upstream %s request: %s", operation.value, exc)
        return RequestSetupError(operation, str(exc))

    if isinstance(exc, httpx.RequestError):
        logger.error("No response from upstream %s service: %r", operation.value, exc)
        return UpstreamUnreachableError(operation)

    logger.exception("Failed to prepare upstream %s request", operation.value, exc_info=exc)
    return RequestSetupError(operation, str(exc))
