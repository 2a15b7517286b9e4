import asyncio
import logging
from typing import Any, Awaitable, Mapping, Optional, TypeVar

import httpx
from starlette.requests import Request

from .errors import ClientClosedRequestError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DISCONNECT_POLL_SECONDS = 0.5


def to_png_data_uri(b64_payload: str) -> str:
    """Wrap a base64 payload as a PNG data URI usable as an image source."""
    return f"data:image/png;base64,{b64_payload}"


def first_entry(data: Any, key: str) -> Optional[dict]:
    """Return ``data[key][0]`` when it is a dict, else ``None``."""
    if not isinstance(data, dict):
        return None
    entries = data.get(key)
    if not isinstance(entries, list) or not entries:
        return None
    entry = entries[0]
    return entry if isinstance(entry, dict) else None


def non_empty_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


def read_json(response: httpx.Response) -> Any:
    """Decode a response body, returning ``None`` when it is not JSON."""
    try:
        return response.json()
    except ValueError:
        logger.error("Upstream response is not valid JSON: %.200s", response.text)
        return None


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    payload: dict,
    *,
    headers: Optional[Mapping[str, str]] = None,
    params: Optional[Mapping[str, str]] = None,
) -> httpx.Response:
    """POST ``payload`` as JSON and raise ``httpx.HTTPStatusError`` on non-2xx."""
    response = await client.post(url, json=payload, headers=headers, params=params)
    response.raise_for_status()
    return response


async def run_until_disconnected(
    request: Request,
    awaitable: Awaitable[T],
    poll_interval: float = DISCONNECT_POLL_SECONDS,
) -> T:
    """Await ``awaitable`` but cancel it as soon as the client disconnects.

    Raises :class:`ClientClosedRequestError` after cancelling the in-flight work.
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info("Client disconnected from %s, cancelling upstream call", request.url.path)
                task.cancel()
                raise ClientClosedRequestError()
    finally:
        if not task.done():
            task.cancel()
