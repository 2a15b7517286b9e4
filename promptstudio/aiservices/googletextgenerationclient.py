from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import ConfigError, Operation, UpstreamFormatError
from ..prompts import get_remix_prompt
from ..utils import first_entry, non_empty_str, post_json, read_json
from .textgenerationclient import TextGenerationClient

logger = logging.getLogger(__name__)


class GoogleTextGenerationClient(TextGenerationClient):
    """Gemini ``:generateContent`` adapter used to remix prompts."""

    def __init__(self, http_client: httpx.AsyncClient, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._http = http_client

    def check_configuration(self) -> None:
        if not self.settings.google_remix_model:
            logger.error("REMIX_MODEL is not set.")
            raise ConfigError("Remix model configuration missing.")
        if not self.settings.secret("google_api_key"):
            logger.error("GEMINI_API_KEY is missing.")
            raise ConfigError("API key configuration missing.")

    @property
    def endpoint(self) -> str:
        base = self.settings.google_api_base_url.rstrip("/")
        return f"{base}/models/{self.settings.google_remix_model}:generateContent"

    @staticmethod
    def build_payload(prompt: str) -> dict:
        return {"contents": [{"parts": [{"text": get_remix_prompt(prompt)}]}]}

    @staticmethod
    def _extract_text(data: Any) -> Optional[str]:
        candidate = first_entry(data, "candidates")
        content = candidate.get("content") if candidate else None
        part = first_entry(content, "parts")
        text = non_empty_str(part.get("text")) if part else None
        return text.strip() if text else None

    async def remix(self, prompt: str) -> str:
        url = self.endpoint
        logger.info("Sending remix request to Google text API: %s", url)
        response = await post_json(
            self._http,
            url,
            self.build_payload(prompt),
            params={"key": self.settings.secret("google_api_key")},
        )

        text = self._extract_text(read_json(response))
        if text is None:
            logger.error("Unexpected response structure from Google text API: %.500s", response.text)
            raise UpstreamFormatError(Operation.REMIX)
        return text
