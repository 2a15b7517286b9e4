"""Request routing between the HTTP layer and the provider adapters."""

from __future__ import annotations

import logging
from enum import Enum
from functools import lru_cache
from typing import Dict, List, Optional

import httpx

from .aiservices.googleimagegenerationclient import GoogleImageGenerationClient
from .aiservices.googletextgenerationclient import GoogleTextGenerationClient
from .aiservices.imagegenerationclient import ImageGenerationClient, ImagePrompt
from .aiservices.openaiimagegenerationclient import OpenAIImageGenerationClient
from .aiservices.textgenerationclient import TextGenerationClient
from .aspectratio import is_supported_ratio
from .config import Settings, get_settings
from .errors import (
    Operation,
    UpstreamFormatError,
    ValidationError,
    normalize_upstream_error,
)
from .schemas import GenerateRequest, GenerateResponse, RemixRequest, RemixResponse

logger = logging.getLogger(__name__)


class Provider(str, Enum):
    GOOGLE = "google"
    OPENAI = "openai"


DEFAULT_PROVIDER = Provider.GOOGLE


def _require_prompt(prompt: Optional[str], message: str) -> str:
    if not prompt or not prompt.strip():
        raise ValidationError(message)
    return prompt


class PromptStudioService:
    """High-level orchestrator for the image and remix providers."""

    def __init__(self, settings: Settings | None = None, http_client: httpx.AsyncClient | None = None) -> None:
        self.settings = settings or get_settings()
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.request_timeout_seconds),
        )
        self._image_clients: Dict[Provider, ImageGenerationClient] = {
            Provider.GOOGLE: GoogleImageGenerationClient(self._http, self.settings),
            Provider.OPENAI: OpenAIImageGenerationClient(self._http, self.settings),
        }
        self._remix_client: TextGenerationClient = GoogleTextGenerationClient(self._http, self.settings)

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def configured_providers(self) -> List[str]:
        return [provider.value for provider, client in self._image_clients.items() if client.is_configured]

    @property
    def remix_available(self) -> bool:
        return self._remix_client.is_configured

    # ------------------------------------------------------------------
    # Image generation
    # ------------------------------------------------------------------
    async def handle_generate(self, payload: GenerateRequest) -> GenerateResponse:
        prompt = _require_prompt(payload.prompt, "Prompt is required.")
        provider = self._resolve_provider(payload)

        if provider is Provider.OPENAI:
            if not payload.openaiModel:
                raise ValidationError("OpenAI model selection is required.")
            OpenAIImageGenerationClient.resolve_family(payload.openaiModel)
        if payload.aspectRatio and self.settings.reject_unknown_aspect_ratio and not is_supported_ratio(payload.aspectRatio):
            raise ValidationError(f"Unsupported aspect ratio: {payload.aspectRatio}")

        client = self._image_clients[provider]
        client.check_configuration()

        request = ImagePrompt(
            prompt=prompt,
            aspect_ratio=payload.aspectRatio or None,
            model=payload.openaiModel if provider is Provider.OPENAI else None,
        )
        logger.info(
            "Received generation request (provider=%s, model=%s, aspect ratio=%s)",
            provider.value,
            request.model or "-",
            request.aspect_ratio or "default (1:1)",
        )

        try:
            image_data = await client.generate(request)
        except Exception as exc:
            raise normalize_upstream_error(exc, Operation.GENERATE) from exc

        if not image_data:
            logger.error("%s adapter returned an empty image payload", provider.value)
            raise UpstreamFormatError(Operation.GENERATE)
        return GenerateResponse(imageData=image_data)

    # ------------------------------------------------------------------
    # Remix
    # ------------------------------------------------------------------
    async def handle_remix(self, payload: RemixRequest) -> RemixResponse:
        prompt = _require_prompt(payload.prompt, "Prompt is required for remixing.")
        self._remix_client.check_configuration()

        logger.info("Received remix request (%s chars)", len(prompt))
        try:
            remixed = await self._remix_client.remix(prompt)
        except Exception as exc:
            raise normalize_upstream_error(exc, Operation.REMIX) from exc

        if not remixed:
            raise UpstreamFormatError(Operation.REMIX)
        return RemixResponse(remixedPrompt=remixed)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _resolve_provider(payload: GenerateRequest) -> Provider:
        # the default only applies when the field is absent, not when it is null or empty
        if "provider" not in payload.model_fields_set:
            return DEFAULT_PROVIDER
        value = payload.provider
        try:
            return Provider(value)
        except ValueError:
            raise ValidationError(f"Invalid provider specified: {value}") from None


@lru_cache
def get_promptstudio_service() -> PromptStudioService:
    return PromptStudioService(get_settings())
