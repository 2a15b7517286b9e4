from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..config import Settings, get_settings
from ..errors import ConfigError, Operation, UpstreamFormatError
from ..utils import first_entry, non_empty_str, post_json, read_json, to_png_data_uri
from .imagegenerationclient import ImageGenerationClient, ImagePrompt

logger = logging.getLogger(__name__)

PERSON_GENERATION = "ALLOW_ADULT"


class GoogleImageGenerationClient(ImageGenerationClient):
    """Imagen ``:predict`` adapter.

    The API key travels as the ``key`` query parameter; the response carries
    base64 PNG bytes under ``predictions[0].bytesBase64Encoded``.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._http = http_client

    def check_configuration(self) -> None:
        if not self.settings.google_image_model:
            logger.error("IMAGE_MODEL is not set.")
            raise ConfigError("Image model configuration missing.")
        if not self.settings.secret("google_api_key"):
            logger.error("GEMINI_API_KEY is missing.")
            raise ConfigError("API key configuration missing.")

    def build_payload(self, request: ImagePrompt) -> dict:
        parameters: dict[str, Any] = {"sampleCount": 1}
        if request.aspect_ratio:
            parameters["aspectRatio"] = request.aspect_ratio
        parameters["personGeneration"] = PERSON_GENERATION
        return {
            "instances": [{"prompt": request.prompt}],
            "parameters": parameters,
        }

    @property
    def endpoint(self) -> str:
        base = self.settings.google_api_base_url.rstrip("/")
        return f"{base}/models/{self.settings.google_image_model}:predict"

    async def generate(self, request: ImagePrompt) -> str:
        url = self.endpoint
        logger.info("Sending request to Google image API: %s", url)
        response = await post_json(
            self._http,
            url,
            self.build_payload(request),
            params={"key": self.settings.secret("google_api_key")},
        )

        data = read_json(response)
        prediction = first_entry(data, "predictions")
        payload = non_empty_str(prediction.get("bytesBase64Encoded")) if prediction else None
        if payload is None:
            logger.error("Unexpected response structure from Google image API: %.500s", response.text)
            raise UpstreamFormatError(Operation.GENERATE)

        logger.info("Successfully received image data from Google image API.")
        return to_png_data_uri(payload)
