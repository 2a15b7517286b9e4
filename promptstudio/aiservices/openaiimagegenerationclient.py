from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..aspectratio import ModelFamily, map_size
from ..config import Settings, get_settings
from ..errors import ConfigError, Operation, UpstreamFormatError, ValidationError
from ..utils import first_entry, non_empty_str, post_json, read_json, to_png_data_uri
from .imagegenerationclient import ImageGenerationClient, ImagePrompt

logger = logging.getLogger(__name__)

# Fixed quality tier per model family
_QUALITY = {
    ModelFamily.DALL_E_3: "standard",
    ModelFamily.GPT_IMAGE_1: "auto",
}


class OpenAIImageGenerationClient(ImageGenerationClient):
    """
    Works with OpenAI-compatible image endpoints:
      - dall-e-3: shared generations endpoint, model id in the payload
      - gpt-image-1: dedicated endpoint, model implied by the URL
    Both return base64 PNG bytes under ``data[0].b64_json``.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self._http = http_client

    def check_configuration(self) -> None:
        if not self.settings.secret("openai_api_key"):
            logger.error("OPENAI_API_KEY is missing.")
            raise ConfigError("OpenAI API key configuration missing.")

    @staticmethod
    def resolve_family(model: Optional[str]) -> ModelFamily:
        try:
            return ModelFamily(model)
        except ValueError:
            raise ValidationError(f"Unsupported OpenAI model: {model}") from None

    def endpoint_for(self, family: ModelFamily) -> str:
        if family is ModelFamily.DALL_E_3:
            return self.settings.openai_images_url
        return self.settings.openai_gpt_image_url

    def build_payload(self, family: ModelFamily, request: ImagePrompt) -> dict:
        payload: dict = {}
        if family is ModelFamily.DALL_E_3:
            payload["model"] = family.value
        payload.update(
            {
                "prompt": request.prompt,
                "size": map_size(request.aspect_ratio, family.value),
                "n": 1,
                "response_format": "b64_json",
                "quality": _QUALITY[family],
            }
        )
        return payload

    async def generate(self, request: ImagePrompt) -> str:
        family = self.resolve_family(request.model)
        url = self.endpoint_for(family)
        payload = self.build_payload(family, request)
        logger.info("Sending %s request to OpenAI image API: %s (size=%s)", family.value, url, payload["size"])

        response = await post_json(
            self._http,
            url,
            payload,
            headers={"Authorization": f"Bearer {self.settings.secret('openai_api_key')}"},
        )

        entry = first_entry(read_json(response), "data")
        image = non_empty_str(entry.get("b64_json")) if entry else None
        if image is None:
            logger.error("Unexpected response structure from OpenAI image API: %.500s", response.text)
            raise UpstreamFormatError(Operation.GENERATE)

        logger.info("Successfully received image data from OpenAI image API.")
        return to_png_data_uri(image)
