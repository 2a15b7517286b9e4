from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ..errors import ConfigError


@dataclass(frozen=True)
class ImagePrompt:
    """Provider-agnostic image generation request."""

    prompt: str
    aspect_ratio: Optional[str] = None
    model: Optional[str] = None


class ImageGenerationClient(ABC):
    """Abstract interface for an image generation provider.

    Implementations shape the provider call, perform it and normalize the
    response to a PNG data URI.
    """

    @abstractmethod
    def check_configuration(self) -> None:
        """Raise ``ConfigError`` when credentials or model names are missing."""

    @property
    def is_configured(self) -> bool:
        try:
            self.check_configuration()
        except ConfigError:
            return False
        return True

    @abstractmethod
    async def generate(self, request: ImagePrompt) -> str:
        """Generate an image from a prompt and return it as a data URI."""
