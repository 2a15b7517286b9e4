from __future__ import annotations

from abc import ABC, abstractmethod

from ..errors import ConfigError

# Define an abstract interface for text generation clients so the remix
# provider can be swapped or stubbed without touching the router.


class TextGenerationClient(ABC):
    """Abstract interface for a prompt-rewriting client."""

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
    async def remix(self, prompt: str) -> str:
        """Rewrite ``prompt`` to be more descriptive and return the new text."""
