from functools import lru_cache
from typing import Literal, Optional

from pydantic import AliasChoices, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration for the PromptStudio backend.

    Read once per process and never mutated afterwards. At least one image
    provider credential must be present or construction fails.
    """

    #----------------------------------------------------------
    # Google settings
    #----------------------------------------------------------
    google_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "google_api_key"),
        description="API key for the Google image and text generation endpoints.",
    )

    google_image_model: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("IMAGE_MODEL", "google_image_model"),
        description="Google image model id used for the predict endpoint.",
    )

    google_remix_model: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("REMIX_MODEL", "google_remix_model"),
        description="Google text model id used to remix prompts.",
    )

    google_api_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        validation_alias=AliasChoices("GOOGLE_API_BASE_URL", "google_api_base_url"),
    )

    #----------------------------------------------------------
    # OpenAI settings
    #----------------------------------------------------------
    openai_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
        description="Bearer credential for the OpenAI-compatible image endpoints.",
    )

    openai_images_url: str = Field(
        default="https://api.openai.com/v1/images/generations",
        validation_alias=AliasChoices("OPENAI_IMAGES_URL", "openai_images_url"),
        description="Endpoint for dall-e-3 class models (model id sent in the payload).",
    )

    openai_gpt_image_url: str = Field(
        default="https://api.openai.com/v1/deployments/gpt-image-1/images/generations",
        validation_alias=AliasChoices("OPENAI_GPT_IMAGE_URL", "openai_gpt_image_url"),
        description="Endpoint for gpt-image-1 class models (model implied by the endpoint).",
    )

    #----------------------------------------------------------
    # Server settings
    #----------------------------------------------------------
    host: str = Field(default="0.0.0.0", validation_alias=AliasChoices("HOST", "host"))
    port: int = Field(default=3000, validation_alias=AliasChoices("PORT", "port"))

    request_timeout_seconds: float = Field(
        default=120.0,
        gt=0.0,
        validation_alias=AliasChoices("REQUEST_TIMEOUT_SECONDS", "request_timeout_seconds"),
        description="Timeout applied to every outbound provider call.",
    )

    reject_unknown_aspect_ratio: bool = Field(
        default=False,
        validation_alias=AliasChoices("REJECT_UNKNOWN_ASPECT_RATIO", "reject_unknown_aspect_ratio"),
        description="Reject unsupported aspect ratios instead of falling back to a square image.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _require_image_credential(self) -> "Settings":
        if not self.secret("google_api_key") and not self.secret("openai_api_key"):
            raise ValueError(
                "No image generation credential configured: set GEMINI_API_KEY or OPENAI_API_KEY."
            )
        return self

    def secret(self, name: str) -> str:
        """Return the plain value of a SecretStr field, or an empty string."""
        value = getattr(self, name)
        return value.get_secret_value() if value is not None else ""


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
