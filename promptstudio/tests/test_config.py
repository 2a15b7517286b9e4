"""Tests for :mod:`promptstudio.config`."""

from __future__ import annotations

import sys
from pathlib import Path

import pydantic
import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))
from promptstudio.config import Settings, get_settings

_ENV_NAMES = (
    "GEMINI_API_KEY",
    "IMAGE_MODEL",
    "REMIX_MODEL",
    "OPENAI_API_KEY",
    "PORT",
    "REJECT_UNKNOWN_ASPECT_RATIO",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_read_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "google-key")
    monkeypatch.setenv("IMAGE_MODEL", "imagen-3.0-generate-002")
    monkeypatch.setenv("REMIX_MODEL", "gemini-2.0-flash")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("REJECT_UNKNOWN_ASPECT_RATIO", "true")

    settings = Settings(_env_file=None)

    assert settings.secret("google_api_key") == "google-key"
    assert settings.google_image_model == "imagen-3.0-generate-002"
    assert settings.google_remix_model == "gemini-2.0-flash"
    assert settings.openai_api_key is None
    assert settings.port == 8080
    assert settings.reject_unknown_aspect_ratio is True


def test_defaults() -> None:
    settings = Settings(_env_file=None, openai_api_key="openai-key")

    assert settings.port == 3000
    assert settings.reject_unknown_aspect_ratio is False
    assert settings.secret("google_api_key") == ""


def test_missing_all_credentials_refuses_to_start() -> None:
    with pytest.raises(pydantic.ValidationError, match="No image generation credential"):
        Settings(_env_file=None)


def test_empty_credentials_count_as_missing(monkeypatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "")
    monkeypatch.setenv("OPENAI_API_KEY", "")

    with pytest.raises(pydantic.ValidationError):
        Settings(_env_file=None)


def test_settings_are_immutable() -> None:
    settings = Settings(_env_file=None, google_api_key="google-key")

    with pytest.raises(pydantic.ValidationError):
        settings.google_image_model = "something-else"


def test_get_settings_is_cached(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "openai-key")

    assert get_settings() is get_settings()
