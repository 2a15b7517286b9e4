"""Mapping of logical aspect ratios onto provider size strings."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    LANDSCAPE = "16:9"
    PORTRAIT = "9:16"
    STANDARD = "4:3"
    STANDARD_PORTRAIT = "3:4"


class ModelFamily(str, Enum):
    """OpenAI-compatible image model families, keyed by model id."""

    DALL_E_3 = "dall-e-3"
    GPT_IMAGE_1 = "gpt-image-1"


DEFAULT_SIZE = "1024x1024"

_SIZES = {
    ModelFamily.DALL_E_3: {
        AspectRatio.SQUARE: "1024x1024",
        AspectRatio.LANDSCAPE: "1792x1024",
        AspectRatio.PORTRAIT: "1024x1792",
    },
    ModelFamily.GPT_IMAGE_1: {
        AspectRatio.SQUARE: "1024x1024",
        AspectRatio.LANDSCAPE: "1536x1024",
        AspectRatio.PORTRAIT: "1024x1536",
    },
}


def is_supported_ratio(ratio: Optional[str]) -> bool:
    return ratio in {r.value for r in AspectRatio}


def map_size(ratio: Optional[str], model_id: Optional[str]) -> str:
    """Return the ``WIDTHxHEIGHT`` size for ``ratio`` on ``model_id``.

    Total function: unknown ratios (including 4:3 and 3:4, which neither
    family supports natively) and unknown models fall back to a square image.
    """
    try:
        family = ModelFamily(model_id)
        aspect = AspectRatio(ratio)
    except ValueError:
        return DEFAULT_SIZE
    return _SIZES[family].get(aspect, DEFAULT_SIZE)
