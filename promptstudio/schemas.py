"""Pydantic models shared by the FastAPI endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class GenerateRequest(BaseModel):
    # Required-ness is checked by the service so the error text matches the API contract.
    prompt: Optional[str] = Field(None, description="Text prompt for image generation")
    aspectRatio: Optional[str] = Field(None, description="One of 1:1, 16:9, 9:16, 4:3, 3:4")
    provider: Optional[str] = Field(None, description="google (default) or openai")
    openaiModel: Optional[str] = Field(None, description="dall-e-3 or gpt-image-1; required for openai")


class RemixRequest(BaseModel):
    prompt: Optional[str] = Field(None, description="Prompt to rewrite")


class GenerateResponse(BaseModel):
    success: bool = True
    imageData: str = Field(..., description="PNG image as a base64 data URI")


class RemixResponse(BaseModel):
    success: bool = True
    remixedPrompt: str = Field(..., description="Rewritten prompt")


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class HealthResponse(BaseModel):
    status: str
    providers: List[str]
    imageModel: Optional[str] = None
    remixModel: Optional[str] = None
