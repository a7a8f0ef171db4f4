"""Pydantic request and response models for the Wallgen API.

FastAPI uses these for request validation, serialisation, and OpenAPI
documentation.  The wallpaper request body is
:class:`wallgen.core.models.GenerationRequest` itself.

Models
------
GenerateRequest
    Payload for ``POST /generate``.
RestyleParams
    Header-sourced parameters for ``POST /restyle``.
WallpaperQueuedResponse
    Body of the 202 returned by ``POST /wallpaper``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from wallgen.core.models import Dimension, StrictDimension


class GenerateRequest(BaseModel):
    """Request body for the ``POST /generate`` endpoint.

    Attributes:
        prompt: Text prompt (1-2000 characters).
        width: Image width in pixels (512-4096, multiple of 8).
        height: Image height in pixels (512-4096, multiple of 8).
        model: Optional fal.ai endpoint id; must start with ``fal-ai/``.
        negative_prompt: Optional text describing what to avoid.
        num_inference_steps: Optional step count (1-100).
    """

    prompt: str = Field(..., min_length=1, max_length=2000, description="Text prompt.")
    width: StrictDimension = Field(..., description="Image width in pixels.")
    height: StrictDimension = Field(..., description="Image height in pixels.")
    model: str | None = Field(
        default=None,
        description="fal.ai endpoint id (e.g. 'fal-ai/flux/dev').",
    )
    negative_prompt: str | None = Field(
        default=None,
        max_length=2000,
        description="Optional negative prompt (not supported by all models).",
    )
    num_inference_steps: int | None = Field(
        default=None,
        ge=1,
        le=100,
        description="Number of inference steps.",
    )

    @field_validator("model")
    @classmethod
    def _fal_model(cls, value: str | None) -> str | None:
        if value is not None and not value.startswith("fal-ai/"):
            raise ValueError("Model must start with 'fal-ai/'")
        return value


class RestyleParams(BaseModel):
    """Parameters of ``POST /restyle``, read from request headers.

    Attributes:
        style: Style instruction from ``X-Style`` (1-2000 characters).
        width: Target width from ``X-Width``.
        height: Target height from ``X-Height``.
    """

    style: str = Field(..., min_length=1, max_length=2000)
    width: Dimension
    height: Dimension


class WallpaperQueuedResponse(BaseModel):
    request_id: str
    status_url: str
    response_url: str
    message: str = (
        "Image generation queued. Poll GET /wallpaper/status/{request_id} until status "
        "is Completed, then fetch image from GET /wallpaper/result/{request_id}"
    )
