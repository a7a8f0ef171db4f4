"""Request-scoped data model for the wallpaper workflow.

Models
------
GenerationRequest
    Validated city/weather/time input plus target dimensions.  Doubles as
    the JSON body of ``POST /wallpaper``.
Subject
    One entry of the language model's ``subjects`` array.
SceneDescription
    The language model's structured output, validated after parsing.
PromptSubject
    A subject as it appears in the final prompt (the injected platform and
    urban-layout subjects use types outside the model's enum).
ComposedPrompt
    The merged prompt sent to the renderer.  Field declaration order is the
    serialisation order and therefore the renderer's priority order.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Pixel dimension accepted by every rendering endpoint.  ``StrictDimension``
# is used for JSON bodies, where "1024" or 1024.5 must be rejected;
# ``Dimension`` for header-sourced values that arrive as strings.
Dimension = Annotated[int, Field(ge=512, le=4096, multiple_of=8)]
StrictDimension = Annotated[int, Field(strict=True, ge=512, le=4096, multiple_of=8)]


class GenerationRequest(BaseModel):
    """Sparse user input for one wallpaper.

    Attributes:
        city: City whose landmarks populate the platform.
        weather: Free-text weather description.
        datetime: Free-text time-of-day label (e.g. ``"Sunset"``).
        width: Target width in pixels (512-4096, multiple of 8).
        height: Target height in pixels (512-4096, multiple of 8).
    """

    model_config = ConfigDict(frozen=True)

    city: str = Field(..., min_length=1, max_length=200, description="City name.")
    weather: str = Field(..., min_length=1, max_length=500, description="Weather description.")
    datetime: str = Field(..., min_length=1, max_length=200, description="Time-of-day label.")
    width: StrictDimension = Field(..., description="Image width in pixels.")
    height: StrictDimension = Field(..., description="Image height in pixels.")


class Subject(BaseModel):
    type: Literal["Landmark", "Environment"]
    description: str
    pose: str
    position: str


class SceneDescription(BaseModel):
    """Structured scene produced by the language model.

    Validation is stricter than the provider-side schema: a scene must name
    at least one Landmark and exactly one Environment subject, and the
    palette may not be empty.
    """

    scene: str
    subjects: list[Subject]
    color_palette: list[str] = Field(..., min_length=1)
    lighting: str
    mood: str

    @model_validator(mode="after")
    def _check_subject_mix(self) -> SceneDescription:
        landmarks = sum(1 for s in self.subjects if s.type == "Landmark")
        environments = sum(1 for s in self.subjects if s.type == "Environment")
        if landmarks < 1:
            raise ValueError("subjects must include at least one Landmark")
        if environments != 1:
            raise ValueError(f"subjects must include exactly one Environment, got {environments}")
        return self


class PromptSubject(BaseModel):
    type: str
    description: str
    pose: str
    position: str


class CameraSpec(BaseModel):
    angle: str
    distance: str
    lens: str


class ComposedPrompt(BaseModel):
    """Final prompt for the renderer.

    Dynamic content comes first and fixed style fragments last; the renderer
    weighs earlier content more heavily.  Do not reorder the fields.
    """

    scene: str
    subjects: list[PromptSubject]
    color_palette: list[str]
    lighting: str
    mood: str
    style: str
    composition: str
    camera: CameraSpec
    platform: str
    environment: str

    def to_prompt_string(self) -> str:
        """Serialise to compact JSON in declaration order."""
        return self.model_dump_json()
