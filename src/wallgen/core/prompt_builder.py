"""Wallpaper prompt compilation.

The final prompt is assembled from two kinds of content: the dynamic scene
fields written by the language model for this request, and the fixed
Isometric Micro-World fragments from :mod:`wallgen.core.style` that keep
every wallpaper visually consistent.

Prompt Structure
----------------
::

    scene              <- language model
    subjects           <- [platform, urban layout, *language model subjects]
    color_palette      <- language model
    lighting           <- language model
    mood               <- language model
    style              <- fixed
    composition        <- fixed + orientation framing hint
    camera             <- fixed
    platform           <- fixed
    environment        <- fixed

The renderer gives earlier tokens more weight, so the volatile scene content
leads and the invariant style content trails.  The two injected subjects are
*prepended* to the subject list so the platform is always described first.

Usage
-----
::

    scene = await synthesizer.synthesize(request, google_key)
    prompt = compose_prompt(scene, request.width, request.height)
    prompt_string = prompt.to_prompt_string()
"""

from __future__ import annotations

from wallgen.core import style
from wallgen.core.aspect import framing_hint, orientation_label
from wallgen.core.models import (
    CameraSpec,
    ComposedPrompt,
    GenerationRequest,
    PromptSubject,
    SceneDescription,
)


def build_user_message(request: GenerationRequest) -> str:
    """Build the short user turn sent alongside the system instruction.

    Args:
        request: Validated generation request.

    Returns:
        Newline-separated city, weather, time and dimension lines.
    """
    label = orientation_label(request.width, request.height)
    return (
        f"City: {request.city}\n"
        f"Weather: {request.weather}\n"
        f"Time: {request.datetime}\n"
        f"Image dimensions: {request.width}×{request.height} ({label})"
    )


def compose_prompt(scene: SceneDescription, width: int, height: int) -> ComposedPrompt:
    """Merge a synthesized scene with the fixed style fragments.

    Args:
        scene: Validated language-model output.
        width: Target width, used for the orientation framing hint.
        height: Target height, used for the orientation framing hint.

    Returns:
        A :class:`ComposedPrompt` in renderer priority order.
    """
    subjects = [
        PromptSubject(**style.PLATFORM_SUBJECT),
        PromptSubject(**style.URBAN_LAYOUT_SUBJECT),
    ]
    # Model subjects keep their order; duplicates are left alone.
    subjects.extend(PromptSubject(**s.model_dump()) for s in scene.subjects)

    return ComposedPrompt(
        scene=scene.scene,
        subjects=subjects,
        color_palette=list(scene.color_palette),
        lighting=scene.lighting,
        mood=scene.mood,
        style=style.STYLE,
        composition=f"{style.COMPOSITION} {framing_hint(width, height)}",
        camera=CameraSpec(**style.CAMERA),
        platform=style.PLATFORM,
        environment=style.ENVIRONMENT,
    )
