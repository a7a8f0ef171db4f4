"""Aspect-ratio and orientation normalisation.

fal.ai image-to-image endpoints accept only a fixed set of aspect ratios,
and the wallpaper prompt needs an orientation-specific framing instruction.
Both are derived here from the requested pixel dimensions.
"""

from __future__ import annotations

from typing import Literal

Orientation = Literal["portrait", "landscape", "square"]

# Iteration order is significant: on a tie the earlier ratio wins.
SUPPORTED_RATIOS: tuple[str, ...] = (
    "21:9",
    "16:9",
    "4:3",
    "3:2",
    "1:1",
    "2:3",
    "3:4",
    "9:16",
    "9:21",
)

_ORIENTATION_LABELS: dict[str, str] = {
    "portrait": "portrait/vertical (tall)",
    "landscape": "landscape/horizontal (wide)",
    "square": "square",
}

_FRAMING_HINTS: dict[str, str] = {
    "portrait": (
        "Vertical portrait framing—platform fully contained, centered, "
        "with sky above and below."
    ),
    "landscape": "Horizontal landscape framing—platform fully contained, centered.",
    "square": "Square framing—platform centered with equal margin.",
}


def ratio_value(ratio: str) -> float:
    """Return the numeric value of a ``"w:h"`` ratio string."""
    w, h = ratio.split(":")
    return int(w) / int(h)


def closest_aspect_ratio(width: int, height: int) -> str:
    """Return the supported ratio closest to ``width / height``.

    Args:
        width: Target width in pixels.
        height: Target height in pixels.

    Returns:
        The entry of :data:`SUPPORTED_RATIOS` with the smallest absolute
        difference to the requested ratio.  Ties go to the entry listed
        first.
    """
    target = width / height
    best = SUPPORTED_RATIOS[0]
    best_diff = float("inf")
    for ratio in SUPPORTED_RATIOS:
        diff = abs(ratio_value(ratio) - target)
        if diff < best_diff:
            best, best_diff = ratio, diff
    return best


def orientation(width: int, height: int) -> Orientation:
    if height > width:
        return "portrait"
    if width > height:
        return "landscape"
    return "square"


def orientation_label(width: int, height: int) -> str:
    """Human-readable orientation used in the language-model user message."""
    return _ORIENTATION_LABELS[orientation(width, height)]


def framing_hint(width: int, height: int) -> str:
    """Framing instruction appended to the composition fragment."""
    return _FRAMING_HINTS[orientation(width, height)]
