"""Wallgen - isometric city wallpaper generation gateway."""

__version__ = "1.0.0"

from wallgen.core.config import WallgenConfig, config

__all__ = [
    "WallgenConfig",
    "config",
]
