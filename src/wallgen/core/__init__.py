"""Core functionality for the Wallgen gateway.

Architecture Overview
---------------------
1. **Configuration Layer** (config.py):
   - Environment-based configuration using Pydantic Settings
   - All settings prefixed with WALLGEN_ in .env files

2. **Prompt Layer** (aspect.py, style.py, prompt_builder.py, gemini.py):
   - Aspect-ratio and orientation normalisation
   - Versioned Isometric Micro-World style data
   - Scene synthesis with Gemini and deterministic prompt composition

3. **Render Layer** (fal.py, jobs.py, wallpaper.py, imaging.py, cdn.py):
   - fal.ai queue, run, storage and catalog calls
   - Stateless translation of remote job status into canonical states
   - Streaming relay of finished images from the CDN

Nothing in this package stores requests, jobs, images or API keys.
"""

from wallgen.core.config import WallgenConfig, config
from wallgen.core.errors import GatewayError
from wallgen.core.imaging import ImagingService
from wallgen.core.wallpaper import WallpaperService

__all__ = [
    "GatewayError",
    "ImagingService",
    "WallgenConfig",
    "WallpaperService",
    "config",
]
