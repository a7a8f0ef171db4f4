"""API routers, one per resource."""

from wallgen.api.routers.catalog import router as catalog_router
from wallgen.api.routers.generate import router as generate_router
from wallgen.api.routers.restyle import router as restyle_router
from wallgen.api.routers.wallpaper import router as wallpaper_router

__all__ = [
    "catalog_router",
    "generate_router",
    "restyle_router",
    "wallpaper_router",
]
