"""FastAPI dependencies: shared HTTP client, services, and credentials.

Credentials come from request headers and are returned as plain strings so
route handlers pass them explicitly into the core.  Nothing here caches a
key beyond the request that supplied it.
"""

from __future__ import annotations

import httpx
from fastapi import Depends, Header, Request

from wallgen.core.config import WallgenConfig, config
from wallgen.core.errors import MissingCredentialError
from wallgen.core.fal import FalClient
from wallgen.core.imaging import ImagingService
from wallgen.core.wallpaper import WallpaperService


def get_config() -> WallgenConfig:
    return config


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the application-wide client created in the lifespan."""
    return request.app.state.http_client


def get_fal_client(
    client: httpx.AsyncClient = Depends(get_http_client),
    cfg: WallgenConfig = Depends(get_config),
) -> FalClient:
    return FalClient(client, cfg)


def get_wallpaper_service(
    client: httpx.AsyncClient = Depends(get_http_client),
    cfg: WallgenConfig = Depends(get_config),
) -> WallpaperService:
    return WallpaperService(client, cfg)


def get_imaging_service(
    client: httpx.AsyncClient = Depends(get_http_client),
    cfg: WallgenConfig = Depends(get_config),
) -> ImagingService:
    return ImagingService(client, cfg)


def require_fal_key(x_fal_key: str | None = Header(default=None)) -> str:
    """Extract the caller's fal.ai key from ``X-Fal-Key``.

    Raises:
        MissingCredentialError: When the header is absent or empty.
    """
    if not x_fal_key:
        raise MissingCredentialError("Missing X-Fal-Key header. Provide your fal.ai API key.")
    return x_fal_key


def require_google_key(x_google_key: str | None = Header(default=None)) -> str:
    """Extract the caller's Google AI key from ``X-Google-Key``.

    Raises:
        MissingCredentialError: When the header is absent or empty.
    """
    if not x_google_key:
        raise MissingCredentialError(
            "Missing X-Google-Key header. Provide your Google AI API key."
        )
    return x_google_key
