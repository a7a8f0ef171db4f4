"""Configuration management for the Wallgen gateway.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the WALLGEN_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (WALLGEN_* prefix)
2. .env file in the project root
3. Default values defined in WallgenConfig

Example .env file:
    WALLGEN_GEMINI_MODEL=gemini-3-flash-preview
    WALLGEN_WALLPAPER_MODEL=fal-ai/flux-2-pro
    WALLGEN_HTTP_TIMEOUT=180
    WALLGEN_SERVER_PORT=8787

Credentials
-----------
API keys are deliberately *not* configuration.  Callers supply their own
fal.ai and Google AI keys on every request (``X-Fal-Key`` and
``X-Google-Key`` headers) and the gateway threads them through each
outbound call without storing them.

Usage Example
-------------
    from wallgen.core.config import config

    print(config.wallpaper_model)
    print(config.fal_queue_url)
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class WallgenConfig(BaseSettings):
    """Main configuration for the Wallgen gateway.

    Attributes
    ----------
    Model Settings:
        gemini_model : str
            Gemini model used to synthesize the scene description
        wallpaper_model : str
            fal.ai endpoint that renders wallpapers through the queue
        generate_model : str
            Default fal.ai endpoint for ``POST /generate``
        restyle_model : str
            fal.ai endpoint for ``POST /restyle`` (image-to-image)

    Upstream Services:
        gemini_api_url : str
            Base URL of the Generative Language REST API
        fal_queue_url : str
            Base URL of the fal.ai asynchronous queue
        fal_run_url : str
            Base URL of fal.ai synchronous endpoints
        fal_platform_url : str
            Base URL of the fal.ai platform API (model catalog, pricing)
        fal_rest_url : str
            Base URL of the fal.ai REST API (storage uploads)
        http_timeout : float
            Seconds before an outbound call is abandoned by the transport

    Server Settings:
        server_host : str
            Bind address for uvicorn
        server_port : int
            Port for uvicorn (1024-65535)
        log_level : Literal["DEBUG", "INFO", "WARNING", "ERROR"]
            Root log level applied by the CLI entry point
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WALLGEN_",
        case_sensitive=False,
    )

    # Model settings
    gemini_model: str = Field(
        default="gemini-3-flash-preview",
        description="Gemini model that writes the structured scene description",
    )
    wallpaper_model: str = Field(
        default="fal-ai/flux-2-pro",
        description="fal.ai endpoint that renders wallpapers through the queue",
    )
    generate_model: str = Field(
        default="fal-ai/flux/schnell",
        description="Default fal.ai endpoint for single-shot generation",
    )
    restyle_model: str = Field(
        default="fal-ai/image-editing/style-transfer",
        description="fal.ai endpoint used for image restyling",
    )

    # Upstream services
    gemini_api_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Generative Language REST API base URL",
    )
    fal_queue_url: str = Field(
        default="https://queue.fal.run",
        description="fal.ai queue base URL",
    )
    fal_run_url: str = Field(
        default="https://fal.run",
        description="fal.ai synchronous run base URL",
    )
    fal_platform_url: str = Field(
        default="https://api.fal.ai/v1",
        description="fal.ai platform API base URL (models, pricing)",
    )
    fal_rest_url: str = Field(
        default="https://rest.alpha.fal.ai",
        description="fal.ai REST API base URL (storage uploads)",
    )
    http_timeout: float = Field(
        default=120.0,
        description="Transport timeout in seconds for every outbound call",
        gt=0,
    )

    # Server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    server_port: int = Field(
        default=8787,
        description="Server port",
        ge=1024,
        le=65535,
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level",
    )


# Global configuration instance, loaded from WALLGEN_* variables and .env.
config = WallgenConfig()
