"""Wallgen — FastAPI Application.

This module is the single entry point for the web application.  It defines
the FastAPI ``app`` instance, wires the routers and exception handlers, and
provides the ``main()`` CLI function that launches the uvicorn server.

Architecture
------------
The application is a stateless gateway:

- **Credentials** arrive on every request (``X-Fal-Key``,
  ``X-Google-Key``) and are passed explicitly to the core.
- **Outbound HTTP** goes through one ``httpx.AsyncClient`` created in the
  lifespan and shared by all requests.  It carries no credentials.
- **Errors** raised by the core are :class:`GatewayError` subclasses and
  are rendered as ``{error, message}`` JSON with their own status code.
- **Nothing is persisted**: no job table, no image store, no key store.

Endpoints
---------
========  ==================================  ==============================
Method    Path                                Purpose
========  ==================================  ==============================
GET       ``/``                               Health check and endpoint list
GET       ``/models``                         fal.ai models with pricing
POST      ``/generate``                       Single-shot text-to-image
POST      ``/restyle``                        Image-to-image style transfer
POST      ``/wallpaper``                      Queue a city wallpaper (202)
GET       ``/wallpaper/status/{request_id}``  Poll wallpaper status
GET       ``/wallpaper/result/{request_id}``  Stream the finished wallpaper
========  ==================================  ==============================

Usage
-----
CLI (installed entry point)::

    wallgen

Direct invocation::

    python -m wallgen.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wallgen import __version__
from wallgen.api.middleware import log_requests
from wallgen.api.responses import validation_error_response
from wallgen.api.routers import catalog_router, generate_router, restyle_router, wallpaper_router
from wallgen.core.config import config
from wallgen.core.errors import GatewayError

logger = logging.getLogger(__name__)

ENDPOINTS: dict[str, str] = {
    "GET /": "Health check",
    "GET /models": "List fal.ai image models with pricing (?category=text-to-image&q=&limit=50&cursor=)",
    "POST /generate": "Generate an image from a prompt",
    "POST /restyle": "Restyle an image with an artistic style (image-to-image)",
    "POST /wallpaper": "Queue an isometric city wallpaper (returns 202 with request_id)",
    "GET /wallpaper/status/{request_id}": "Poll generation status (Queued | Running | Completed)",
    "GET /wallpaper/result/{request_id}": "Fetch the generated image when Completed",
}


# ---------------------------------------------------------------------------
# Application lifecycle — shared HTTP client setup and teardown.
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared outbound HTTP client and close it on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to the application for the duration of its lifetime.
    """
    # --- Startup -----------------------------------------------------------
    app.state.http_client = httpx.AsyncClient(
        timeout=config.http_timeout,
        follow_redirects=True,
    )
    logger.info("HTTP client initialised (timeout=%ss).", config.http_timeout)

    yield  # Application runs here.

    # --- Shutdown ----------------------------------------------------------
    await app.state.http_client.aclose()
    logger.info("HTTP client closed on shutdown.")


# ---------------------------------------------------------------------------
# FastAPI application instance.
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Wallpaper Generator API",
    description="Gateway that turns city, weather and time into isometric wallpapers.",
    version=__version__,
    lifespan=lifespan,
)

# Browser clients call the gateway directly with their own keys.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)

app.include_router(catalog_router)
app.include_router(generate_router)
app.include_router(restyle_router)
app.include_router(wallpaper_router)


# ---------------------------------------------------------------------------
# Exception handlers.
# ---------------------------------------------------------------------------


@app.exception_handler(GatewayError)
async def handle_gateway_error(request: Request, exc: GatewayError) -> JSONResponse:
    """Render a core error as ``{error, message}`` with its status code."""
    logger.error(
        "request_failed path=%s status=%d error=%s message=%s",
        request.url.path,
        exc.status_code,
        type(exc).__name__,
        exc.message,
    )
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report input errors as 400 with per-field detail."""
    return validation_error_response(exc.errors())


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        {"error": "Internal server error", "message": str(exc) or "An unexpected error occurred"},
        status_code=500,
    )


# ---------------------------------------------------------------------------
# Routes.
# ---------------------------------------------------------------------------


@app.get("/")
async def index() -> dict:
    """Health check listing the available endpoints."""
    return {
        "name": "Wallpaper Generator API",
        "version": __version__,
        "endpoints": ENDPOINTS,
    }


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Configure logging and launch the uvicorn ASGI server.

    Host, port and log level come from :data:`~wallgen.core.config.config`
    (``WALLGEN_SERVER_HOST``, ``WALLGEN_SERVER_PORT``, ``WALLGEN_LOG_LEVEL``).

    This function is registered as the ``wallgen`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "wallgen.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
