"""Wallgen — FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request/response
models, credential dependencies, and one router per resource.

Modules
-------
main
    FastAPI application, exception handlers, and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request and response validation.
dependencies
    Shared HTTP client, service factories, and credential extraction.
middleware
    Request logging.
responses
    Validation-error and streaming-image response builders.
routers
    ``/models``, ``/generate``, ``/restyle`` and ``/wallpaper`` routes.
"""
