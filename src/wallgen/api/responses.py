"""Response builders shared by the routers and exception handlers."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from wallgen.core.cdn import IMAGE_RESPONSE_HEADERS, ImageStream

# Location prefixes FastAPI adds to validation errors; stripped from "field".
_LOCATION_PREFIXES = {"body", "query", "header", "path"}


def _field_name(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(str(p) for p in parts)


def is_missing_body(errors: Sequence[dict]) -> bool:
    """True when validation failed because the JSON body was absent or unparseable."""
    for err in errors:
        if err.get("type") == "json_invalid":
            return True
        if err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",):
            return True
    return False


def validation_error_response(errors: Sequence[dict]) -> JSONResponse:
    """Render pydantic errors as ``{error, details: [{field, message}]}`` with 400."""
    if is_missing_body(errors):
        return JSONResponse({"error": "Invalid or missing JSON body"}, status_code=400)
    details = [{"field": _field_name(err.get("loc", ())), "message": err.get("msg", "")} for err in errors]
    return JSONResponse({"error": "Validation failed", "details": details}, status_code=400)


def image_response(stream: ImageStream) -> StreamingResponse:
    """Relay an open CDN stream to the caller without buffering."""
    return StreamingResponse(
        stream.iter_bytes(),
        media_type=stream.content_type,
        headers=IMAGE_RESPONSE_HEADERS,
        background=BackgroundTask(stream.aclose),
    )
