"""Image restyling route.

The image is sent as the raw request body with its ``Content-Type``; the
style and target size travel in headers so no multipart parsing is needed::

    POST /restyle
    Content-Type: image/png
    X-Style: watercolour, soft pastel palette
    X-Width: 1024
    X-Height: 1536
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from wallgen.api.dependencies import get_imaging_service, require_fal_key
from wallgen.api.models import RestyleParams
from wallgen.api.responses import image_response, validation_error_response
from wallgen.core.imaging import ALLOWED_UPLOAD_TYPES, ImagingService

router = APIRouter(prefix="/restyle", tags=["restyle"])


@router.post("")
async def restyle_image(
    request: Request,
    fal_key: str = Depends(require_fal_key),
    content_type: str = Header(default=""),
    x_style: str = Header(default=""),
    x_width: str = Header(default=""),
    x_height: str = Header(default=""),
    service: ImagingService = Depends(get_imaging_service),
) -> Response:
    media_type = content_type.split(";")[0].strip().lower()
    if media_type not in ALLOWED_UPLOAD_TYPES:
        return JSONResponse(
            {"error": "Content-Type must be image/png, image/jpeg, or image/webp"},
            status_code=400,
        )

    try:
        params = RestyleParams(
            style=x_style,
            width=x_width or None,
            height=x_height or None,
        )
    except ValidationError as exc:
        return validation_error_response(exc.errors())

    body = await request.body()
    stream = await service.restyle(
        body,
        media_type,
        params.style,
        params.width,
        params.height,
        fal_key,
    )
    return image_response(stream)
