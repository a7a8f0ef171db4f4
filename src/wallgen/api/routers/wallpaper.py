"""Isometric city wallpaper routes.

The render takes longer than a request should stay open, so generation is
split into three calls driven by the client::

    POST /wallpaper                      -> 202 {request_id, status_url, ...}
    GET  /wallpaper/status/{request_id}  -> {status: Queued|Running|Completed}
    GET  /wallpaper/result/{request_id}  -> image bytes, or 202 while rendering

The gateway keeps no record of submitted jobs; the client stores the
``request_id`` and presents it on each poll.
"""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse, Response

from wallgen.api.dependencies import get_wallpaper_service, require_fal_key, require_google_key
from wallgen.api.models import WallpaperQueuedResponse
from wallgen.api.responses import image_response
from wallgen.core.jobs import Failed
from wallgen.core.models import GenerationRequest
from wallgen.core.wallpaper import NotReady, WallpaperService

router = APIRouter(prefix="/wallpaper", tags=["wallpaper"])


@router.post("", status_code=202, response_model=WallpaperQueuedResponse)
async def submit_wallpaper(
    fal_key: str = Depends(require_fal_key),
    google_key: str = Depends(require_google_key),
    req: GenerationRequest = Body(...),
    service: WallpaperService = Depends(get_wallpaper_service),
) -> WallpaperQueuedResponse:
    """Queue an isometric city wallpaper.

    Credentials are checked before the body, and the body is validated
    before any upstream call.  Prompt synthesis and queue submission run in
    sequence; the response is returned as soon as the job is queued.
    """
    job = await service.submit(req, fal_key, google_key)
    return WallpaperQueuedResponse(
        request_id=job.request_id,
        status_url=job.status_url,
        response_url=job.response_url,
    )


@router.get("/status/{request_id}")
async def wallpaper_status(
    request_id: str,
    fal_key: str = Depends(require_fal_key),
    service: WallpaperService = Depends(get_wallpaper_service),
) -> JSONResponse:
    job = await service.poll(request_id, fal_key)
    if isinstance(job, Failed):
        return JSONResponse(job.to_dict(), status_code=job.status)
    return JSONResponse(job.to_dict())


@router.get("/result/{request_id}")
async def wallpaper_result(
    request_id: str,
    fal_key: str = Depends(require_fal_key),
    service: WallpaperService = Depends(get_wallpaper_service),
) -> Response:
    """Stream the finished wallpaper, or report that it is still rendering."""
    outcome = await service.open_result(request_id, fal_key)
    if isinstance(outcome, NotReady):
        return JSONResponse(outcome.to_dict(), status_code=202)
    return image_response(outcome)
