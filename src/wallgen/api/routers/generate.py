"""Single-shot text-to-image route."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends
from fastapi.responses import StreamingResponse

from wallgen.api.dependencies import get_imaging_service, require_fal_key
from wallgen.api.models import GenerateRequest
from wallgen.api.responses import image_response
from wallgen.core.imaging import ImagingService

router = APIRouter(prefix="/generate", tags=["generate"])


@router.post("")
async def generate_image(
    fal_key: str = Depends(require_fal_key),
    req: GenerateRequest = Body(...),
    service: ImagingService = Depends(get_imaging_service),
) -> StreamingResponse:
    """Generate one image and stream it back.

    The request stays open until fal.ai finishes rendering.  For long-running
    renders use ``POST /wallpaper`` instead.
    """
    stream = await service.generate(
        req.prompt,
        req.width,
        req.height,
        fal_key,
        model=req.model,
        negative_prompt=req.negative_prompt,
        num_inference_steps=req.num_inference_steps,
    )
    return image_response(stream)
