"""Single-shot generation and restyling.

These are straightforward request/response passthroughs to fal.ai's
synchronous ``run`` endpoints.  Unlike the wallpaper workflow they hold the
HTTP request open until the image exists, then relay it from the CDN.

Restyle uploads go through Pillow first: the body must decode as an image,
and formats the restyle model handles poorly are re-encoded to JPEG.
"""

from __future__ import annotations

import io
import logging

import httpx
from PIL import Image, UnidentifiedImageError

from wallgen.core.aspect import closest_aspect_ratio
from wallgen.core.cdn import ImageStream, open_image
from wallgen.core.config import WallgenConfig
from wallgen.core.errors import InvalidUploadError, NoImageProduced
from wallgen.core.fal import FalClient
from wallgen.core.jobs import first_image

logger = logging.getLogger(__name__)

ALLOWED_UPLOAD_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
# Uploads in these formats are forwarded untouched.
PASSTHROUGH_UPLOAD_TYPES = frozenset({"image/png", "image/jpeg"})
REENCODE_JPEG_QUALITY = 90
DEFAULT_CONTENT_TYPE = "image/jpeg"


def prepare_upload(data: bytes, content_type: str) -> tuple[bytes, str]:
    """Validate an uploaded image and normalise its encoding.

    Args:
        data: Raw request body.
        content_type: Declared ``Content-Type`` of the body.

    Returns:
        ``(bytes, content_type)`` ready for fal storage.

    Raises:
        InvalidUploadError: The body is empty or not a decodable image.
    """
    if not data:
        raise InvalidUploadError("Request body is empty; send the image as the raw body")
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            if content_type in PASSTHROUGH_UPLOAD_TYPES:
                return data, content_type
            buffer = io.BytesIO()
            image.convert("RGB").save(buffer, format="JPEG", quality=REENCODE_JPEG_QUALITY)
    except (UnidentifiedImageError, OSError) as exc:
        raise InvalidUploadError(f"Request body is not a readable image: {exc}") from exc

    converted = buffer.getvalue()
    logger.info(
        "upload_reencoded source_type=%s source_bytes=%d jpeg_bytes=%d",
        content_type,
        len(data),
        len(converted),
    )
    return converted, "image/jpeg"


class ImagingService:
    """Synchronous text-to-image and image-to-image through fal.ai."""

    def __init__(self, client: httpx.AsyncClient, config: WallgenConfig) -> None:
        self._client = client
        self._config = config
        self.fal = FalClient(client, config)

    async def _relay_first_image(self, output: dict, model: str) -> ImageStream:
        image = first_image(output)
        if image is None:
            logger.warning("fal_run_no_images model=%s", model)
            raise NoImageProduced("The model returned no images")
        return await open_image(
            self._client,
            image["url"],
            reported_content_type=image.get("content_type"),
            default_content_type=DEFAULT_CONTENT_TYPE,
        )

    async def generate(
        self,
        prompt: str,
        width: int,
        height: int,
        fal_key: str,
        *,
        model: str | None = None,
        negative_prompt: str | None = None,
        num_inference_steps: int | None = None,
    ) -> ImageStream:
        """Render *prompt* in one blocking call and open the result."""
        model = model or self._config.generate_model
        payload: dict = {"prompt": prompt, "image_size": {"width": width, "height": height}}
        if negative_prompt:
            payload["negative_prompt"] = negative_prompt
        if num_inference_steps is not None:
            payload["num_inference_steps"] = num_inference_steps

        output = await self.fal.run(model, payload, fal_key)
        return await self._relay_first_image(output, model)

    async def restyle(
        self,
        data: bytes,
        content_type: str,
        style_prompt: str,
        width: int,
        height: int,
        fal_key: str,
    ) -> ImageStream:
        """Apply *style_prompt* to an uploaded image.

        Raises:
            InvalidUploadError: The upload is empty or undecodable.
        """
        upload, upload_type = prepare_upload(data, content_type)
        extension = upload_type.split("/")[-1]
        image_url = await self.fal.upload(upload, upload_type, f"upload.{extension}", fal_key)

        model = self._config.restyle_model
        payload = {
            "image_url": image_url,
            "prompt": style_prompt,
            "aspect_ratio": closest_aspect_ratio(width, height),
        }
        output = await self.fal.run(model, payload, fal_key)
        return await self._relay_first_image(output, model)
