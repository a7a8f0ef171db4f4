"""Wallpaper workflow orchestration.

:class:`WallpaperService` ties the pieces together for the three
caller-facing operations:

submit
    Synthesize a scene with Gemini, compose the final prompt, and enqueue it
    with fal.ai.  Returns as soon as the job is queued.
poll
    Translate the remote job status into a :data:`RenderJob` variant.  A
    completed job triggers one result fetch to attach the image URL.
open_result
    Open the finished image for streaming, or report that it is not ready.

The service holds no per-request state.  Both credentials are explicit
parameters of every call and are dropped when the call returns.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from wallgen.core import style
from wallgen.core.cdn import ImageStream, open_image
from wallgen.core.config import WallgenConfig
from wallgen.core.errors import NoImageProduced, RenderServiceError
from wallgen.core.fal import FalClient, QueuedJob
from wallgen.core.gemini import SceneSynthesizer
from wallgen.core.jobs import (
    UPSTREAM_COMPLETED,
    UPSTREAM_QUEUED,
    UPSTREAM_RUNNING,
    Completed,
    Failed,
    Queued,
    RenderJob,
    Running,
    first_image,
    queue_position,
)
from wallgen.core.models import GenerationRequest
from wallgen.core.prompt_builder import compose_prompt

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "png"
DEFAULT_CONTENT_TYPE = "image/png"

# Result-fetch statuses that mean "not finished yet" rather than "broken".
# fal.ai answers 400 for a job still rendering and 404 for one whose result
# is not yet addressable.  Auth and validation errors stay hard failures.
NOT_READY_STATUSES = frozenset({400, 404})


@dataclass(frozen=True)
class NotReady:
    """Result requested before the render finished."""

    message: str = (
        "Generation not complete yet. Poll GET /wallpaper/status/{request_id} "
        "until status is Completed."
    )

    def to_dict(self) -> dict:
        return {"status": "Running", "message": self.message}


class WallpaperService:
    """Submit, poll, and fetch isometric city wallpapers.

    Args:
        client: Shared HTTP client used for every outbound call.
        config: Application configuration.
    """

    def __init__(self, client: httpx.AsyncClient, config: WallgenConfig) -> None:
        self._client = client
        self._config = config
        self.synthesizer = SceneSynthesizer(client, config)
        self.fal = FalClient(client, config)

    @property
    def model(self) -> str:
        return self._config.wallpaper_model

    async def build_prompt(self, request: GenerationRequest, google_key: str) -> str:
        """Synthesize and compose the prompt string for *request*."""
        scene = await self.synthesizer.synthesize(request, google_key)
        prompt = compose_prompt(scene, request.width, request.height).to_prompt_string()
        logger.info(
            "wallpaper_prompt_ready city=%r weather=%r datetime=%r width=%d height=%d "
            "prompt_length=%d style_version=%s",
            request.city,
            request.weather,
            request.datetime,
            request.width,
            request.height,
            len(prompt),
            style.STYLE_VERSION,
        )
        return prompt

    async def submit(self, request: GenerationRequest, fal_key: str, google_key: str) -> QueuedJob:
        """Queue a wallpaper render.

        The two upstream calls run strictly in sequence: the queue payload
        needs the synthesized prompt.

        Raises:
            PromptGenerationError: The language-model step failed.
            QueueSubmissionFailed: The queue rejected the job.
        """
        prompt = await self.build_prompt(request, google_key)
        payload = {
            "prompt": prompt,
            "image_size": {"width": request.width, "height": request.height},
            "output_format": OUTPUT_FORMAT,
        }
        return await self.fal.submit(self.model, payload, fal_key)

    async def poll(self, request_id: str, fal_key: str) -> RenderJob:
        """Return the current state of *request_id*.

        Errors are returned as :class:`Failed` rather than raised so the
        HTTP layer can pick the response code.
        """
        try:
            status = await self.fal.status(self.model, request_id, fal_key)
            state = status.get("status")

            if state == UPSTREAM_QUEUED:
                return Queued(queue_position=queue_position(status))
            if state == UPSTREAM_RUNNING:
                return Running()
            if state == UPSTREAM_COMPLETED:
                # A failing result fetch fails the whole poll.
                result = await self.fal.result(self.model, request_id, fal_key)
                image = first_image(result)
                image_url = image["url"] if image else None
                logger.info("wallpaper_job_completed request_id=%s image_url=%s", request_id, image_url)
                return Completed(image_url=image_url)

            logger.error("wallpaper_job_unknown_state request_id=%s state=%r", request_id, state)
            return Failed(error=f"Unrecognised render status: {state!r}", status=502)
        except RenderServiceError as exc:
            return Failed(error=exc.message, status=exc.status_code)

    async def open_result(self, request_id: str, fal_key: str) -> ImageStream | NotReady:
        """Open the finished image of *request_id* for streaming.

        Raises:
            RenderServiceError: The result fetch failed for a reason other
                than the job not being finished.
            NoImageProduced: The job finished without images.
            ImageFetchFailed: The CDN could not serve the image.
        """
        try:
            result = await self.fal.result(self.model, request_id, fal_key)
        except RenderServiceError as exc:
            if exc.upstream_status in NOT_READY_STATUSES:
                logger.info(
                    "wallpaper_result_not_ready request_id=%s upstream_status=%s",
                    request_id,
                    exc.upstream_status,
                )
                return NotReady()
            raise

        image = first_image(result)
        if image is None:
            logger.warning("wallpaper_result_no_images request_id=%s", request_id)
            raise NoImageProduced("The render finished without producing an image")

        return await open_image(
            self._client,
            image["url"],
            reported_content_type=image.get("content_type"),
            default_content_type=DEFAULT_CONTENT_TYPE,
        )
