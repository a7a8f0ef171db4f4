"""Scene synthesis with the Gemini ``generateContent`` API.

:class:`SceneSynthesizer` turns a :class:`GenerationRequest` into a
validated :class:`SceneDescription` with exactly one call to the language
model.  The call carries the fixed system instruction and response schema
from :mod:`wallgen.core.style` and constrains the output to JSON.

Failure Modes
-------------
- Transport error or non-2xx status -> :class:`UpstreamPromptError`
- No ``candidates[0].content.parts[0].text`` -> :class:`EmptyPromptResponse`
- Text that is not JSON, or JSON that fails validation ->
  :class:`MalformedPromptResponse`

Nothing is retried; the caller decides whether to try again.
"""

from __future__ import annotations

import json
import logging
import time

import httpx
from pydantic import ValidationError

from wallgen.core import style
from wallgen.core.config import WallgenConfig
from wallgen.core.errors import (
    EmptyPromptResponse,
    MalformedPromptResponse,
    UpstreamPromptError,
)
from wallgen.core.models import GenerationRequest, SceneDescription
from wallgen.core.prompt_builder import build_user_message

logger = logging.getLogger(__name__)

# Upstream error bodies can be large; only this much is logged.
_ERROR_BODY_LOG_LIMIT = 500


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _extract_text(data: object) -> str | None:
    """Return ``candidates[0].content.parts[0].text`` or ``None``."""
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates") or []
    if not candidates or not isinstance(candidates[0], dict):
        return None
    parts = (candidates[0].get("content") or {}).get("parts") or []
    if not parts or not isinstance(parts[0], dict):
        return None
    text = parts[0].get("text")
    return text if isinstance(text, str) and text else None


class SceneSynthesizer:
    """Client for the language-model half of the wallpaper workflow.

    Args:
        client: Shared HTTP client.  Credentials are never attached to it;
            each call passes its own key.
        config: Application configuration (model id and API base URL).
    """

    def __init__(self, client: httpx.AsyncClient, config: WallgenConfig) -> None:
        self._client = client
        self._config = config

    @property
    def endpoint(self) -> str:
        base = self._config.gemini_api_url.rstrip("/")
        return f"{base}/models/{self._config.gemini_model}:generateContent"

    def build_payload(self, request: GenerationRequest) -> dict:
        return {
            "system_instruction": {"parts": [{"text": style.SYSTEM_PROMPT}]},
            "contents": [{"parts": [{"text": build_user_message(request)}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": style.RESPONSE_SCHEMA,
            },
        }

    async def synthesize(self, request: GenerationRequest, api_key: str) -> SceneDescription:
        """Ask the language model for a scene description.

        Args:
            request: Validated generation request.
            api_key: Caller's Google AI key for this request only.

        Returns:
            The validated :class:`SceneDescription`.

        Raises:
            UpstreamPromptError: Transport failure or non-2xx response.
            EmptyPromptResponse: Response without a text payload.
            MalformedPromptResponse: Payload not parseable as a scene.
        """
        model = self._config.gemini_model
        logger.info(
            "gemini_request model=%s city=%r width=%d height=%d style_version=%s",
            model,
            request.city,
            request.width,
            request.height,
            style.STYLE_VERSION,
        )
        start = time.monotonic()

        try:
            response = await self._client.post(
                self.endpoint,
                json=self.build_payload(request),
                headers={"x-goog-api-key": api_key},
            )
        except httpx.HTTPError as exc:
            logger.error(
                "gemini_error model=%s elapsed_ms=%d error=%s", model, _elapsed_ms(start), exc
            )
            raise UpstreamPromptError(f"Gemini request failed: {exc}") from exc

        if response.is_error:
            body = response.text
            logger.error(
                "gemini_error model=%s status=%d elapsed_ms=%d body=%r",
                model,
                response.status_code,
                _elapsed_ms(start),
                body[:_ERROR_BODY_LOG_LIMIT],
            )
            raise UpstreamPromptError(
                f"Gemini API returned {response.status_code}: {body}",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            data = None
        text = _extract_text(data)
        if text is None:
            logger.error("gemini_empty_response model=%s elapsed_ms=%d", model, _elapsed_ms(start))
            raise EmptyPromptResponse("Gemini returned an empty response")

        try:
            scene = SceneDescription.model_validate(json.loads(text))
        except (ValueError, ValidationError) as exc:
            logger.error(
                "gemini_malformed_response model=%s elapsed_ms=%d error=%s",
                model,
                _elapsed_ms(start),
                exc,
            )
            raise MalformedPromptResponse(f"Gemini returned an unusable scene: {exc}") from exc

        logger.info(
            "gemini_response model=%s elapsed_ms=%d scene_length=%d subjects=%d "
            "color_palette=%s lighting=%r mood=%r",
            model,
            _elapsed_ms(start),
            len(scene.scene),
            len(scene.subjects),
            scene.color_palette,
            scene.lighting,
            scene.mood,
        )
        return scene
