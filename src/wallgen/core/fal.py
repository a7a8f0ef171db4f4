"""HTTP client for the fal.ai render service.

:class:`FalClient` wraps the parts of the fal.ai REST surface the gateway
uses:

- **Queue** (``queue.fal.run``): submit a job, read its status, read its
  result.  Submission returns immediately; rendering happens remotely.
- **Run** (``fal.run``): synchronous single-shot generation.
- **Storage** (``rest.alpha.fal.ai``): upload an input image and get back a
  CDN URL, so large images are not inlined as data URLs.
- **Platform** (``api.fal.ai/v1``): model catalog and pricing.

Every method takes the caller's fal key as an explicit argument; the shared
``httpx.AsyncClient`` never holds credentials.  Errors from the render
service are raised as :class:`RenderServiceError` (or a subclass) carrying
the upstream HTTP status when there was one.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import httpx

from wallgen.core.config import WallgenConfig
from wallgen.core.errors import CatalogUnavailable, QueueSubmissionFailed, RenderServiceError

logger = logging.getLogger(__name__)

# Maximum endpoint ids accepted by one pricing call.
PRICING_BATCH_LIMIT = 50


@dataclass(frozen=True)
class QueuedJob:
    """Handle returned by a queue submission.

    Attributes:
        request_id: Opaque job identifier; the caller stores it and presents
            it on later polls.
        status_url: Upstream URL reporting the job's status.
        response_url: Upstream URL serving the job's result.
    """

    request_id: str
    status_url: str
    response_url: str


def app_id(model: str) -> str:
    """Return the ``owner/app`` prefix of an endpoint id.

    Queue status and result URLs are addressed by application, not by the
    full endpoint path (``fal-ai/image-editing/style-transfer`` polls under
    ``fal-ai/image-editing``).
    """
    return "/".join(model.split("/")[:2])


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _error_message(response: httpx.Response) -> str:
    """Build a readable message from a fal.ai error response."""
    detail: object = None
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        detail = body.get("detail") or body.get("message") or body.get("error")
    if detail is None:
        detail = response.text
    if not isinstance(detail, str):
        detail = str(detail)
    return f"{response.status_code} {response.reason_phrase}: {detail}".rstrip(": ")


def _json_object(response: httpx.Response) -> dict:
    """Decode a successful response body as a JSON object.

    Raises:
        RenderServiceError: The body is not JSON or not an object (502).
    """
    try:
        data = response.json()
    except ValueError as exc:
        raise RenderServiceError(
            "fal.ai returned an unreadable response", upstream_status=502
        ) from exc
    if not isinstance(data, dict):
        raise RenderServiceError("fal.ai returned an unreadable response", upstream_status=502)
    return data


class FalClient:
    """Thin async wrapper around the fal.ai REST endpoints.

    Args:
        client: Shared HTTP client.
        config: Application configuration (base URLs).
    """

    def __init__(self, client: httpx.AsyncClient, config: WallgenConfig) -> None:
        self._client = client
        self._config = config

    @staticmethod
    def _auth(api_key: str) -> dict[str, str]:
        return {"Authorization": f"Key {api_key}"}

    # -- Queue --------------------------------------------------------------

    def status_url(self, model: str, request_id: str) -> str:
        return f"{self.response_url(model, request_id)}/status"

    def response_url(self, model: str, request_id: str) -> str:
        base = self._config.fal_queue_url.rstrip("/")
        return f"{base}/{app_id(model)}/requests/{request_id}"

    async def submit(self, model: str, payload: dict, api_key: str) -> QueuedJob:
        """Submit *payload* to the queue for *model* without waiting.

        Raises:
            QueueSubmissionFailed: On any transport or upstream error.
        """
        url = f"{self._config.fal_queue_url.rstrip('/')}/{model}"
        logger.info("fal_queue_submit_request model=%s", model)
        start = time.monotonic()
        try:
            response = await self._client.post(url, json=payload, headers=self._auth(api_key))
        except httpx.HTTPError as exc:
            logger.error(
                "fal_queue_submit_error model=%s elapsed_ms=%d error=%s",
                model,
                _elapsed_ms(start),
                exc,
            )
            raise QueueSubmissionFailed(f"Failed to queue image generation: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.error(
                "fal_queue_submit_error model=%s status=%d elapsed_ms=%d error=%s",
                model,
                response.status_code,
                _elapsed_ms(start),
                message,
            )
            raise QueueSubmissionFailed(message, upstream_status=response.status_code)

        try:
            data = response.json()
            request_id = str(data["request_id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise QueueSubmissionFailed("Queue response did not include a request_id") from exc

        logger.info(
            "fal_queue_submit_complete model=%s request_id=%s elapsed_ms=%d",
            model,
            request_id,
            _elapsed_ms(start),
        )
        return QueuedJob(
            request_id=request_id,
            status_url=data.get("status_url") or self.status_url(model, request_id),
            response_url=data.get("response_url") or self.response_url(model, request_id),
        )

    async def status(self, model: str, request_id: str, api_key: str) -> dict:
        """Return the raw queue status document for a job.

        Raises:
            RenderServiceError: On any transport or upstream error.
        """
        return await self._get_json(
            self.status_url(model, request_id),
            api_key,
            event="fal_queue_status",
            context=f"model={model} request_id={request_id}",
        )

    async def result(self, model: str, request_id: str, api_key: str) -> dict:
        """Return the raw result document for a job.

        fal.ai answers with a client error while the job is still running;
        that status is preserved on the raised :class:`RenderServiceError`.
        """
        return await self._get_json(
            self.response_url(model, request_id),
            api_key,
            event="fal_queue_result",
            context=f"model={model} request_id={request_id}",
        )

    # -- Synchronous run ----------------------------------------------------

    async def run(self, model: str, payload: dict, api_key: str) -> dict:
        """Run *model* synchronously and return its output document."""
        url = f"{self._config.fal_run_url.rstrip('/')}/{model}"
        logger.info("fal_run_request model=%s", model)
        start = time.monotonic()
        try:
            response = await self._client.post(url, json=payload, headers=self._auth(api_key))
        except httpx.HTTPError as exc:
            logger.error(
                "fal_run_error model=%s elapsed_ms=%d error=%s", model, _elapsed_ms(start), exc
            )
            raise RenderServiceError(f"fal.ai request failed: {exc}") from exc
        if response.is_error:
            message = _error_message(response)
            logger.error(
                "fal_run_error model=%s status=%d elapsed_ms=%d error=%s",
                model,
                response.status_code,
                _elapsed_ms(start),
                message,
            )
            raise RenderServiceError(message, upstream_status=response.status_code)
        logger.info("fal_run_complete model=%s elapsed_ms=%d", model, _elapsed_ms(start))
        return _json_object(response)

    # -- Storage ------------------------------------------------------------

    async def upload(self, data: bytes, content_type: str, file_name: str, api_key: str) -> str:
        """Upload *data* to fal storage and return its CDN URL.

        The upload is two-step: an ``initiate`` call returns a pre-signed
        ``upload_url`` and the final ``file_url``; the bytes are then PUT to
        the pre-signed URL.
        """
        base = self._config.fal_rest_url.rstrip("/")
        logger.info("fal_storage_upload_start bytes=%d content_type=%s", len(data), content_type)
        start = time.monotonic()
        try:
            initiate = await self._client.post(
                f"{base}/storage/upload/initiate",
                params={"storage_type": "fal-cdn-v3"},
                json={"content_type": content_type, "file_name": file_name},
                headers=self._auth(api_key),
            )
            if initiate.is_error:
                raise RenderServiceError(
                    _error_message(initiate), upstream_status=initiate.status_code
                )
            target = initiate.json()
            file_url = target["file_url"]
            uploaded = await self._client.put(
                target["upload_url"],
                content=data,
                headers={"Content-Type": content_type},
            )
            if uploaded.is_error:
                raise RenderServiceError(
                    _error_message(uploaded), upstream_status=uploaded.status_code
                )
        except httpx.HTTPError as exc:
            logger.error("fal_storage_upload_error elapsed_ms=%d error=%s", _elapsed_ms(start), exc)
            raise RenderServiceError(f"fal.ai storage upload failed: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise RenderServiceError("fal.ai storage returned an unexpected response") from exc

        logger.info(
            "fal_storage_upload_complete bytes=%d elapsed_ms=%d url=%s",
            len(data),
            _elapsed_ms(start),
            file_url,
        )
        return file_url

    # -- Platform catalog ---------------------------------------------------

    async def list_models(
        self,
        api_key: str,
        *,
        category: str = "text-to-image",
        q: str | None = None,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> dict:
        """Search active models in *category*.

        Raises:
            CatalogUnavailable: When the platform API fails.
        """
        params: dict[str, str | int] = {"category": category, "status": "active"}
        if q:
            params["q"] = q
        if limit:
            params["limit"] = limit
        if cursor:
            params["cursor"] = cursor

        url = f"{self._config.fal_platform_url.rstrip('/')}/models"
        logger.info("fal_platform_models_request category=%s q=%r limit=%s", category, q, limit)
        start = time.monotonic()
        try:
            response = await self._client.get(url, params=params, headers=self._auth(api_key))
        except httpx.HTTPError as exc:
            logger.error("fal_platform_models_error elapsed_ms=%d error=%s", _elapsed_ms(start), exc)
            raise CatalogUnavailable(f"fal.ai model search failed: {exc}") from exc
        if response.is_error:
            logger.error(
                "fal_platform_models_error status=%d elapsed_ms=%d",
                response.status_code,
                _elapsed_ms(start),
            )
            raise CatalogUnavailable(
                f"fal.ai model search failed: {response.status_code} {response.reason_phrase}"
            )
        logger.info("fal_platform_models_complete elapsed_ms=%d", _elapsed_ms(start))
        try:
            return _json_object(response)
        except RenderServiceError as exc:
            raise CatalogUnavailable(f"fal.ai model search failed: {exc.message}") from exc

    async def fetch_pricing(self, api_key: str, endpoint_ids: list[str]) -> dict[str, dict]:
        """Return pricing entries keyed by endpoint id.

        Best-effort: any failure yields an empty mapping so the catalog can
        still be served without prices.
        """
        if not endpoint_ids:
            return {}
        ids = endpoint_ids[:PRICING_BATCH_LIMIT]
        url = f"{self._config.fal_platform_url.rstrip('/')}/models/pricing"
        logger.info("fal_platform_pricing_request endpoint_count=%d", len(ids))
        start = time.monotonic()
        try:
            response = await self._client.get(
                url,
                params=[("endpoint_id", endpoint_id) for endpoint_id in ids],
                headers=self._auth(api_key),
            )
        except httpx.HTTPError as exc:
            logger.error(
                "fal_platform_pricing_error elapsed_ms=%d error=%s", _elapsed_ms(start), exc
            )
            return {}
        if response.is_error:
            logger.error(
                "fal_platform_pricing_error status=%d elapsed_ms=%d",
                response.status_code,
                _elapsed_ms(start),
            )
            return {}
        try:
            prices = response.json().get("prices") or []
            pricing = {p["endpoint_id"]: p for p in prices if "endpoint_id" in p}
        except (ValueError, AttributeError, TypeError) as exc:
            logger.error(
                "fal_platform_pricing_error elapsed_ms=%d error=unreadable body: %s",
                _elapsed_ms(start),
                exc,
            )
            return {}
        logger.info("fal_platform_pricing_complete elapsed_ms=%d", _elapsed_ms(start))
        return pricing

    # -- Helpers ------------------------------------------------------------

    async def _get_json(self, url: str, api_key: str, *, event: str, context: str) -> dict:
        logger.info("%s_request %s", event, context)
        start = time.monotonic()
        try:
            response = await self._client.get(url, headers=self._auth(api_key))
        except httpx.HTTPError as exc:
            logger.error("%s_error %s elapsed_ms=%d error=%s", event, context, _elapsed_ms(start), exc)
            raise RenderServiceError(f"fal.ai request failed: {exc}") from exc
        if response.is_error:
            message = _error_message(response)
            logger.error(
                "%s_error %s status=%d elapsed_ms=%d error=%s",
                event,
                context,
                response.status_code,
                _elapsed_ms(start),
                message,
            )
            raise RenderServiceError(message, upstream_status=response.status_code)
        logger.info("%s_complete %s elapsed_ms=%d", event, context, _elapsed_ms(start))
        return _json_object(response)
