"""Tests for wallgen.core.wallpaper — submit, poll and result relay.

Both upstream services are mocked with :class:`conftest.FakeUpstream`; the
focus is the translation between fal.ai queue states and the canonical
job variants, and the "not ready" handling of early result requests.
"""

from __future__ import annotations

import json

import pytest
from conftest import (
    CDN_IMAGE_URL,
    GEMINI_URL,
    PNG_BYTES,
    QUEUE_REQUESTS_URL,
    QUEUE_SUBMIT_URL,
    gemini_body,
    make_scene,
)

from wallgen.core.cdn import ImageStream
from wallgen.core.errors import (
    ImageFetchFailed,
    MalformedPromptResponse,
    NoImageProduced,
    QueueSubmissionFailed,
    RenderServiceError,
)
from wallgen.core.jobs import Completed, Failed, Queued, Running
from wallgen.core.wallpaper import NotReady, WallpaperService

STATUS_URL = f"{QUEUE_REQUESTS_URL}/abc123/status"
RESULT_URL = f"{QUEUE_REQUESTS_URL}/abc123"


@pytest.fixture
def service(http_client, test_config) -> WallpaperService:
    return WallpaperService(http_client, test_config)


async def _read(stream: ImageStream) -> bytes:
    return b"".join([chunk async for chunk in stream.iter_bytes()])


# ---------------------------------------------------------------------------
# submit
# ---------------------------------------------------------------------------


class TestSubmit:
    """Test WallpaperService.submit()."""

    @pytest.mark.asyncio
    async def test_submit_sends_composed_prompt(self, service, upstream, tokyo_request):
        upstream.add("POST", GEMINI_URL, json_body=gemini_body(make_scene()))
        upstream.add("POST", QUEUE_SUBMIT_URL, json_body={"request_id": "abc123"})

        job = await service.submit(tokyo_request, "fal-test-key", "google-test-key")

        assert job.request_id == "abc123"
        (call,) = upstream.calls("POST", QUEUE_SUBMIT_URL)
        payload = json.loads(call.content)
        assert payload["image_size"] == {"width": 1920, "height": 1080}
        assert payload["output_format"] == "png"
        prompt = json.loads(payload["prompt"])
        assert prompt["subjects"][0]["type"] == "Platform"
        assert prompt["subjects"][1]["type"] == "UrbanLayout"
        assert "Horizontal landscape framing" in prompt["composition"]

    @pytest.mark.asyncio
    async def test_prompt_failure_skips_queue(self, service, upstream, tokyo_request):
        upstream.add("POST", GEMINI_URL, json_body=gemini_body("not json"))

        with pytest.raises(MalformedPromptResponse):
            await service.submit(tokyo_request, "fal-test-key", "google-test-key")
        assert not upstream.calls("POST", QUEUE_SUBMIT_URL)

    @pytest.mark.asyncio
    async def test_queue_rejection(self, service, upstream, tokyo_request):
        upstream.add("POST", GEMINI_URL, json_body=gemini_body(make_scene()))
        upstream.add("POST", QUEUE_SUBMIT_URL, 401, json_body={"detail": "Invalid key"})

        with pytest.raises(QueueSubmissionFailed) as exc_info:
            await service.submit(tokyo_request, "bad-key", "google-test-key")
        assert exc_info.value.status_code == 401


# ---------------------------------------------------------------------------
# poll
# ---------------------------------------------------------------------------


class TestPoll:
    """Test WallpaperService.poll() state mapping."""

    @pytest.mark.asyncio
    async def test_queued_with_position(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body={"status": "IN_QUEUE", "queue_position": 5})

        job = await service.poll("abc123", "fal-test-key")

        assert job == Queued(queue_position=5)
        assert job.to_dict() == {"status": "Queued", "queue_position": 5}
        assert not upstream.calls("GET", RESULT_URL)

    @pytest.mark.asyncio
    async def test_running(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body={"status": "IN_PROGRESS", "logs": []})

        assert await service.poll("abc123", "fal-test-key") == Running()
        assert not upstream.calls("GET", RESULT_URL)

    @pytest.mark.asyncio
    async def test_completed_fetches_result_once(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body={"status": "COMPLETED"})
        upstream.add("GET", RESULT_URL, json_body={"images": [{"url": CDN_IMAGE_URL}]})

        job = await service.poll("abc123", "fal-test-key")

        assert job == Completed(image_url=CDN_IMAGE_URL)
        assert len(upstream.calls("GET", RESULT_URL)) == 1

    @pytest.mark.asyncio
    async def test_completed_without_images(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body={"status": "COMPLETED"})
        upstream.add("GET", RESULT_URL, json_body={"images": []})

        job = await service.poll("abc123", "fal-test-key")
        assert job.to_dict() == {"status": "Completed"}

    @pytest.mark.asyncio
    async def test_completed_with_failing_result_fetch(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body={"status": "COMPLETED"})
        upstream.add("GET", RESULT_URL, 503, json_body={"detail": "unavailable"})

        job = await service.poll("abc123", "fal-test-key")

        assert isinstance(job, Failed)
        assert job.status == 503

    @pytest.mark.asyncio
    async def test_status_not_found(self, service, upstream):
        upstream.add("GET", STATUS_URL, 404, json_body={"detail": "Request not found"})

        job = await service.poll("abc123", "fal-test-key")

        assert isinstance(job, Failed)
        assert job.status == 404
        assert "Request not found" in job.error

    @pytest.mark.asyncio
    async def test_unknown_state(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body={"status": "CANCELLED"})

        job = await service.poll("abc123", "fal-test-key")

        assert isinstance(job, Failed)
        assert job.status == 502
        assert "CANCELLED" in job.error

    @pytest.mark.asyncio
    async def test_unreadable_status_body(self, service, upstream):
        upstream.add("GET", STATUS_URL, content=b"<html>gateway hiccup</html>")

        job = await service.poll("abc123", "fal-test-key")

        assert job == Failed(error="fal.ai returned an unreadable response", status=502)

    @pytest.mark.asyncio
    async def test_status_body_not_an_object(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body=["IN_QUEUE"])

        job = await service.poll("abc123", "fal-test-key")

        assert isinstance(job, Failed)
        assert job.status == 502

    @pytest.mark.asyncio
    async def test_completed_with_unreadable_result(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body={"status": "COMPLETED"})
        upstream.add("GET", RESULT_URL, content=b"oops")

        job = await service.poll("abc123", "fal-test-key")

        assert isinstance(job, Failed)
        assert job.status == 502

    @pytest.mark.asyncio
    async def test_poll_sends_fal_key(self, service, upstream):
        upstream.add("GET", STATUS_URL, json_body={"status": "IN_PROGRESS"})

        await service.poll("abc123", "fal-test-key")

        (call,) = upstream.calls("GET", STATUS_URL)
        assert call.headers["Authorization"] == "Key fal-test-key"


# ---------------------------------------------------------------------------
# open_result
# ---------------------------------------------------------------------------


class TestOpenResult:
    """Test WallpaperService.open_result()."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404])
    async def test_not_ready(self, service, upstream, status):
        upstream.add("GET", RESULT_URL, status, json_body={"detail": "still running"})

        result = await service.open_result("abc123", "fal-test-key")

        assert isinstance(result, NotReady)
        assert result.to_dict()["status"] == "Running"
        assert not upstream.calls("GET", CDN_IMAGE_URL)

    @pytest.mark.asyncio
    async def test_unreadable_result_is_raised(self, service, upstream):
        upstream.add("GET", RESULT_URL, content=b"oops")

        with pytest.raises(RenderServiceError) as exc_info:
            await service.open_result("abc123", "fal-test-key")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_auth_error_is_raised(self, service, upstream):
        upstream.add("GET", RESULT_URL, 401, json_body={"detail": "Invalid key"})

        with pytest.raises(RenderServiceError) as exc_info:
            await service.open_result("abc123", "bad-key")
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_no_images(self, service, upstream):
        upstream.add("GET", RESULT_URL, json_body={"images": []})

        with pytest.raises(NoImageProduced):
            await service.open_result("abc123", "fal-test-key")

    @pytest.mark.asyncio
    async def test_cdn_failure(self, service, upstream):
        upstream.add("GET", RESULT_URL, json_body={"images": [{"url": CDN_IMAGE_URL}]})
        upstream.add("GET", CDN_IMAGE_URL, 500)

        with pytest.raises(ImageFetchFailed) as exc_info:
            await service.open_result("abc123", "fal-test-key")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_streams_image_bytes(self, service, upstream):
        upstream.add("GET", RESULT_URL, json_body={"images": [{"url": CDN_IMAGE_URL}]})
        upstream.add("GET", CDN_IMAGE_URL, content=PNG_BYTES, headers={"Content-Type": "image/png"})

        stream = await service.open_result("abc123", "fal-test-key")

        assert isinstance(stream, ImageStream)
        assert stream.content_type == "image/png"
        assert await _read(stream) == PNG_BYTES
        assert stream.response.is_closed

    @pytest.mark.asyncio
    async def test_reported_content_type_wins(self, service, upstream):
        upstream.add(
            "GET",
            RESULT_URL,
            json_body={"images": [{"url": CDN_IMAGE_URL, "content_type": "image/webp"}]},
        )
        upstream.add("GET", CDN_IMAGE_URL, content=PNG_BYTES, headers={"Content-Type": "image/png"})

        stream = await service.open_result("abc123", "fal-test-key")
        try:
            assert stream.content_type == "image/webp"
        finally:
            await stream.aclose()

    @pytest.mark.asyncio
    async def test_default_content_type(self, service, upstream):
        upstream.add("GET", RESULT_URL, json_body={"images": [{"url": CDN_IMAGE_URL}]})
        upstream.add("GET", CDN_IMAGE_URL, content=PNG_BYTES)

        stream = await service.open_result("abc123", "fal-test-key")
        try:
            assert stream.content_type == "image/png"
        finally:
            await stream.aclose()

    @pytest.mark.asyncio
    async def test_cdn_fetch_carries_no_credentials(self, service, upstream):
        upstream.add("GET", RESULT_URL, json_body={"images": [{"url": CDN_IMAGE_URL}]})
        upstream.add("GET", CDN_IMAGE_URL, content=PNG_BYTES)

        stream = await service.open_result("abc123", "fal-test-key")
        await stream.aclose()

        (call,) = upstream.calls("GET", CDN_IMAGE_URL)
        assert "Authorization" not in call.headers
