"""Relay of generated images from the render service's CDN.

Images are never written to disk or read fully into memory: the CDN
response is opened in streaming mode and its body is handed to the HTTP
layer chunk by chunk.  The response must be closed once the relay finishes,
which :class:`ImageStream` does when its iterator is exhausted or when
:meth:`ImageStream.aclose` is called.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass

import httpx

from wallgen.core.errors import ImageFetchFailed

logger = logging.getLogger(__name__)

# Headers attached to every relayed image.
IMAGE_RESPONSE_HEADERS: dict[str, str] = {
    "Content-Disposition": "inline",
    "Cache-Control": "public, max-age=86400",
}


@dataclass
class ImageStream:
    """An open CDN response ready to be relayed.

    Attributes:
        response: The streaming ``httpx`` response.
        content_type: Content type to report to the caller.
    """

    response: httpx.Response
    content_type: str

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.response.aiter_bytes():
                yield chunk
        finally:
            await self.response.aclose()

    async def aclose(self) -> None:
        await self.response.aclose()


async def open_image(
    client: httpx.AsyncClient,
    url: str,
    *,
    reported_content_type: str | None,
    default_content_type: str,
) -> ImageStream:
    """Open a streaming GET on the image URL.

    The reported content type wins, then the CDN's ``Content-Type`` header,
    then *default_content_type*.

    Raises:
        ImageFetchFailed: On a transport error or a non-2xx CDN response.
    """
    try:
        response = await client.send(client.build_request("GET", url), stream=True)
    except httpx.HTTPError as exc:
        logger.error("cdn_fetch_error url=%s error=%s", url, exc)
        raise ImageFetchFailed(f"Failed to fetch {url}: {exc}") from exc

    if response.is_error:
        await response.aclose()
        logger.error("cdn_fetch_error url=%s status=%d", url, response.status_code)
        raise ImageFetchFailed(f"CDN returned {response.status_code} for {url}")

    content_type = (
        reported_content_type or response.headers.get("Content-Type") or default_content_type
    )
    logger.info("cdn_fetch_open url=%s content_type=%s", url, content_type)
    return ImageStream(response=response, content_type=content_type)
