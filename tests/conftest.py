"""Shared pytest fixtures for Wallgen tests.

Upstream services (Gemini, the fal.ai queue/run/storage/platform APIs and
the CDN) are replaced by :class:`FakeUpstream`, an ``httpx.MockTransport``
handler that serves registered responses and records every request.
"""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from wallgen.api.dependencies import get_config, get_http_client
from wallgen.api.main import app
from wallgen.core.config import WallgenConfig
from wallgen.core.models import GenerationRequest

GEMINI_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-3-flash-preview:generateContent"
)
QUEUE_SUBMIT_URL = "https://queue.fal.run/fal-ai/flux-2-pro"
QUEUE_REQUESTS_URL = "https://queue.fal.run/fal-ai/flux-2-pro/requests"
CDN_IMAGE_URL = "https://v3.fal.media/files/tokyo/img.png"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-png-body"

Responder = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Route table for ``httpx.MockTransport``.

    Routes match on method plus ``scheme://host/path`` (query ignored).
    When several routes match, the most recently added one wins, so a test
    can change what an endpoint returns between calls.
    """

    def __init__(self) -> None:
        self.routes: list[tuple[str, str, Responder]] = []
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        url: str,
        status: int = 200,
        *,
        json_body: object = None,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        def respond(request: httpx.Request) -> httpx.Response:
            if json_body is not None:
                return httpx.Response(status, json=json_body, headers=headers)
            return httpx.Response(status, content=content or b"", headers=headers)

        self.routes.append((method.upper(), url, respond))

    def add_handler(self, method: str, url: str, handler: Responder) -> None:
        self.routes.append((method.upper(), url, handler))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        target = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        for method, url, respond in reversed(self.routes):
            if method == request.method and url == target:
                return respond(request)
        return httpx.Response(501, json={"detail": f"unexpected {request.method} {target}"})

    def calls(self, method: str, url: str) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method.upper()
            and f"{r.url.scheme}://{r.url.host}{r.url.path}" == url
        ]


def make_scene(**overrides) -> dict:
    """A valid Gemini scene for Tokyo: three landmarks and one environment."""
    scene = {
        "scene": "Tokyo landmarks clustered on a tiny platform at sunset",
        "subjects": [
            {
                "type": "Landmark",
                "description": "Tokyo Tower, red and white lattice steel tower",
                "pose": "Standing tall",
                "position": "center-back",
            },
            {
                "type": "Landmark",
                "description": "Tokyo Skytree, slender needle tower with observation decks",
                "pose": "Vertical",
                "position": "left side",
            },
            {
                "type": "Landmark",
                "description": "Senso-ji, five-storey pagoda with red lacquer",
                "pose": "Grounded",
                "position": "front right",
            },
            {
                "type": "Environment",
                "description": "Warm orange clouds and a gradient sky",
                "pose": "Floating",
                "position": "upper background",
            },
        ],
        "color_palette": ["#FF8C42", "#FFD29D", "#6A4C93"],
        "lighting": "Low golden sun from the west",
        "mood": "Warm and calm",
    }
    scene.update(overrides)
    return scene


def gemini_body(scene: object) -> dict:
    """Wrap *scene* the way ``generateContent`` returns JSON output."""
    text = scene if isinstance(scene, str) else json.dumps(scene)
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


@pytest.fixture
def test_config(monkeypatch) -> WallgenConfig:
    """Default configuration, isolated from the developer's environment."""
    for key in list(os.environ):
        if key.upper().startswith("WALLGEN_"):
            monkeypatch.delenv(key, raising=False)
    return WallgenConfig(_env_file=None)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def http_client(upstream: FakeUpstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream.handle))


@pytest.fixture
def tokyo_request() -> GenerationRequest:
    return GenerationRequest(
        city="Tokyo",
        weather="Sunny",
        datetime="Sunset",
        width=1920,
        height=1080,
    )


@pytest.fixture
def test_client(
    http_client: httpx.AsyncClient, test_config: WallgenConfig
) -> Generator[TestClient, None, None]:
    """TestClient whose outbound calls all go to :class:`FakeUpstream`."""
    app.dependency_overrides[get_http_client] = lambda: http_client
    app.dependency_overrides[get_config] = lambda: test_config
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def keys() -> dict[str, str]:
    return {"X-Fal-Key": "fal-test-key", "X-Google-Key": "google-test-key"}
