"""
Shared fixtures for media pipeline tests.

Provides Pillow-generated images, a session context, and an httpx mock
transport that records every request so tests can assert on what (and
whether anything) went over the wire.
"""

from __future__ import annotations

import io
import json
import os
from typing import Callable, List

import httpx
import pytest

from jewelstore.config.loader import SessionContext
from jewelstore.media.editor import ProductMediaState
from jewelstore.media.upload import UploadClient
from jewelstore.models.media import MediaFile

API_URL = "https://api.example.test"
CDN_BASE = "https://jewelstore.sgp1.digitaloceanspaces.com"


# ── Image helpers ────────────────────────────────────────────


def make_image_bytes(width: int, height: int, fmt: str = "PNG", color=(200, 30, 60), mode: str = "RGB") -> bytes:
    """Solid-color image encoded with Pillow."""
    from PIL import Image

    fill = color if mode != "RGBA" else (*color[:3], 255)
    img = Image.new(mode, (width, height), fill)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_noise_bytes(width: int, height: int, fmt: str = "PNG") -> bytes:
    """Random-noise image; compresses poorly, useful for size limits."""
    from PIL import Image

    img = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_file(name: str, mime: str, data: bytes) -> MediaFile:
    return MediaFile(filename=name, mime_type=mime, data=data)


# ── HTTP recording ───────────────────────────────────────────


class Recorder:
    """Collects requests seen by a MockTransport and replies via a handler."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self.handler = handler
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.handler(request)

    @property
    def count(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


def upload_ok_handler(request: httpx.Request) -> httpx.Response:
    """Reply to uploads with a URL derived from the uploaded filename."""
    if request.method == "POST" and request.url.path == "/admin/upload/file":
        body = request.content
        marker = b'filename="'
        start = body.index(marker) + len(marker)
        filename = body[start:body.index(b'"', start)].decode()
        return httpx.Response(
            201,
            json={"publicUrl": f"{CDN_BASE}/products/{filename}", "key": f"products/{filename}"},
        )
    if request.method == "DELETE" and request.url.path == "/admin/upload/file":
        return httpx.Response(200, json={"success": True})
    return httpx.Response(404, json={"message": "Not found"})


@pytest.fixture
def session() -> SessionContext:
    return SessionContext(token="test-token", tenant_id="acme")


@pytest.fixture
def anonymous_session() -> SessionContext:
    return SessionContext(token=None, tenant_id="acme")


@pytest.fixture
def recorder() -> Recorder:
    return Recorder(upload_ok_handler)


@pytest.fixture
def uploader(session, recorder) -> UploadClient:
    return UploadClient(session, API_URL, http_client=recorder.client())


@pytest.fixture
def png_file() -> MediaFile:
    return make_file("ring.png", "image/png", make_image_bytes(800, 600))


@pytest.fixture
def media_state() -> ProductMediaState:
    return ProductMediaState(
        images=[f"{CDN_BASE}/products/a.webp", f"{CDN_BASE}/products/b.webp", f"{CDN_BASE}/products/c.webp"],
    )


def json_body(request: httpx.Request) -> dict:
    return json.loads(request.content.decode())
