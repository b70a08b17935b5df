"""Shared pytest fixtures for Renderri tests."""
import os
import io
import zlib
import struct
import asyncio
import tempfile

# Configuration is read at import time, so set it before any project import
_TEST_ROOT = tempfile.mkdtemp(prefix="renderri-tests-")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("LOG_DIR", os.path.join(_TEST_ROOT, "logs"))
os.environ.setdefault("STORAGE_DIR", os.path.join(_TEST_ROOT, "storage"))

import pytest
import requests
from fastapi.testclient import TestClient
from PIL import Image

from app import create_app
from auth.services import create_access_token
from common.models import InlineImage
from image.services import ImageService
from storage.local import LocalAssetPublisher
from utils.data_uri import to_data_uri


def png_bytes(color=(255, 0, 0, 255), size=(8, 8), mode="RGBA") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_uri(color=(255, 0, 0, 255), size=(8, 8), mode="RGBA") -> str:
    return to_data_uri(png_bytes(color, size, mode), "image/png")


class FakeGenerator:
    """
    Stands in for GeminiImageClient.

    ``results`` is consumed in call order; each item is an InlineImage to
    return or an exception to raise. When exhausted, a red PNG is returned.
    ``delays`` optionally makes earlier calls finish later.
    """

    def __init__(self, results=None, delays=None):
        self.results = list(results or [])
        self.delays = list(delays or [])
        self.payloads = []

    async def generate_image(self, payload, empty_message="No image was generated."):
        index = len(self.payloads)
        self.payloads.append(list(payload))
        if index < len(self.delays):
            await asyncio.sleep(self.delays[index])
        result = self.results[index] if index < len(self.results) else None
        if isinstance(result, Exception):
            raise result
        if result is None:
            result = InlineImage.from_bytes(png_bytes(), "image/png")
        return result


@pytest.fixture
def storage_dir(tmp_path):
    return tmp_path / "storage"


@pytest.fixture
def publisher(storage_dir):
    return LocalAssetPublisher(str(storage_dir), "/assets/storage")


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def image_service(generator, publisher):
    return ImageService(generator, publisher, generated_bucket="generated-files")


@pytest.fixture
def client(image_service, publisher):
    app = create_app(image_service=image_service, publisher=publisher)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": "user-1", "email": "ada@example.com"})
    return {"Authorization": f"Bearer {token}"}


class FakeHttpResponse:
    def __init__(self, content, content_type="image/png", status_code=200):
        self.content = content
        self.headers = {"Content-Type": content_type}
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)


class FakeHttp:
    """Replaces ``requests.get``; records (url, timeout) for each call."""

    def __init__(self):
        self.calls = []
        self.response = FakeHttpResponse(png_bytes((0, 128, 255, 255)))
        self.error = None

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error:
            raise self.error
        return self.response


@pytest.fixture
def fake_http(monkeypatch):
    http = FakeHttp()
    monkeypatch.setattr(requests, "get", http.get)
    return http


def oversized_png_bytes(width=20000, height=20000) -> bytes:
    """PNG whose header claims a huge canvas; only a few bytes long."""
    def chunk(kind, data):
        crc = zlib.crc32(kind + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b"\x00"))
        + chunk(b"IEND", b"")
    )
