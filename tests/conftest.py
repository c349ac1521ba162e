"""
Shared fixtures: fake transports for the API client and an in-process
sandbox server.
"""
import struct
import zlib

import httpx
import pytest
import pytest_asyncio

from app.config.settings import ImageSettings, LandmarkApiSettings, Settings
from app.main import create_app
from app.services.api_client import LandmarkApiClient
from app.services.image_processor import ImageProcessor
from app.services.landmark_repository import LandmarkRepository
from app.services.landmark_store import LandmarkStore

BASE_URL = "http://testserver/t3/"


@pytest.fixture
def api_settings():
    return LandmarkApiSettings(base_url=BASE_URL)


@pytest.fixture
def image_settings(tmp_path):
    return ImageSettings(temp_dir=str(tmp_path / "staging"))


@pytest.fixture
def image_processor(image_settings):
    return ImageProcessor(image_settings)


@pytest_asyncio.fixture
async def mock_client(api_settings):
    """Factory: API client whose requests are answered by ``handler``."""
    clients = []

    def make(handler):
        client = LandmarkApiClient(api_settings, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield make
    for client in clients:
        await client.aclose()


@pytest.fixture
def oversized_png(tmp_path):
    """PNG whose header declares 20000x10000 pixels, past Pillow's decompression bomb limit."""

    def chunk(kind, data):
        return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))

    header = struct.pack(">IIBBBBB", 20000, 10000, 8, 2, 0, 0, 0)
    path = tmp_path / "huge.png"
    path.write_bytes(
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(b"\x00" * 64))
        + chunk(b"IEND", b"")
    )
    return path


@pytest.fixture
def sandbox_store(tmp_path):
    return LandmarkStore(tmp_path / "uploads")


@pytest.fixture
def sandbox_app(sandbox_store):
    return create_app(Settings(), store=sandbox_store)


@pytest.fixture
def sandbox_settings():
    # the sandbox serves api.php at the root
    return LandmarkApiSettings(base_url="http://testserver/")


@pytest_asyncio.fixture
async def sandbox_client(sandbox_app, sandbox_settings):
    client = LandmarkApiClient(sandbox_settings, transport=httpx.ASGITransport(app=sandbox_app))
    yield client
    await client.aclose()


@pytest.fixture
def sandbox_repository(sandbox_client, image_processor, sandbox_settings):
    return LandmarkRepository(sandbox_client, image_processor, sandbox_settings)
