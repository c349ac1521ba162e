"""
Unit tests for the landmark repository result mapping
"""
import io

import httpx
import pytest
from PIL import Image

from app.core.exceptions import TransportError
from app.core.result import Failure, Success
from app.schemas.landmark import ApiResponse
from app.services.landmark_repository import LandmarkRepository


def make_repository(mock_client, handler, image_processor, api_settings):
    return LandmarkRepository(mock_client(handler), image_processor, api_settings)


@pytest.fixture
def photo(tmp_path):
    path = tmp_path / "photo.png"
    Image.new("RGB", (1600, 1200), color=(10, 120, 60)).save(path, format="PNG")
    return path


@pytest.mark.asyncio
async def test_get_landmarks_success(mock_client, image_processor, api_settings):
    def handler(request):
        return httpx.Response(200, json=[
            {"id": 1, "title": "Lalbagh Fort", "lat": 23.7197, "lon": 90.3875, "image": "img/1.jpg"},
            {"id": "broken"},
        ])

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.get_landmarks()

    assert isinstance(result, Success)
    assert len(result.value) == 1
    assert result.value[0].title == "Lalbagh Fort"
    assert result.value[0].image == "http://testserver/t3/img/1.jpg"


@pytest.mark.asyncio
async def test_empty_list_is_success(mock_client, image_processor, api_settings):
    repository = make_repository(mock_client, lambda r: httpx.Response(200, json=[]), image_processor, api_settings)
    result = await repository.get_landmarks()
    assert result == Success([])


@pytest.mark.asyncio
async def test_server_error_becomes_failure(mock_client, image_processor, api_settings):
    repository = make_repository(mock_client, lambda r: httpx.Response(500), image_processor, api_settings)
    result = await repository.get_landmarks()

    assert isinstance(result, Failure)
    assert "500" in result.message
    assert isinstance(result.error, TransportError)


@pytest.mark.asyncio
async def test_network_error_becomes_failure(mock_client, image_processor, api_settings):
    def handler(request):
        raise httpx.ConnectError("connection reset", request=request)

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.create_landmark("Test", 23.5, 90.5)

    assert isinstance(result, Failure)
    assert "connection reset" in result.message


@pytest.mark.asyncio
async def test_create_with_empty_body_gets_default_envelope(mock_client, image_processor, api_settings):
    repository = make_repository(mock_client, lambda r: httpx.Response(200, content=b""), image_processor, api_settings)
    result = await repository.create_landmark("Test", 23.5, 90.5)

    assert isinstance(result, Success)
    assert result.value == ApiResponse(status="success")


@pytest.mark.asyncio
async def test_error_envelope_is_failure(mock_client, image_processor, api_settings):
    def handler(request):
        return httpx.Response(200, json={"status": "error", "message": "Landmark not found"})

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.delete_landmark(99)

    assert isinstance(result, Failure)
    assert result.message == "Landmark not found"


@pytest.mark.asyncio
async def test_http_failure_message_embeds_status(mock_client, image_processor, api_settings):
    repository = make_repository(mock_client, lambda r: httpx.Response(404), image_processor, api_settings)
    result = await repository.update_landmark(4, title="X")

    assert isinstance(result, Failure)
    assert result.message == "HTTP 404: Not Found"


@pytest.mark.asyncio
async def test_invalid_id_fails_without_request(mock_client, image_processor, api_settings):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"status": "success"})

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.delete_landmark(0)

    assert isinstance(result, Failure)
    assert calls == []


@pytest.mark.asyncio
async def test_image_is_resized_uploaded_and_cleaned_up(mock_client, image_processor, api_settings, photo):
    captured = {}

    def handler(request):
        captured["body"] = request.content
        return httpx.Response(200, json={"status": "success", "message": "Landmark created"})

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.create_landmark("Sundarbans", 21.9497, 89.1833, image_path=photo)

    assert isinstance(result, Success)
    body = captured["body"]
    assert b'name="image"; filename="landmark_' in body
    assert b"Content-Type: image/jpeg" in body

    jpeg = body[body.index(b"\xff\xd8"):]
    with Image.open(io.BytesIO(jpeg)) as uploaded:
        assert uploaded.size == (800, 600)

    assert list(image_processor.temp_dir.glob("landmark_*")) == []


@pytest.mark.asyncio
async def test_unreadable_image_falls_back_to_no_image(mock_client, image_processor, api_settings, tmp_path):
    captured = {}

    def handler(request):
        captured["body"] = request.content
        return httpx.Response(200, json={"status": "success"})

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.create_landmark("No photo", 22.0, 90.0, image_path=tmp_path / "missing.jpg")

    assert isinstance(result, Success)
    assert b'name="image"' not in captured["body"]
    assert b'name="title"\r\n\r\nNo photo' in captured["body"]


@pytest.mark.asyncio
async def test_update_without_image_sends_only_given_fields(mock_client, image_processor, api_settings):
    captured = {}

    def handler(request):
        captured["body"] = request.content
        return httpx.Response(200, json={"status": "success", "message": "Updated"})

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.update_landmark(3, lat=24.0)

    assert isinstance(result, Success)
    assert result.value.message == "Updated"
    assert b'name="lat"\r\n\r\n24.0' in captured["body"]
    assert b'name="title"' not in captured["body"]


@pytest.mark.asyncio
async def test_oversized_image_falls_back_to_no_image(mock_client, image_processor, api_settings, oversized_png):
    captured = {}

    def handler(request):
        captured["body"] = request.content
        return httpx.Response(200, json={"status": "success"})

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.create_landmark("Test", 23.5, 90.5, image_path=oversized_png)

    assert isinstance(result, Success)
    assert b'name="image"' not in captured["body"]
    assert b'name="title"\r\n\r\nTest' in captured["body"]


@pytest.mark.asyncio
async def test_unexpected_staging_error_still_sends_request(mock_client, image_processor, api_settings, monkeypatch):
    async def explode(path):
        raise RuntimeError("codec crashed")

    monkeypatch.setattr(image_processor, "prepare_upload", explode)
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"status": "success"})

    repository = make_repository(mock_client, handler, image_processor, api_settings)
    result = await repository.update_landmark(3, title="Renamed", image_path="whatever.jpg")

    assert isinstance(result, Success)
    assert len(requests) == 1
    assert b'name="image"' not in requests[0].content
