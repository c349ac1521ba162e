"""
Unit tests for ImageProcessor
"""
import io

import pytest
from PIL import Image

from app.core.exceptions import ImagePreparationError
from app.models.landmark import PreparedImage


def encode(image: Image.Image, fmt: str, **kwargs) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt, **kwargs)
    return buffer.getvalue()


def decoded_size(data: bytes):
    with Image.open(io.BytesIO(data)) as image:
        return image.size, image.format, image.mode


class TestResize:

    def test_large_image_shrinks_to_fit(self, image_processor):
        data = encode(Image.new("RGB", (1600, 1200), "red"), "JPEG")
        assert decoded_size(image_processor.resize_image(data)) == ((800, 600), "JPEG", "RGB")

    def test_aspect_ratio_is_kept(self, image_processor):
        data = encode(Image.new("RGB", (1600, 400), "blue"), "PNG")
        size, _, _ = decoded_size(image_processor.resize_image(data))
        assert size == (800, 200)

    def test_small_image_is_not_upscaled(self, image_processor):
        data = encode(Image.new("RGB", (320, 240), "green"), "PNG")
        size, fmt, _ = decoded_size(image_processor.resize_image(data))
        assert size == (320, 240)
        assert fmt == "JPEG"

    def test_exif_orientation_is_applied(self, image_processor):
        exif = Image.Exif()
        exif[0x0112] = 6
        data = encode(Image.new("RGB", (400, 200), "white"), "JPEG", exif=exif.tobytes())
        size, _, _ = decoded_size(image_processor.resize_image(data))
        assert size == (200, 400)

    def test_transparency_is_flattened(self, image_processor):
        data = encode(Image.new("RGBA", (100, 100), (0, 0, 255, 128)), "PNG")
        assert decoded_size(image_processor.resize_image(data))[2] == "RGB"

    def test_garbage_raises(self, image_processor):
        with pytest.raises(ImagePreparationError):
            image_processor.resize_image(b"definitely not an image")

    def test_decompression_bomb_raises(self, image_processor, oversized_png):
        with pytest.raises(ImagePreparationError, match="too large"):
            image_processor.resize_image(oversized_png.read_bytes())


@pytest.mark.parametrize("size, expected", [
    ((1600, 1200), (800, 600)),
    ((600, 1200), (300, 600)),
    ((800, 600), (800, 600)),
    ((10, 10), (10, 10)),
])
def test_fit_within(image_processor, size, expected):
    assert image_processor.fit_within(*size) == expected


def test_detect_mime_type(image_processor):
    assert image_processor.detect_mime_type(encode(Image.new("RGB", (4, 4)), "PNG")) == "image/png"
    assert image_processor.detect_mime_type(b"???", "photo.png") == "image/png"
    assert image_processor.detect_mime_type(b"???", "notes.txt") == "image/jpeg"
    assert image_processor.detect_mime_type(b"???") == "image/jpeg"


def test_detect_mime_type_survives_decompression_bomb(image_processor, oversized_png):
    data = oversized_png.read_bytes()
    assert image_processor.detect_mime_type(data, "huge.png") == "image/png"
    assert image_processor.detect_mime_type(data) == "image/jpeg"


@pytest.mark.asyncio
async def test_prepare_upload_stages_jpeg(image_processor, tmp_path):
    source = tmp_path / "fort.png"
    Image.new("RGB", (1024, 768), "gray").save(source)

    prepared = await image_processor.prepare_upload(source)

    assert prepared.mime_type == "image/jpeg"
    assert prepared.filename.startswith("landmark_")
    assert prepared.filename.endswith(".jpg")
    assert prepared.temp_path.parent == image_processor.temp_dir
    assert prepared.temp_path.read_bytes() == prepared.content
    assert prepared.as_file_part() == (prepared.filename, prepared.content, "image/jpeg")


@pytest.mark.asyncio
async def test_staged_names_are_unique(image_processor, tmp_path):
    source = tmp_path / "a.png"
    Image.new("RGB", (20, 20)).save(source)

    first = await image_processor.prepare_upload(source)
    second = await image_processor.prepare_upload(source)

    assert first.filename != second.filename


@pytest.mark.asyncio
async def test_undecodable_file_is_sent_raw(image_processor, tmp_path):
    source = tmp_path / "photo.bin"
    source.write_bytes(b"\x00\x01raw-bytes")

    prepared = await image_processor.prepare_upload(source)

    assert prepared.content == b"\x00\x01raw-bytes"
    assert prepared.mime_type == "image/jpeg"


@pytest.mark.asyncio
async def test_missing_file_raises(image_processor, tmp_path):
    with pytest.raises(ImagePreparationError) as exc_info:
        await image_processor.prepare_upload(tmp_path / "nope.jpg")
    assert exc_info.value.details["path"].endswith("nope.jpg")


@pytest.mark.asyncio
async def test_empty_file_raises(image_processor, tmp_path):
    source = tmp_path / "empty.jpg"
    source.write_bytes(b"")
    with pytest.raises(ImagePreparationError):
        await image_processor.prepare_upload(source)


@pytest.mark.asyncio
async def test_cleanup_removes_staged_file(image_processor, tmp_path):
    source = tmp_path / "b.png"
    Image.new("RGB", (20, 20)).save(source)
    prepared = await image_processor.prepare_upload(source)

    image_processor.cleanup(prepared)
    assert not prepared.temp_path.exists()

    # second cleanup and cleanup of nothing are no-ops
    image_processor.cleanup(prepared)
    image_processor.cleanup(None)
    image_processor.cleanup(PreparedImage("x.jpg", b"", "image/jpeg"))


@pytest.mark.asyncio
async def test_oversized_image_is_not_sent_raw(image_processor, oversized_png):
    with pytest.raises(ImagePreparationError, match="too large") as exc_info:
        await image_processor.prepare_upload(oversized_png)
    assert exc_info.value.details["path"].endswith("huge.png")
    assert list(image_processor.temp_dir.glob("landmark_*")) == []
