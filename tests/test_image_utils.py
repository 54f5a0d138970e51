"""Tests for decoding, file naming and format parsing helpers."""

import io

import pytest
from PIL import Image

from image_converter.exceptions.custom_exceptions import ConfigError, DecodeError
from image_converter.models.data_models import EncodeSettings, OutputFormat, ResizeMethod
from image_converter.utils.image import ImageProcessor


# ============================================================================
# FILE NAMES
# ============================================================================


@pytest.mark.parametrize(
    "source,fmt,expected",
    [
        ("photo.png", OutputFormat.JPEG, "photo.jpg"),
        ("photo.JPEG", OutputFormat.PNG, "photo.png"),
        ("archive.tar.png", OutputFormat.WEBP, "archive.tar.webp"),
        ("scan", OutputFormat.GIF, "scan.gif"),
        (".hidden", OutputFormat.AVIF, ".hidden.avif"),
    ],
)
def test_derive_output_name(source, fmt, expected):
    assert ImageProcessor.derive_output_name(source, fmt) == expected


def test_derive_output_name_with_base_name():
    name = ImageProcessor.derive_output_name("IMG_0001.HEIC", OutputFormat.JPEG, base_name="a-red-car")

    assert name == "a-red-car.jpg"


def test_guess_mime_type():
    assert ImageProcessor.guess_mime_type("a.jpg") == "image/jpeg"
    assert ImageProcessor.guess_mime_type("a.avif") == "image/avif"
    assert ImageProcessor.guess_mime_type("a.unknownext") is None


# ============================================================================
# DECODING
# ============================================================================


def test_decode_returns_rgba_buffer(make_image_bytes):
    buffer, detected = ImageProcessor.decode(make_image_bytes((7, 5), fmt="PNG"), "image/png")

    assert detected == "PNG"
    assert (buffer.width, buffer.height) == (7, 5)
    assert buffer.pixels.mode == "RGBA"


@pytest.mark.parametrize("data", [b"", b"garbage bytes", b"\xff\xd8\xff\xe0truncated"])
def test_decode_invalid_bytes(data):
    with pytest.raises(DecodeError):
        ImageProcessor.decode(data, "image/jpeg")


def test_decode_rejects_non_image_mime(make_image_bytes):
    with pytest.raises(DecodeError):
        ImageProcessor.decode(make_image_bytes((2, 2)), "text/plain")


def test_is_jpeg_source_prefers_declared_type():
    assert ImageProcessor.is_jpeg_source("image/jpeg", "PNG")
    assert not ImageProcessor.is_jpeg_source("image/png", "JPEG")
    assert ImageProcessor.is_jpeg_source(None, "JPEG")


# ============================================================================
# ENUMS / SETTINGS
# ============================================================================


@pytest.mark.parametrize(
    "value,expected",
    [
        ("JPEG", OutputFormat.JPEG),
        ("jpg", OutputFormat.JPEG),
        ("image/webp", OutputFormat.WEBP),
        ("avif", OutputFormat.AVIF),
        (".png", OutputFormat.PNG),
    ],
)
def test_output_format_parse(value, expected):
    assert OutputFormat.parse(value) is expected


def test_output_format_parse_unknown():
    with pytest.raises(ConfigError):
        OutputFormat.parse("tiff")


def test_output_format_properties():
    assert OutputFormat.JPEG.extension == "jpg"
    assert OutputFormat.WEBP.extension == "webp"
    assert OutputFormat.AVIF.is_lossy
    assert not OutputFormat.GIF.is_lossy


def test_resize_method_aliases():
    assert ResizeMethod.parse("resize_width") is ResizeMethod.FIT_WIDTH
    assert ResizeMethod.parse("FIT") is ResizeMethod.FIT
    with pytest.raises(ConfigError):
        ResizeMethod.parse("zoom")


@pytest.mark.parametrize("quality", [0, 101, 50.5])
def test_encode_settings_quality_range(quality):
    with pytest.raises(ConfigError):
        EncodeSettings(quality=quality)


def sixteen_bit_png(value: int = 32768) -> bytes:
    img = Image.new("I;16", (4, 4), value)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def test_decode_scales_sixteen_bit_grayscale():
    """16-bit grey values are rescaled to 8 bits, not clipped to white."""
    buffer, detected = ImageProcessor.decode(sixteen_bit_png(32768), "image/png")

    r, g, b, a = buffer.pixels.getpixel((1, 1))
    assert detected == "PNG"
    assert 127 <= r <= 129
    assert r == g == b
    assert a == 255


def test_decode_sixteen_bit_extremes():
    black, _ = ImageProcessor.decode(sixteen_bit_png(0), "image/png")
    white, _ = ImageProcessor.decode(sixteen_bit_png(65535), "image/png")

    assert black.pixels.getpixel((0, 0))[0] == 0
    assert white.pixels.getpixel((0, 0))[0] == 255


def test_to_8bit_leaves_regular_modes_alone():
    img = Image.new("RGB", (2, 2), (1, 2, 3))

    assert ImageProcessor.to_8bit(img) is img
