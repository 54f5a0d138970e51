"""Shared fixtures for image converter tests."""

import io
from typing import Callable, Optional, Tuple

import piexif
import pytest
from PIL import Image

from image_converter.config.config import ConfigManager


def _image_bytes(
    size: Tuple[int, int],
    color=(0, 0, 255),
    fmt: str = "PNG",
    mode: str = "RGB",
    exif: Optional[bytes] = None,
) -> bytes:
    img = Image.new(mode, size, color)
    buffer = io.BytesIO()
    save_kwargs = {}
    if exif is not None:
        save_kwargs["exif"] = exif
    img.save(buffer, format=fmt, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    """Factory producing encoded single-color images."""
    return _image_bytes


@pytest.fixture
def exif_bytes() -> bytes:
    """EXIF block with camera tags, orientation and pixel dimensions."""
    exif_dict = {
        "0th": {
            piexif.ImageIFD.Make: b"TestCam",
            piexif.ImageIFD.Model: b"Model X",
            piexif.ImageIFD.Orientation: 1,
        },
        "Exif": {
            piexif.ExifIFD.DateTimeOriginal: b"2024:01:02 03:04:05",
            piexif.ExifIFD.PixelXDimension: 64,
            piexif.ExifIFD.PixelYDimension: 48,
        },
        "GPS": {},
        "Interop": {},
        "1st": {},
        "thumbnail": None,
    }
    return piexif.dump(exif_dict)


@pytest.fixture
def jpeg_with_exif(exif_bytes) -> bytes:
    """64x48 JPEG carrying camera EXIF tags."""
    return _image_bytes((64, 48), color=(200, 100, 50), fmt="JPEG", exif=exif_bytes)


@pytest.fixture(autouse=True)
def reset_config_manager():
    """Keep the config singleton from leaking between tests."""
    ConfigManager().reset()
    yield
    ConfigManager().reset()
