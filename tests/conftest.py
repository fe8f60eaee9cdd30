"""Shared fixtures: small synthetic images for the pipeline stages."""

import io

import numpy as np
import pytest
from PIL import Image

from mapconverter.image_processing.pixel_buffer import PixelBuffer
from mapconverter.models import ConversionSettings


def make_square_buffer(size=30, top=10, left=10, side=10):
    """Black image with one white square, already binary."""
    buffer = PixelBuffer.blank(size, size, 0)
    buffer.data[top : top + side, left : left + side, :3] = 255
    return buffer


@pytest.fixture
def square_buffer():
    """10x10 white square on a 30x30 black background."""
    return make_square_buffer()


@pytest.fixture
def black_buffer():
    return PixelBuffer.blank(30, 30, 0)


@pytest.fixture
def random_buffer():
    rng = np.random.default_rng(1234)
    return PixelBuffer(rng.integers(0, 256, size=(24, 32, 4), dtype=np.uint8))


@pytest.fixture
def plain_settings():
    """Settings that leave contours untouched by simplify and smooth."""
    return ConversionSettings(simplify_tolerance=0, smoothing=0, min_region_area=0)


def encode_png(array: np.ndarray) -> bytes:
    out = io.BytesIO()
    Image.fromarray(array).save(out, format="PNG")
    return out.getvalue()


@pytest.fixture
def square_photo_png():
    """60x60 RGB image: black background, white filled square in the middle."""
    array = np.zeros((60, 60, 3), dtype=np.uint8)
    array[20:40, 20:40] = 255
    return encode_png(array)


@pytest.fixture
def black_photo_png():
    return encode_png(np.zeros((40, 40, 3), dtype=np.uint8))
