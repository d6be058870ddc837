"""
Pytest configuration and shared fixtures for the image editor tests.

This module provides test images with distinct per-pixel values so that
geometric and tonal operations can be checked pixel by pixel.
"""

import numpy as np
import pytest
from PIL import Image

from IE_Libs.constants import DEFAULT_CHUNK_ROWS
from IE_Libs.ImageEditingLib.parallel import configure_parallelism


def make_gradient(width: int = 64, height: int = 48, mode: str = "RGB") -> Image.Image:
    """
    Build a test image where every channel varies across the image.

    Args:
        width: Image width
        height: Image height
        mode: One of L, LA, RGB, RGBA

    Returns:
        PIL Image in the requested mode
    """
    y, x = np.mgrid[0:height, 0:width]
    r = (x * 255 // max(width - 1, 1)).astype(np.uint8)
    g = (y * 255 // max(height - 1, 1)).astype(np.uint8)
    b = ((x * 7 + y * 13) % 256).astype(np.uint8)
    a = ((x + y) % 200 + 55).astype(np.uint8)

    channels = {
        "L": [r],
        "LA": [r, a],
        "RGB": [r, g, b],
        "RGBA": [r, g, b, a],
    }[mode]
    array = np.stack(channels, axis=-1)
    if array.shape[2] == 1:
        array = array[:, :, 0]
    return Image.fromarray(np.ascontiguousarray(array))


@pytest.fixture
def rgb_image():
    """64x48 RGB gradient."""
    return make_gradient(mode="RGB")


@pytest.fixture
def rgba_image():
    """64x48 RGBA gradient with varying alpha."""
    return make_gradient(mode="RGBA")


@pytest.fixture
def gray_image():
    """64x48 single-channel gradient."""
    return make_gradient(mode="L")


@pytest.fixture
def square_image():
    """100x100 RGB gradient."""
    return make_gradient(100, 100, mode="RGB")


@pytest.fixture
def small_chunks():
    """Force multi-chunk parallel processing, restoring defaults afterwards."""
    configure_parallelism(chunk_rows=5, max_workers=4)
    yield
    configure_parallelism(chunk_rows=DEFAULT_CHUNK_ROWS, max_workers=None)
