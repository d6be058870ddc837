"""
Filter Operations.

Provides the whole-image filters:
- Grayscale: Luma reduction to a single channel
- Sepia: Warm-tone color matrix
- Invert: Color negative
- Gaussian blur: Smooth blur with standard deviation = radius
- Sharpen: Unsharp mask against a radius 1.0 blur

All filters return a new image and leave their input untouched. Alpha is
passed through unchanged wherever it is present (grayscale drops it).

Example:
    >>> from PIL import Image
    >>> img = Image.open("photo.jpg")
    >>> toned = apply_sepia(img)
    >>> soft = apply_gaussian_blur(img, radius=2.5)
"""

from typing import Any

import numpy as np
from PIL import ImageFilter

from IE_Libs.errors import InvalidOperation
from IE_Libs.ImageEditingLib.parallel import map_pixel_chunks
from IE_Libs.ImageEditingLib.pixel_buffer import (
    merge_color_alpha,
    normalize_mode,
    split_color_alpha,
    to_byte,
)

SEPIA_MATRIX = np.array(
    [
        [0.393, 0.769, 0.189],
        [0.349, 0.686, 0.168],
        [0.272, 0.534, 0.131],
    ],
    dtype=np.float32,
)

MIN_BLUR_RADIUS = 0.0
MAX_BLUR_RADIUS = 100.0
SHARPEN_BLUR_RADIUS = 1.0


def _require_image(image: Any) -> None:
    if not hasattr(image, "mode") or not hasattr(image, "tobytes"):
        raise TypeError(f"Expected PIL Image, got {type(image)}")


# ============================================================================
# Color Filters
# ============================================================================

def apply_grayscale(image: Any) -> Any:
    """
    Reduce image to luma.

    Returns:
        Single-channel (L) PIL Image with the same size as the input
    """
    _require_image(image)
    return normalize_mode(image).convert("L")


def _sepia_kernel(color: np.ndarray) -> np.ndarray:
    toned = color.astype(np.float32) @ SEPIA_MATRIX.T
    return to_byte(toned)


def apply_sepia(image: Any) -> Any:
    """
    Apply the sepia color matrix to R, G, B.

    Grayscale inputs are promoted to RGB first. Alpha is kept.

    Returns:
        RGB or RGBA PIL Image
    """
    _require_image(image)
    image = normalize_mode(image)
    if image.mode in ("L", "LA"):
        image = image.convert("RGBA" if image.mode == "LA" else "RGB")

    color, alpha = split_color_alpha(image)
    toned = map_pixel_chunks(_sepia_kernel, color)
    return merge_color_alpha(toned, alpha)


def _invert_kernel(color: np.ndarray) -> np.ndarray:
    return 255 - color


def apply_invert(image: Any) -> Any:
    """Invert color channels (255 - value); mode and alpha are preserved."""
    _require_image(image)
    color, alpha = split_color_alpha(image)
    return merge_color_alpha(map_pixel_chunks(_invert_kernel, color), alpha)


# ============================================================================
# Gaussian Blur
# ============================================================================

def validate_blur_radius(radius: float) -> None:
    if not (MIN_BLUR_RADIUS < radius <= MAX_BLUR_RADIUS):
        raise InvalidOperation(
            f"Blur radius must be between 0 and 100, got {radius}"
        )


def apply_gaussian_blur(image: Any, radius: float) -> Any:
    """
    Apply Gaussian blur to image.

    Args:
        image: PIL Image
        radius: Standard deviation of the Gaussian in pixels (0 < r <= 100)

    Returns:
        Blurred PIL Image (same mode as input)

    Raises:
        InvalidOperation: If radius <= 0 or > 100
        TypeError: If image not PIL Image
    """
    _require_image(image)
    validate_blur_radius(radius)
    return normalize_mode(image).filter(ImageFilter.GaussianBlur(radius=radius))


# ============================================================================
# Sharpen
# ============================================================================

def apply_sharpen(image: Any) -> Any:
    """
    Sharpen with an unsharp mask.

    Each color channel becomes clamp(2 * original - blurred, 0, 255), where
    blurred uses a Gaussian of radius 1.0. Alpha is copied from the input.
    """
    _require_image(image)
    image = normalize_mode(image)
    blurred = image.filter(ImageFilter.GaussianBlur(radius=SHARPEN_BLUR_RADIUS))

    color, alpha = split_color_alpha(image)
    blurred_color, _ = split_color_alpha(blurred)

    # Stack both inputs so each row chunk carries its own original and blurred rows
    stacked = np.stack([color, blurred_color], axis=-1)

    def kernel(chunk: np.ndarray) -> np.ndarray:
        original = chunk[..., 0].astype(np.int16)
        soft = chunk[..., 1].astype(np.int16)
        return np.clip(original * 2 - soft, 0, 255).astype(np.uint8)

    return merge_color_alpha(map_pixel_chunks(kernel, stacked), alpha)
