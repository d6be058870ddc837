"""
Conversions between Pillow images and numpy pixel arrays.

Pixel operations work on uint8 arrays shaped (height, width, channels).
Color and alpha are handled separately so that operations touching only
color channels can pass alpha through untouched.
"""

from typing import Optional, Tuple

import numpy as np
from PIL import Image

from IE_Libs.constants import WORKING_MODES


def normalize_mode(image: Image.Image) -> Image.Image:
    """
    Convert an image to one of the working modes (L, LA, RGB, RGBA).

    Palette, bilevel, integer and CMYK images are converted to RGBA when they
    carry transparency and RGB otherwise. Images already in a working mode
    are returned as-is.
    """
    if image.mode in WORKING_MODES:
        return image
    transparent = "A" in image.getbands() or "transparency" in image.info
    return image.convert("RGBA" if transparent else "RGB")


def has_alpha(image: Image.Image) -> bool:
    return image.mode in ("LA", "RGBA")


def split_color_alpha(image: Image.Image) -> Tuple[np.ndarray, Optional[np.ndarray]]:
    """
    Split an image into its color array and optional alpha array.

    Returns:
        (color, alpha) where color is uint8 (H, W, 1 or 3) and alpha is
        uint8 (H, W, 1) or None
    """
    image = normalize_mode(image)
    array = np.asarray(image, dtype=np.uint8)
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    if has_alpha(image):
        return array[:, :, :-1], array[:, :, -1:]
    return array, None


def merge_color_alpha(color: np.ndarray, alpha: Optional[np.ndarray]) -> Image.Image:
    """
    Build an image from a color array and optional alpha array.

    The mode is inferred from the channel count: 1 -> L/LA, 3 -> RGB/RGBA.
    """
    if alpha is not None:
        color = np.concatenate([color, alpha], axis=2)
    channels = color.shape[2]
    if channels == 1:
        color = color[:, :, 0]
    return Image.fromarray(np.ascontiguousarray(color, dtype=np.uint8))


def to_byte(values: np.ndarray) -> np.ndarray:
    """Clamp float values to [0, 255] and truncate to uint8."""
    return np.clip(values, 0.0, 255.0).astype(np.uint8)
