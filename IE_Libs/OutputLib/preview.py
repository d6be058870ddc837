"""
Preview generation.

Previews are the current image scaled down to fit a bounding box and
serialized as a self-describing data URL, e.g.

    data:image/png;base64,iVBORw0KGgo...

Functions:
    resize_to_fit: Aspect-preserving Lanczos downscale into a bounding box
    encode_preview: Lossless PNG data URL
    encode_preview_jpeg: Smaller JPEG data URL
    decode_preview: Data URL (or bare base64) back to an image
    generate_preview: resize_to_fit followed by encode_preview
"""

import base64
import binascii
import io
import math
from typing import Any

from PIL import Image, UnidentifiedImageError

from IE_Libs.constants import (
    DEFAULT_PREVIEW_JPEG_QUALITY,
    JPEG_DATA_URL_PREFIX,
    PNG_DATA_URL_PREFIX,
)
from IE_Libs.errors import InvalidOperation, ProcessingError


def _round_half_up(value: float) -> int:
    # round() sends .5 to the even neighbour; previews round ties up
    return int(math.floor(value + 0.5))


def resize_to_fit(image: Any, max_width: int, max_height: int) -> Any:
    """
    Scale an image down so it fits inside max_width x max_height.

    Images that already fit are returned unchanged (the same object).
    Otherwise both sides are scaled by min(max_width / width,
    max_height / height) and rounded, using a Lanczos filter.

    Raises:
        InvalidOperation: If the bounding box is not positive
    """
    if max_width <= 0 or max_height <= 0:
        raise InvalidOperation(
            f"Preview bounds must be positive, got {max_width}x{max_height}"
        )

    width, height = image.size
    if width <= max_width and height <= max_height:
        return image

    ratio = min(max_width / width, max_height / height)
    new_size = (max(1, _round_half_up(width * ratio)), max(1, _round_half_up(height * ratio)))
    return image.resize(new_size, Image.Resampling.LANCZOS)


def _to_data_url(prefix: str, payload: bytes) -> str:
    return prefix + base64.b64encode(payload).decode("ascii")


def encode_preview(image: Any) -> str:
    """
    Encode an image as a PNG data URL.

    Raises:
        ProcessingError: If encoding fails
    """
    buffer = io.BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise ProcessingError(f"Failed to encode image: {e}") from e
    return _to_data_url(PNG_DATA_URL_PREFIX, buffer.getvalue())


def encode_preview_jpeg(image: Any, quality: int = DEFAULT_PREVIEW_JPEG_QUALITY) -> str:
    """Encode an image as a JPEG data URL (alpha is dropped)."""
    if not 1 <= quality <= 100:
        raise InvalidOperation(f"Quality must be 1-100, got {quality}")

    buffer = io.BytesIO()
    try:
        image.convert("RGB").save(buffer, format="JPEG", quality=quality)
    except (OSError, ValueError) as e:
        raise ProcessingError(f"Failed to encode JPEG: {e}") from e
    return _to_data_url(JPEG_DATA_URL_PREFIX, buffer.getvalue())


def decode_preview(data: str) -> Any:
    """
    Decode a data URL or bare base64 string into an image.

    Raises:
        ProcessingError: If the base64 or the image payload is invalid
    """
    _, comma, payload = data.partition(",")
    if not comma:
        payload = data

    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ProcessingError(f"Failed to decode base64: {e}") from e

    try:
        with Image.open(io.BytesIO(raw)) as img:
            img.load()
            return img.copy()
    except (UnidentifiedImageError, OSError) as e:
        raise ProcessingError(f"Failed to load image from bytes: {e}") from e


def generate_preview(image: Any, max_width: int, max_height: int) -> str:
    return encode_preview(resize_to_fit(image, max_width, max_height))
