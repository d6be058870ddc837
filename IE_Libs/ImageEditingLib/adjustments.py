"""
Tonal Adjustment Operations.

Brightness, contrast, saturation, hue and gamma adjustments. Saturation and
hue go through HSL using the standard conversion:

    L = (max + min) / 2
    S = delta / (max + min)        if L < 0.5
        delta / (2 - max - min)    otherwise
    H = 60 * sector offset of the max channel

and back through the chroma / X / m reconstruction.

apply_adjustment validates every present field before computing anything,
then applies them in the fixed order brightness, contrast, saturation,
hue, gamma.
"""

from typing import Any, Tuple

import numpy as np

from IE_Libs.errors import InvalidOperation
from IE_Libs.ImageEditingLib.operation_types import AdjustmentOperation
from IE_Libs.ImageEditingLib.parallel import map_pixel_chunks
from IE_Libs.ImageEditingLib.pixel_buffer import (
    merge_color_alpha,
    split_color_alpha,
    to_byte,
)

FACTOR_RANGE = (0.0, 2.0)
HUE_RANGE = (-180, 180)
GAMMA_RANGE = (0.1, 3.0)


# ============================================================================
# Validation
# ============================================================================

def _validate_factor(name: str, value: float) -> None:
    low, high = FACTOR_RANGE
    if not (low < value <= high):
        raise InvalidOperation(f"{name.capitalize()} must be in (0.0, 2.0], got {value}")


def validate_adjustment(params: AdjustmentOperation) -> None:
    """
    Check every present adjustment field against its range.

    Raises:
        InvalidOperation: For the first out-of-range field in application order
    """
    if params.brightness is not None:
        _validate_factor("brightness", params.brightness)
    if params.contrast is not None:
        _validate_factor("contrast", params.contrast)
    if params.saturation is not None:
        _validate_factor("saturation", params.saturation)
    if params.hue is not None and not (HUE_RANGE[0] <= params.hue <= HUE_RANGE[1]):
        raise InvalidOperation(f"Hue must be between -180 and 180, got {params.hue}")
    if params.gamma is not None and not (GAMMA_RANGE[0] <= params.gamma <= GAMMA_RANGE[1]):
        raise InvalidOperation(f"Gamma must be between 0.1 and 3.0, got {params.gamma}")


# ============================================================================
# HSL Conversion
# ============================================================================

def rgb_to_hsl(rgb: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Convert uint8 RGB values (..., 3) to hue (degrees), saturation and lightness.

    Returns:
        (h, s, l) float64 arrays; h in [0, 360), s and l in [0, 1]
    """
    values = rgb.astype(np.float64) / 255.0
    r, g, b = values[..., 0], values[..., 1], values[..., 2]

    high = values.max(axis=-1)
    low = values.min(axis=-1)
    delta = high - low
    lightness = (high + low) / 2.0

    chromatic = delta > 0
    safe_delta = np.where(chromatic, delta, 1.0)

    low_branch = delta / np.where(high + low > 0, high + low, 1.0)
    high_branch = delta / np.where(2.0 - high - low > 0, 2.0 - high - low, 1.0)
    saturation = np.where(lightness < 0.5, low_branch, high_branch)
    saturation = np.where(chromatic, saturation, 0.0)

    hue = np.select(
        [high == r, high == g],
        [
            np.mod((g - b) / safe_delta, 6.0),
            (b - r) / safe_delta + 2.0,
        ],
        default=(r - g) / safe_delta + 4.0,
    ) * 60.0
    hue = np.where(chromatic, np.mod(hue, 360.0), 0.0)

    return hue, saturation, lightness


def hsl_to_rgb(hue: np.ndarray, saturation: np.ndarray, lightness: np.ndarray) -> np.ndarray:
    """
    Convert hue (degrees), saturation and lightness back to uint8 RGB (..., 3).
    """
    hue = np.mod(hue, 360.0)
    chroma = (1.0 - np.abs(2.0 * lightness - 1.0)) * saturation
    x = chroma * (1.0 - np.abs(np.mod(hue / 60.0, 2.0) - 1.0))
    m = lightness - chroma / 2.0
    zero = np.zeros_like(chroma)

    sector = np.clip((hue // 60.0).astype(np.int64), 0, 5)
    conditions = [sector == index for index in range(6)]
    r = np.select(conditions, [chroma, x, zero, zero, x, chroma])
    g = np.select(conditions, [x, chroma, chroma, x, zero, zero])
    b = np.select(conditions, [zero, zero, x, chroma, chroma, x])

    rgb = np.stack([r + m, g + m, b + m], axis=-1) * 255.0
    # Round to nearest so achromatic and unchanged pixels round-trip exactly
    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


# ============================================================================
# Individual Adjustments
# ============================================================================

def _apply_color_kernel(image: Any, kernel, rgb_only: bool = False) -> Any:
    color, alpha = split_color_alpha(image)
    if rgb_only and color.shape[2] != 3:
        # Gray pixels have no saturation or hue to change
        return merge_color_alpha(color.copy(), alpha)
    return merge_color_alpha(map_pixel_chunks(kernel, color), alpha)


def apply_brightness(image: Any, factor: float) -> Any:
    """Scale color channels: clamp(value * factor, 0, 255)."""
    return _apply_color_kernel(image, lambda chunk: to_byte(chunk.astype(np.float32) * factor))


def apply_contrast(image: Any, factor: float) -> Any:
    """Stretch around mid-gray: clamp((value - 128) * factor + 128, 0, 255)."""
    return _apply_color_kernel(
        image,
        lambda chunk: to_byte((chunk.astype(np.float32) - 128.0) * factor + 128.0),
    )


def apply_saturation(image: Any, factor: float) -> Any:
    """Scale HSL saturation by factor, clamped to [0, 1]."""
    def kernel(chunk: np.ndarray) -> np.ndarray:
        hue, saturation, lightness = rgb_to_hsl(chunk)
        return hsl_to_rgb(hue, np.clip(saturation * factor, 0.0, 1.0), lightness)

    return _apply_color_kernel(image, kernel, rgb_only=True)


def apply_hue(image: Any, shift: int) -> Any:
    """Rotate HSL hue by shift degrees: (H + shift + 360) mod 360."""
    def kernel(chunk: np.ndarray) -> np.ndarray:
        hue, saturation, lightness = rgb_to_hsl(chunk)
        return hsl_to_rgb(np.mod(hue + shift + 360.0, 360.0), saturation, lightness)

    return _apply_color_kernel(image, kernel, rgb_only=True)


def build_gamma_lut(gamma: float) -> np.ndarray:
    """256-entry table: clamp((i / 255) ** (1 / gamma) * 255, 0, 255)."""
    normalized = np.arange(256, dtype=np.float64) / 255.0
    return to_byte(np.power(normalized, 1.0 / gamma) * 255.0)


def apply_gamma(image: Any, gamma: float) -> Any:
    lut = build_gamma_lut(gamma)
    return _apply_color_kernel(image, lambda chunk: lut[chunk])


# ============================================================================
# Combined Adjustment
# ============================================================================

def apply_adjustment(image: Any, params: AdjustmentOperation) -> Any:
    """
    Apply every present adjustment field in order.

    Args:
        image: PIL Image
        params: AdjustmentOperation with optional fields

    Returns:
        Adjusted PIL Image (same mode as input)

    Raises:
        InvalidOperation: If any present field is out of range; nothing is
                          computed in that case
    """
    validate_adjustment(params)

    result = image
    if params.brightness is not None:
        result = apply_brightness(result, params.brightness)
    if params.contrast is not None:
        result = apply_contrast(result, params.contrast)
    if params.saturation is not None:
        result = apply_saturation(result, params.saturation)
    if params.hue is not None:
        result = apply_hue(result, params.hue)
    if params.gamma is not None:
        result = apply_gamma(result, params.gamma)

    if result is image:
        result = image.copy()
    return result
