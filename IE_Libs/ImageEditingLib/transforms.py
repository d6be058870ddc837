"""
Geometric Transform Operations.

Lossless remaps of the pixel grid. Rotations are clockwise: rotate90 and
rotate270 swap width and height; rotate180 and the flips keep them.
"""

from typing import Any, Dict

from PIL import Image

from IE_Libs.ImageEditingLib.pixel_buffer import normalize_mode

# Pillow's ROTATE_* constants turn counter-clockwise
_TRANSPOSE_METHODS: Dict[str, Image.Transpose] = {
    "rotate90": Image.Transpose.ROTATE_270,
    "rotate180": Image.Transpose.ROTATE_180,
    "rotate270": Image.Transpose.ROTATE_90,
    "flip_horizontal": Image.Transpose.FLIP_LEFT_RIGHT,
    "flip_vertical": Image.Transpose.FLIP_TOP_BOTTOM,
}


def apply_transform(image: Any, transform_type: str) -> Any:
    """
    Rotate or flip an image.

    Args:
        image: PIL Image
        transform_type: One of rotate90, rotate180, rotate270,
                        flip_horizontal, flip_vertical

    Returns:
        New PIL Image

    Raises:
        ValueError: If transform_type is unknown
    """
    method = _TRANSPOSE_METHODS.get(transform_type)
    if method is None:
        raise ValueError(
            f"Unknown transform_type: {transform_type}. "
            f"Valid types: {', '.join(_TRANSPOSE_METHODS)}"
        )
    return normalize_mode(image).transpose(method)


def rotate90(image: Any) -> Any:
    return apply_transform(image, "rotate90")


def rotate180(image: Any) -> Any:
    return apply_transform(image, "rotate180")


def rotate270(image: Any) -> Any:
    return apply_transform(image, "rotate270")


def flip_horizontal(image: Any) -> Any:
    return apply_transform(image, "flip_horizontal")


def flip_vertical(image: Any) -> Any:
    return apply_transform(image, "flip_vertical")
