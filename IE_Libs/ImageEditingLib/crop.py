"""
Crop Operations.

Functions:
    crop_image: Cut a rectangle out of an image, clamped to its bounds
    crop_with_aspect_ratio: Largest rectangle of a given aspect inside an image
"""

import logging
from typing import Any

from IE_Libs.errors import InvalidOperation
from IE_Libs.ImageEditingLib.operation_types import CropRect
from IE_Libs.ImageEditingLib.pixel_buffer import normalize_mode

logger = logging.getLogger(__name__)


def crop_image(image: Any, rect: CropRect) -> Any:
    """
    Crop an image to a rectangle.

    The rectangle origin must lie inside the image. Width and height are
    clamped so the rectangle does not run past the right or bottom edge.

    Args:
        image: PIL Image
        rect: Crop rectangle in source pixel coordinates

    Returns:
        The cropped PIL Image

    Raises:
        InvalidOperation: If the origin is outside the image, a requested
                          dimension is zero, or the clamped area is empty
    """
    img_width, img_height = image.size

    if rect.x >= img_width or rect.y >= img_height:
        raise InvalidOperation(
            f"Crop position ({rect.x}, {rect.y}) is outside image bounds "
            f"({img_width}x{img_height})"
        )

    if rect.width == 0 or rect.height == 0:
        raise InvalidOperation("Crop dimensions must be at least 1x1")

    actual_width = min(rect.width, img_width - rect.x)
    actual_height = min(rect.height, img_height - rect.y)

    if actual_width <= 0 or actual_height <= 0:
        raise InvalidOperation("Calculated crop area is empty")

    if (actual_width, actual_height) != (rect.width, rect.height):
        logger.debug(
            f"Crop clamped from {rect.width}x{rect.height} to {actual_width}x{actual_height}"
        )

    box = (rect.x, rect.y, rect.x + actual_width, rect.y + actual_height)
    return normalize_mode(image).crop(box)


def crop_with_aspect_ratio(
    img_width: int,
    img_height: int,
    desired_aspect: float,
    from_center: bool = True,
) -> CropRect:
    """
    Compute the largest crop of a given aspect ratio (width / height).

    Args:
        img_width: Source image width
        img_height: Source image height
        desired_aspect: Target width / height ratio (> 0)
        from_center: Center the rectangle (True) or anchor it at (0, 0)

    Returns:
        CropRect covering the full width or the full height of the image

    Raises:
        InvalidOperation: If the aspect or image dimensions are not positive
    """
    if desired_aspect <= 0:
        raise InvalidOperation(f"Aspect ratio must be > 0, got {desired_aspect}")
    if img_width <= 0 or img_height <= 0:
        raise InvalidOperation(f"Image dimensions must be positive, got {img_width}x{img_height}")

    img_aspect = img_width / img_height

    if img_aspect > desired_aspect:
        crop_width = max(1, int(img_height * desired_aspect))
        crop_height = img_height
    else:
        crop_width = img_width
        crop_height = max(1, int(img_width / desired_aspect))

    if from_center:
        x = (img_width - crop_width) // 2
        y = (img_height - crop_height) // 2
    else:
        x, y = 0, 0

    return CropRect(x=x, y=y, width=crop_width, height=crop_height)
