"""
Operation dispatcher.

Maps each operation kind to the function that performs it. Every entry
point returns a new image and never modifies its input; a failing
operation raises before anything is returned, so callers never observe a
partially processed image.

Functions:
    apply_filter, apply_adjustment, apply_transform, apply_crop: One per kind
    apply_operation: Dispatch a single operation
    apply_operations: Fold a sequence of operations left to right
"""

import logging
from typing import Any, Callable, Dict, Sequence, Type

from IE_Libs.errors import EditorError, ProcessingError
from IE_Libs.ImageEditingLib import adjustments, crop, filters, transforms
from IE_Libs.ImageEditingLib.operation_types import (
    AdjustmentOperation,
    CropRect,
    FilterOperation,
    OperationType,
    TransformOperation,
)

logger = logging.getLogger(__name__)


def apply_filter(image: Any, operation: FilterOperation) -> Any:
    filter_type = operation.filter_type
    if filter_type == "grayscale":
        return filters.apply_grayscale(image)
    if filter_type == "sepia":
        return filters.apply_sepia(image)
    if filter_type == "invert":
        return filters.apply_invert(image)
    if filter_type == "blur":
        return filters.apply_gaussian_blur(image, operation.radius)
    if filter_type == "sharpen":
        return filters.apply_sharpen(image)
    raise ValueError(f"Unknown filter type: {filter_type}")


def apply_adjustment(image: Any, operation: AdjustmentOperation) -> Any:
    return adjustments.apply_adjustment(image, operation)


def apply_transform(image: Any, operation: TransformOperation) -> Any:
    return transforms.apply_transform(image, operation.transform_type)


def apply_crop(image: Any, operation: CropRect) -> Any:
    return crop.crop_image(image, operation)


_DISPATCH: Dict[Type, Callable[[Any, Any], Any]] = {
    FilterOperation: apply_filter,
    AdjustmentOperation: apply_adjustment,
    TransformOperation: apply_transform,
    CropRect: apply_crop,
}


def apply_operation(image: Any, operation: OperationType) -> Any:
    """
    Apply one operation to an image.

    Args:
        image: PIL Image (not modified)
        operation: Filter, Adjustment, Transform or Crop operation

    Returns:
        New PIL Image

    Raises:
        InvalidOperation: If the operation parameters fail validation
        ProcessingError: If the pixel transform itself fails
        TypeError: If operation is not a known operation type
    """
    handler = _DISPATCH.get(type(operation))
    if handler is None:
        raise TypeError(f"Unsupported operation: {type(operation).__name__}")

    logger.debug(f"Applying {operation}")
    try:
        return handler(image, operation)
    except EditorError:
        raise
    except (ValueError, TypeError, OSError) as e:
        raise ProcessingError(f"{operation.kind} operation failed: {e}") from e


def apply_operations(image: Any, operations: Sequence[OperationType]) -> Any:
    """
    Apply operations in sequence, each consuming the previous output.

    The first failing step aborts the whole sequence; no intermediate image
    is returned.
    """
    current = image
    for operation in operations:
        current = apply_operation(current, operation)
    if current is image:
        current = image.copy()
    return current
