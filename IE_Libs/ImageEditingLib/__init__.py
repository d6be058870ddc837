"""
ImageEditingLib - Pixel operation engine

This module provides the operation data models and the pure functions
that apply filters, adjustments, transforms and crops to images.
"""

from IE_Libs.ImageEditingLib.operation_types import (
    AdjustmentOperation,
    CropRect,
    EditOperation,
    FilterOperation,
    OperationType,
    TransformOperation,
    operation_from_dict,
)
from IE_Libs.ImageEditingLib.image_processor import (
    apply_adjustment,
    apply_crop,
    apply_filter,
    apply_operation,
    apply_operations,
    apply_transform,
)
from IE_Libs.ImageEditingLib.crop import crop_image, crop_with_aspect_ratio

__all__ = [
    "AdjustmentOperation",
    "CropRect",
    "EditOperation",
    "FilterOperation",
    "OperationType",
    "TransformOperation",
    "operation_from_dict",
    "apply_adjustment",
    "apply_crop",
    "apply_filter",
    "apply_operation",
    "apply_operations",
    "apply_transform",
    "crop_image",
    "crop_with_aspect_ratio",
]
