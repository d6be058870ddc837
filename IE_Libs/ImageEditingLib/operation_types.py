"""
Operation data models for the image editor.

An operation is one of four closed kinds (Filter, Adjustment, Transform,
Crop). Each kind is a frozen dataclass that round-trips through the wire
shape used by the command surface:

    {"operation_type": "Filter", "params": {"type": "blur", "radius": 2.5}}

Classes:
    FilterOperation: Grayscale, sepia, invert, blur or sharpen
    AdjustmentOperation: Optional brightness/contrast/saturation/hue/gamma
    TransformOperation: Rotations and flips
    CropRect: Crop rectangle in source pixel coordinates
    EditOperation: An operation stamped with an id and timestamp

Functions:
    operation_from_dict: Parse any operation from its wire dictionary
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Literal, Optional, Union, get_args

from IE_Libs.constants import (
    FIELD_ID,
    FIELD_OPERATION,
    FIELD_OPERATION_TYPE,
    FIELD_PARAMS,
    FIELD_TIMESTAMP,
    FIELD_TYPE,
    OPERATION_ADJUSTMENT,
    OPERATION_CROP,
    OPERATION_FILTER,
    OPERATION_TRANSFORM,
)
from IE_Libs.errors import InvalidOperation

FilterName = Literal["grayscale", "sepia", "invert", "blur", "sharpen"]
TransformName = Literal["rotate90", "rotate180", "rotate270", "flip_horizontal", "flip_vertical"]

FILTER_NAMES = get_args(FilterName)
TRANSFORM_NAMES = get_args(TransformName)


def _params(data: Dict[str, Any]) -> Dict[str, Any]:
    params = data.get(FIELD_PARAMS, {})
    if params is None:
        params = {}
    if not isinstance(params, dict):
        raise InvalidOperation(f"Operation params must be an object, got {type(params).__name__}")
    return params


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidOperation(f"{name} must be a number, got {value!r}")
    return float(value)


def _as_int(name: str, value: Any, minimum: Optional[int] = None) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOperation(f"{name} must be an integer, got {value!r}")
    if minimum is not None and value < minimum:
        raise InvalidOperation(f"{name} must be >= {minimum}, got {value}")
    return value


@dataclass(frozen=True)
class FilterOperation:
    filter_type: FilterName
    radius: Optional[float] = None

    kind = OPERATION_FILTER

    def __post_init__(self):
        if self.filter_type not in FILTER_NAMES:
            raise InvalidOperation(
                f"Unknown filter type: {self.filter_type}. "
                f"Valid types: {', '.join(FILTER_NAMES)}"
            )
        if self.filter_type == "blur" and self.radius is None:
            raise InvalidOperation("Blur filter requires a radius")

    def to_dict(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {FIELD_TYPE: self.filter_type}
        if self.filter_type == "blur":
            params["radius"] = self.radius
        return {FIELD_OPERATION_TYPE: self.kind, FIELD_PARAMS: params}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterOperation":
        params = _params(data)
        filter_type = str(params.get(FIELD_TYPE, "")).lower()
        radius = None
        if filter_type == "blur":
            if "radius" not in params:
                raise InvalidOperation("Blur filter requires a radius")
            radius = _as_float("radius", params["radius"])
        return cls(filter_type, radius)


@dataclass(frozen=True)
class AdjustmentOperation:
    """Tonal adjustment; every field left as None is skipped.

    Fields are applied in the fixed order brightness, contrast,
    saturation, hue, gamma.
    """
    brightness: Optional[float] = None
    contrast: Optional[float] = None
    saturation: Optional[float] = None
    hue: Optional[int] = None
    gamma: Optional[float] = None

    kind = OPERATION_ADJUSTMENT

    def to_dict(self) -> Dict[str, Any]:
        params = {
            name: getattr(self, name)
            for name in ("brightness", "contrast", "saturation", "hue", "gamma")
            if getattr(self, name) is not None
        }
        return {FIELD_OPERATION_TYPE: self.kind, FIELD_PARAMS: params}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdjustmentOperation":
        params = _params(data)
        values: Dict[str, Any] = {}
        for name in ("brightness", "contrast", "saturation", "gamma"):
            if params.get(name) is not None:
                values[name] = _as_float(name, params[name])
        if params.get("hue") is not None:
            values["hue"] = _as_int("hue", params["hue"])
        return cls(**values)


@dataclass(frozen=True)
class TransformOperation:
    transform_type: TransformName

    kind = OPERATION_TRANSFORM

    def __post_init__(self):
        if self.transform_type not in TRANSFORM_NAMES:
            raise InvalidOperation(
                f"Unknown transform type: {self.transform_type}. "
                f"Valid types: {', '.join(TRANSFORM_NAMES)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {FIELD_OPERATION_TYPE: self.kind, FIELD_PARAMS: {FIELD_TYPE: self.transform_type}}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransformOperation":
        params = _params(data)
        return cls(str(params.get(FIELD_TYPE, "")).lower())


@dataclass(frozen=True)
class CropRect:
    x: int
    y: int
    width: int
    height: int

    kind = OPERATION_CROP

    def __post_init__(self):
        for name in ("x", "y", "width", "height"):
            _as_int(name, getattr(self, name), minimum=0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_OPERATION_TYPE: self.kind,
            FIELD_PARAMS: {"x": self.x, "y": self.y, "width": self.width, "height": self.height},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CropRect":
        params = _params(data)
        missing = [name for name in ("x", "y", "width", "height") if name not in params]
        if missing:
            raise InvalidOperation(f"Crop params missing: {', '.join(missing)}")
        return cls(params["x"], params["y"], params["width"], params["height"])


OperationType = Union[FilterOperation, AdjustmentOperation, TransformOperation, CropRect]

_OPERATION_CLASSES = {
    OPERATION_FILTER: FilterOperation,
    OPERATION_ADJUSTMENT: AdjustmentOperation,
    OPERATION_TRANSFORM: TransformOperation,
    OPERATION_CROP: CropRect,
}


def operation_from_dict(data: Dict[str, Any]) -> OperationType:
    """
    Parse an operation from its wire dictionary.

    Args:
        data: Dict with 'operation_type' (Filter, Adjustment, Transform, Crop)
              and 'params'

    Returns:
        The matching operation dataclass

    Raises:
        InvalidOperation: If the discriminator is unknown or params are malformed
    """
    if not isinstance(data, dict):
        raise InvalidOperation(f"Operation must be an object, got {type(data).__name__}")

    kind = data.get(FIELD_OPERATION_TYPE)
    operation_class = _OPERATION_CLASSES.get(kind)
    if operation_class is None:
        raise InvalidOperation(
            f"Unknown operation_type: {kind}. "
            f"Valid types: {', '.join(_OPERATION_CLASSES)}"
        )
    return operation_class.from_dict(data)


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class EditOperation:
    """A single applied operation; the unit of undo and redo."""
    id: str
    operation: OperationType
    timestamp: int = field(default_factory=_now_ms)

    @classmethod
    def create(cls, operation: OperationType) -> "EditOperation":
        return cls(id=uuid.uuid4().hex, operation=operation, timestamp=_now_ms())

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_ID: self.id,
            FIELD_OPERATION: self.operation.to_dict(),
            FIELD_TIMESTAMP: self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditOperation":
        if not isinstance(data, dict) or FIELD_OPERATION not in data:
            raise InvalidOperation("Edit operation requires an 'operation' field")
        operation = operation_from_dict(data[FIELD_OPERATION])
        op_id = data.get(FIELD_ID) or uuid.uuid4().hex
        timestamp = data.get(FIELD_TIMESTAMP)
        if timestamp is None:
            timestamp = _now_ms()
        return cls(id=str(op_id), operation=operation, timestamp=_as_int("timestamp", timestamp))
