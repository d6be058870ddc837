"""
Command input and output models.

Inputs are parsed from the JSON-like dictionaries sent by the command
surface; outputs render back to dictionaries with to_dict(). Missing or
mistyped required fields raise InvalidOperation.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from IE_Libs.constants import FIELD_OPERATION_TYPE
from IE_Libs.errors import InvalidOperation
from IE_Libs.ImageEditingLib.operation_types import EditOperation
from IE_Libs.StateLib.editor_state import HistoryState


def _require(data: Dict[str, Any], name: str) -> Any:
    if not isinstance(data, dict):
        raise InvalidOperation(f"Command input must be an object, got {type(data).__name__}")
    if data.get(name) is None:
        raise InvalidOperation(f"Missing required field '{name}'")
    return data[name]


def _optional_int(data: Dict[str, Any], name: str) -> Optional[int]:
    value = data.get(name)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidOperation(f"'{name}' must be an integer, got {value!r}")
    return value


def parse_edit_operation(data: Dict[str, Any]) -> EditOperation:
    """Accept either a full EditOperation or a bare operation object."""
    if isinstance(data, dict) and FIELD_OPERATION_TYPE in data:
        data = {"operation": data}
    return EditOperation.from_dict(data)


@dataclass
class OpenImageInput:
    file_path: str
    preview_max_width: Optional[int] = None
    preview_max_height: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OpenImageInput":
        return cls(
            file_path=str(_require(data, "file_path")),
            preview_max_width=_optional_int(data, "preview_max_width"),
            preview_max_height=_optional_int(data, "preview_max_height"),
        )


@dataclass
class OpenImageOutput:
    preview_base64: str
    original_width: int
    original_height: int
    format: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ApplyOperationInput:
    operation: EditOperation
    preview_max_width: Optional[int] = None
    preview_max_height: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplyOperationInput":
        return cls(
            operation=parse_edit_operation(_require(data, "operation")),
            preview_max_width=_optional_int(data, "preview_max_width"),
            preview_max_height=_optional_int(data, "preview_max_height"),
        )


@dataclass
class ApplyOperationOutput:
    preview_base64: str
    new_width: int
    new_height: int
    operation_id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class HistoryStepInput:
    preview_max_width: Optional[int] = None
    preview_max_height: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "HistoryStepInput":
        data = data or {}
        return cls(
            preview_max_width=_optional_int(data, "preview_max_width"),
            preview_max_height=_optional_int(data, "preview_max_height"),
        )


@dataclass
class HistoryStepOutput:
    """Result of undo/redo; changed is False when there was nothing to step."""
    changed: bool
    preview_base64: str
    width: int
    height: int
    history: HistoryState

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class PreviewInput:
    operations: List[EditOperation] = field(default_factory=list)
    max_width: Optional[int] = None
    max_height: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreviewInput":
        data = data or {}
        operations = data.get("operations") or []
        if not isinstance(operations, list):
            raise InvalidOperation("'operations' must be a list")
        return cls(
            operations=[parse_edit_operation(item) for item in operations],
            max_width=_optional_int(data, "max_width"),
            max_height=_optional_int(data, "max_height"),
        )


@dataclass
class PreviewOutput:
    preview_base64: str
    width: int
    height: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExportParams:
    output_path: str
    quality: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportParams":
        quality = _require(data, "quality")
        if isinstance(quality, bool) or not isinstance(quality, int):
            raise InvalidOperation(f"'quality' must be an integer, got {quality!r}")
        return cls(output_path=str(_require(data, "output_path")), quality=quality)


@dataclass
class ExportResult:
    path: str
    file_size: int
    format: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ClearOutput:
    success: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
