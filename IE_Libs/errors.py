"""
Error types for the editing core.

Every failure surfaced by the engine, the editor state or the pipelines is
one of the EditorError subclasses below. Each knows its wire discriminator
and can render itself as the structured payload returned to the command
surface.

Classes:
    EditorError: Base class for all editor errors
    ImageLoadError, ImageSaveError, UnsupportedFormat, FileAccessDenied,
    InvalidOperation, OutOfMemory, ProcessingError, StateError

Functions:
    error_payload: Convert any exception to the wire error shape
"""

from typing import Any, Dict


class EditorError(Exception):
    """Base class for editor errors carrying a wire type name."""

    type_name = "editor_error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type_name, "message": self.message}


class ImageLoadError(EditorError):
    type_name = "image_load_error"


class ImageSaveError(EditorError):
    type_name = "image_save_error"


class UnsupportedFormat(EditorError, ValueError):
    type_name = "unsupported_format"

    def __init__(self, format_name: str):
        super().__init__(f"Unsupported image format: {format_name}")
        self.format_name = format_name


class FileAccessDenied(EditorError):
    type_name = "file_access_denied"

    def __init__(self, path: Any):
        super().__init__(f"File access denied: {path}")
        self.path = str(path)


class InvalidOperation(EditorError, ValueError):
    type_name = "invalid_operation"


class OutOfMemory(EditorError):
    """Raised when an image would not fit in the allowed memory budget.

    The wire payload carries the byte counts instead of a message.
    """

    type_name = "out_of_memory"

    def __init__(self, required: int, available: int):
        super().__init__(f"Out of memory: need {required} bytes, {available} bytes available")
        self.required = int(required)
        self.available = int(available)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type_name, "required": self.required, "available": self.available}


class ProcessingError(EditorError):
    type_name = "processing_error"


class StateError(EditorError):
    type_name = "state_error"


def error_payload(exc: BaseException) -> Dict[str, Any]:
    """
    Convert an exception into the structured error payload.

    Args:
        exc: Any exception raised while handling a command

    Returns:
        Dict with a 'type' discriminator and 'message' (or 'required'/'available'
        for out-of-memory errors). Exceptions outside the editor taxonomy are
        reported as processing errors.
    """
    if isinstance(exc, EditorError):
        return exc.to_dict()
    return ProcessingError(f"{type(exc).__name__}: {exc}").to_dict()
