"""
Image export.

Writes the current image to disk in the format named by the output file's
extension:

- JPEG: converted to RGB, encoded at the requested quality
- PNG: converted to RGBA, maximum compression; quality is ignored
- WebP: converted to RGBA, always lossless; quality is accepted but not
  used

Classes:
    ExportFormat: Supported export formats

Functions:
    export_format_from_extension: Resolve a format from an extension
    export_image: Encode and write an image, returning the file size
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

from IE_Libs.constants import SUPPORTED_EXPORT_EXTENSIONS
from IE_Libs.errors import (
    FileAccessDenied,
    ImageSaveError,
    InvalidOperation,
    ProcessingError,
    UnsupportedFormat,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ExportFormat(Enum):
    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"

    @property
    def label(self) -> str:
        return {"jpeg": "JPEG", "png": "PNG", "webp": "WebP"}[self.value]

    @property
    def pil_format(self) -> str:
        return self.value.upper()

    @classmethod
    def from_extension(cls, extension: str) -> "ExportFormat":
        """
        Resolve a format from a file extension (with or without the dot,
        case-insensitive).

        Raises:
            UnsupportedFormat: For anything other than jpg, jpeg, png, webp
        """
        ext = extension.lower().lstrip(".")
        if f".{ext}" not in SUPPORTED_EXPORT_EXTENSIONS:
            raise UnsupportedFormat(f"{extension}. Supported: jpeg, png, webp")
        if ext in ("jpg", "jpeg"):
            return cls.JPEG
        return cls(ext)

    @classmethod
    def from_path(cls, path: PathLike) -> "ExportFormat":
        suffix = Path(path).suffix
        if not suffix:
            raise InvalidOperation("File path must have an extension (jpg, png, webp)")
        return cls.from_extension(suffix)


def export_format_from_extension(extension: str) -> ExportFormat:
    return ExportFormat.from_extension(extension)


def validate_quality(quality: Any) -> int:
    if isinstance(quality, bool) or not isinstance(quality, int) or not 1 <= quality <= 100:
        raise InvalidOperation(f"Quality must be 1-100, got {quality}")
    return quality


def _save_arguments(export_format: ExportFormat, quality: int) -> Dict[str, Any]:
    if export_format is ExportFormat.JPEG:
        return {"format": export_format.pil_format, "quality": quality}
    if export_format is ExportFormat.PNG:
        # Pillow picks the PNG row filter adaptively per row
        return {"format": export_format.pil_format, "compress_level": 9}
    return {"format": export_format.pil_format, "lossless": True}


def export_image(image: Any, path: PathLike, export_format: ExportFormat, quality: int) -> int:
    """
    Encode an image and write it to path.

    Args:
        image: PIL Image to write
        path: Destination file; its parent directory must exist
        export_format: Target format
        quality: 1-100; only JPEG uses it

    Returns:
        Size of the written file in bytes

    Raises:
        InvalidOperation: If quality is out of range or the parent directory is missing
        FileAccessDenied: If the destination cannot be written due to permissions
        ImageSaveError: If writing or reading back the file fails
        ProcessingError: If the encoder rejects the image
    """
    quality = validate_quality(quality)
    path = Path(path)

    parent = path.parent
    if not parent.exists():
        raise InvalidOperation(f"Parent directory does not exist: {parent}")

    encoded = image.convert("RGB" if export_format is ExportFormat.JPEG else "RGBA")

    try:
        encoded.save(path, **_save_arguments(export_format, quality))
    except PermissionError as e:
        raise FileAccessDenied(path) from e
    except (ValueError, KeyError) as e:
        raise ProcessingError(f"Failed to encode {export_format.label}: {e}") from e
    except OSError as e:
        raise ImageSaveError(f"Failed to save image to {path}: {e}") from e

    try:
        size = path.stat().st_size
    except OSError as e:
        raise ImageSaveError(str(e)) from e

    logger.info(f"Exported {export_format.label} to {path} ({size} bytes)")
    return size
