"""
Image file validation and decoding.

Source paths are checked (existence, extension, size) before any decoding.
Reads an image from disk into a working-mode Pillow image. The header is
inspected before pixel data is decoded so oversized images are rejected
without allocating their buffer.
"""

import logging
from pathlib import Path
from typing import Any, Union

from PIL import Image, UnidentifiedImageError

from IE_Libs.constants import (
    MAX_DECODED_BYTES,
    MAX_DIMENSION,
    MAX_FILE_SIZE,
    SUPPORTED_LOAD_EXTENSIONS,
)
from IE_Libs.errors import (
    EditorError,
    FileAccessDenied,
    ImageLoadError,
    InvalidOperation,
    OutOfMemory,
    UnsupportedFormat,
)
from IE_Libs.ImageEditingLib.pixel_buffer import normalize_mode

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Pillow refuses images above twice this count before our own dimension and
# memory checks can run; allow everything within MAX_DIMENSION x MAX_DIMENSION.
if Image.MAX_IMAGE_PIXELS is not None and Image.MAX_IMAGE_PIXELS < MAX_DIMENSION * MAX_DIMENSION:
    Image.MAX_IMAGE_PIXELS = MAX_DIMENSION * MAX_DIMENSION


def format_label(path: PathLike) -> str:
    """Upper-case file extension without the dot, or UNKNOWN."""
    suffix = Path(path).suffix
    return suffix[1:].upper() if suffix else "UNKNOWN"


def validate_dimensions(width: int, height: int) -> None:
    """
    Check image dimensions against the supported range.

    Raises:
        InvalidOperation: If either side is 0 or larger than MAX_DIMENSION
    """
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise InvalidOperation(
            f"Image dimensions {width}x{height} exceed maximum {MAX_DIMENSION}x{MAX_DIMENSION}"
        )
    if width == 0 or height == 0:
        raise InvalidOperation("Image dimensions must be greater than 0")


def validate_format(path: PathLike) -> None:
    """
    Check that the file extension is a loadable image format (case-insensitive).

    Raises:
        UnsupportedFormat: If the extension is missing or not supported
    """
    suffix = Path(path).suffix.lower()
    if not suffix:
        raise UnsupportedFormat("unknown")
    if suffix not in SUPPORTED_LOAD_EXTENSIONS:
        raise UnsupportedFormat(suffix[1:])


def validate_file_size(path: PathLike, max_file_size: int = MAX_FILE_SIZE) -> None:
    """
    Check the file size against the load limit.

    Raises:
        ImageLoadError: If metadata cannot be read or the file is too large
        FileAccessDenied: If metadata cannot be read due to permissions
    """
    try:
        size = Path(path).stat().st_size
    except PermissionError as e:
        raise FileAccessDenied(path) from e
    except OSError as e:
        raise ImageLoadError(f"Cannot read file metadata: {e}") from e

    if size > max_file_size:
        raise ImageLoadError(
            f"File size {size // 1024 // 1024} MB exceeds maximum "
            f"{max_file_size // 1024 // 1024} MB"
        )


def validate_source_path(path: PathLike, max_file_size: int = MAX_FILE_SIZE) -> Path:
    """
    Run every pre-decode check on a source path.

    The path must exist, be a regular file, have a supported extension and
    be no larger than max_file_size.

    Returns:
        The path as a Path object
    """
    path = Path(path)
    if not path.exists():
        raise ImageLoadError(f"File not found: {path}")
    if not path.is_file():
        raise ImageLoadError(f"Path is not a file: {path}")
    validate_format(path)
    validate_file_size(path, max_file_size)
    return path


def decode_image_file(path: PathLike, max_decoded_bytes: int = MAX_DECODED_BYTES) -> Any:
    """
    Decode an image file.

    Args:
        path: Image file path
        max_decoded_bytes: Largest RGBA buffer (width * height * 4) accepted

    Returns:
        PIL Image in L, LA, RGB or RGBA mode, fully loaded in memory

    Raises:
        FileAccessDenied: If the file cannot be read due to permissions
        InvalidOperation: If either dimension is 0 or above MAX_DIMENSION
        OutOfMemory: If the decoded buffer would exceed max_decoded_bytes
        ImageLoadError: If the file is missing or cannot be decoded
    """
    path = Path(path)
    try:
        with Image.open(path) as img:
            width, height = img.size
            validate_dimensions(width, height)
            required = width * height * 4
            if required > max_decoded_bytes:
                raise OutOfMemory(required=required, available=max_decoded_bytes)

            img.load()
            decoded = normalize_mode(img)
            if decoded is img:
                decoded = img.copy()
    except EditorError:
        raise
    except PermissionError as e:
        raise FileAccessDenied(path) from e
    except FileNotFoundError as e:
        raise ImageLoadError(f"File not found: {path}") from e
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageLoadError(f"Failed to load image from {path}: {e}") from e

    logger.info(f"Decoded {path.name}: {decoded.mode} {decoded.size[0]}x{decoded.size[1]}")
    return decoded

