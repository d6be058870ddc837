"""
OutputLib - Preview and export pipelines

This module turns an image into a bounded-size data URL preview or a
file on disk.
"""

from IE_Libs.OutputLib.preview import (
    decode_preview,
    encode_preview,
    encode_preview_jpeg,
    generate_preview,
    resize_to_fit,
)
from IE_Libs.OutputLib.export_engine import (
    ExportFormat,
    export_format_from_extension,
    export_image,
)

__all__ = [
    "decode_preview",
    "encode_preview",
    "encode_preview_jpeg",
    "generate_preview",
    "resize_to_fit",
    "ExportFormat",
    "export_format_from_extension",
    "export_image",
]
