"""
StateLib - Editing session state

This module provides the undo/redo ledger, the snapshot-based editor
state, image file decoding and the worker pool for CPU-bound tasks.
"""

from IE_Libs.StateLib.history_manager import HistoryManager
from IE_Libs.StateLib.editor_state import EditorState, HistoryState, Published, Snapshot
from IE_Libs.StateLib.image_loader import (
    decode_image_file,
    format_label,
    validate_dimensions,
    validate_file_size,
    validate_format,
    validate_source_path,
)
from IE_Libs.StateLib.task_runner import TaskRunner

__all__ = [
    "HistoryManager",
    "EditorState",
    "HistoryState",
    "Published",
    "Snapshot",
    "decode_image_file",
    "format_label",
    "validate_dimensions",
    "validate_file_size",
    "validate_format",
    "validate_source_path",
    "TaskRunner",
]
