"""
Runtime configuration for the editing core.

EditorConfig gathers the tunables that are not fixed by the file formats
themselves: history depth, load limits, and worker pool sizes.
"""

from dataclasses import dataclass, asdict, fields
from typing import Any, Dict, Optional

from IE_Libs.constants import (
    DEFAULT_CHUNK_ROWS,
    DEFAULT_PREVIEW_MAX_HEIGHT,
    DEFAULT_PREVIEW_MAX_WIDTH,
    MAX_DECODED_BYTES,
    MAX_FILE_SIZE,
    MAX_HISTORY,
)


@dataclass
class EditorConfig:
    """Configuration for an editor session.

    Attributes:
        max_history: Number of operations kept for undo (default: 50)
        max_file_size: Largest accepted source file in bytes (default: 100 MiB)
        max_decoded_bytes: Largest decoded RGBA buffer accepted on load
        worker_threads: Threads for decode/transform/encode tasks (None = CPU count)
        pixel_workers: Threads used to split a single pixel operation (None = CPU count)
        chunk_rows: Rows per chunk for data-parallel pixel loops
        preview_max_width: Default preview bounding box width
        preview_max_height: Default preview bounding box height
    """
    max_history: int = MAX_HISTORY
    max_file_size: int = MAX_FILE_SIZE
    max_decoded_bytes: int = MAX_DECODED_BYTES
    worker_threads: Optional[int] = None
    pixel_workers: Optional[int] = None
    chunk_rows: int = DEFAULT_CHUNK_ROWS
    preview_max_width: int = DEFAULT_PREVIEW_MAX_WIDTH
    preview_max_height: int = DEFAULT_PREVIEW_MAX_HEIGHT

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None and f.name in ("worker_threads", "pixel_workers"):
                continue
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{f.name} must be a positive integer, got {value!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
