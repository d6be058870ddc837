"""
Editor session: the command-facing facade over the editing core.

An EditorSession owns one EditorState and one TaskRunner. Every command
runs its CPU-bound work (decode, transform, resize, encode, file I/O) on
the runner and waits for the result; the state lock serializes writers
while previews and exports read the published snapshot without blocking.

Example:
    >>> with EditorSession() as session:
    ...     opened = session.open_image(OpenImageInput("photo.jpg", 800, 600))
    ...     applied = session.apply_operation(ApplyOperationInput(
    ...         EditOperation.create(FilterOperation("sepia"))))
    ...     session.export_image(ExportParams("out.png", 90))
"""

import logging
from pathlib import Path
from typing import Any, Optional, Tuple

from IE_Libs.config import EditorConfig
from IE_Libs.ImageEditingLib.parallel import configure_parallelism
from IE_Libs.OutputLib.export_engine import ExportFormat, export_image
from IE_Libs.OutputLib.preview import generate_preview
from IE_Libs.StateLib.editor_state import EditorState, HistoryState
from IE_Libs.StateLib.image_loader import validate_source_path
from IE_Libs.StateLib.task_runner import TaskRunner
from IE_Libs.CommandsLib.command_types import (
    ApplyOperationInput,
    ApplyOperationOutput,
    ClearOutput,
    ExportParams,
    ExportResult,
    HistoryStepInput,
    HistoryStepOutput,
    OpenImageInput,
    OpenImageOutput,
    PreviewInput,
    PreviewOutput,
)

logger = logging.getLogger(__name__)


class EditorSession:
    """A single-writer editing session."""

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or EditorConfig()
        configure_parallelism(self.config.chunk_rows, self.config.pixel_workers)
        self.state = EditorState(
            max_history=self.config.max_history,
            max_decoded_bytes=self.config.max_decoded_bytes,
        )
        self.runner = TaskRunner(max_workers=self.config.worker_threads)

    def _bounds(self, max_width: Optional[int], max_height: Optional[int]) -> Tuple[int, int]:
        return (
            max_width if max_width is not None else self.config.preview_max_width,
            max_height if max_height is not None else self.config.preview_max_height,
        )

    def _preview_of(self, image: Any, max_width: Optional[int], max_height: Optional[int]) -> str:
        width, height = self._bounds(max_width, max_height)
        return self.runner.run(generate_preview, image, width, height)

    def _load(self, file_path: str) -> Tuple[int, int, str]:
        path = validate_source_path(file_path, self.config.max_file_size)
        return self.state.load_file(path)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def open_image(self, params: OpenImageInput) -> OpenImageOutput:
        """Validate, decode and install an image; return its preview."""
        width, height, label = self.runner.run(self._load, params.file_path)
        snapshot = self.state.snapshot()
        preview = self._preview_of(snapshot.current, params.preview_max_width, params.preview_max_height)

        logger.info(f"Opened {params.file_path} ({label}, {width}x{height})")
        return OpenImageOutput(
            preview_base64=preview,
            original_width=width,
            original_height=height,
            format=label,
        )

    def apply_operation(self, params: ApplyOperationInput) -> ApplyOperationOutput:
        """Apply one operation to the current image; return the new preview."""
        published = self.runner.run(self.state.apply_published, params.operation)
        current = published.snapshot.current
        preview = self._preview_of(current, params.preview_max_width, params.preview_max_height)
        return ApplyOperationOutput(
            preview_base64=preview,
            new_width=current.size[0],
            new_height=current.size[1],
            operation_id=published.edit.id,
        )

    def _step(self, step, params: HistoryStepInput) -> HistoryStepOutput:
        published = self.runner.run(step)
        current = published.snapshot.current
        preview = self._preview_of(current, params.preview_max_width, params.preview_max_height)
        return HistoryStepOutput(
            changed=published.changed,
            preview_base64=preview,
            width=current.size[0],
            height=current.size[1],
            history=published.history_state,
        )

    def undo(self, params: Optional[HistoryStepInput] = None) -> HistoryStepOutput:
        return self._step(self.state.undo_published, params or HistoryStepInput())

    def redo(self, params: Optional[HistoryStepInput] = None) -> HistoryStepOutput:
        return self._step(self.state.redo_published, params or HistoryStepInput())

    def preview(self, params: PreviewInput) -> PreviewOutput:
        """Render operations over the original image without changing state."""
        operations = [edit.operation for edit in params.operations]
        rendered = self.runner.run(self.state.render, operations)
        preview = self._preview_of(rendered, params.max_width, params.max_height)
        return PreviewOutput(
            preview_base64=preview,
            width=rendered.size[0],
            height=rendered.size[1],
        )

    def export_image(self, params: ExportParams) -> ExportResult:
        """Write the current image; the format follows the path extension."""
        export_format = ExportFormat.from_path(params.output_path)
        current = self.state.require_current()
        file_size = self.runner.run(
            export_image, current, Path(params.output_path), export_format, params.quality
        )
        return ExportResult(
            path=params.output_path,
            file_size=file_size,
            format=export_format.label,
        )

    def history_state(self) -> HistoryState:
        return self.state.history_state()

    def clear(self) -> ClearOutput:
        self.runner.run(self.state.clear)
        return ClearOutput(success=True)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.runner.shutdown()

    def __enter__(self) -> "EditorSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
