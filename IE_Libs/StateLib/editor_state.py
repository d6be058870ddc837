"""
Editor state: original/current image snapshots plus the undo history.

The original and current images are published together as one immutable
Snapshot. Writers build a new Snapshot and swap the reference in a single
assignment, so readers either see the old pair or the new pair, never a
mix, and a reader holding a Snapshot keeps seeing exactly that Snapshot.
Writers (load, apply, undo, redo, clear) are serialized by a lock; readers
take no lock.

Undo and redo are O(1): the state keeps the (before, after) image pair of
every operation in parallel stacks that move in step with the history and
redo stacks, and swaps between them. Pairs are matched by position, never
by operation id, and pairs evicted with their history entry are released.

Classes:
    Snapshot: Immutable (original, current) pair
    HistoryState: Undo/redo availability summary
    Published: Snapshot and history state produced by one write
    EditorState: The single owner of the editing session's mutable state
"""

import logging
import threading
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from IE_Libs.constants import MAX_DECODED_BYTES, MAX_HISTORY
from IE_Libs.errors import ImageLoadError, StateError
from IE_Libs.ImageEditingLib.image_processor import apply_operation, apply_operations
from IE_Libs.ImageEditingLib.operation_types import EditOperation, OperationType
from IE_Libs.ImageEditingLib.pixel_buffer import normalize_mode
from IE_Libs.StateLib.history_manager import HistoryManager
from IE_Libs.StateLib.image_loader import decode_image_file, format_label

logger = logging.getLogger(__name__)

NO_IMAGE_MESSAGE = "No image loaded"


@dataclass(frozen=True)
class Snapshot:
    original: Optional[Any] = None
    current: Optional[Any] = None

    @property
    def is_empty(self) -> bool:
        return self.current is None


@dataclass(frozen=True)
class HistoryState:
    can_undo: bool
    can_redo: bool
    history_count: int
    redo_count: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Published:
    """Outcome of one write: the snapshot it published and the history after it.

    changed is False when undo or redo had nothing to step.
    """
    snapshot: Snapshot
    history_state: HistoryState
    changed: bool = True
    edit: Optional[EditOperation] = None
    history: Optional[List[EditOperation]] = None


class EditorState:
    """
    Owns the original image, the current image and the undo history.

    Example:
        >>> state = EditorState()
        >>> state.load(Image.new("RGB", (100, 100), "red"))
        >>> state.apply(FilterOperation("invert"))
        >>> state.undo()
        >>> state.current.getpixel((0, 0))
        (255, 0, 0)
    """

    def __init__(self, max_history: int = MAX_HISTORY, max_decoded_bytes: int = MAX_DECODED_BYTES):
        self._snapshot = Snapshot()
        self._history = HistoryManager(max_history)
        self._max_decoded_bytes = max_decoded_bytes
        # (before, after) image pairs, kept in step with the history and redo stacks
        self._undo_images: List[Tuple[Any, Any]] = []
        self._redo_images: List[Tuple[Any, Any]] = []
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """The currently published (original, current) pair."""
        return self._snapshot

    @property
    def original(self) -> Optional[Any]:
        return self._snapshot.original

    @property
    def current(self) -> Optional[Any]:
        return self._snapshot.current

    @property
    def has_image(self) -> bool:
        return not self._snapshot.is_empty

    @property
    def history(self) -> HistoryManager:
        return self._history

    def require_current(self) -> Any:
        """Current image, or StateError if nothing is loaded."""
        current = self._snapshot.current
        if current is None:
            raise StateError(NO_IMAGE_MESSAGE)
        return current

    def history_state(self) -> HistoryState:
        return HistoryState(
            can_undo=self._history.can_undo(),
            can_redo=self._history.can_redo(),
            history_count=self._history.history_count(),
            redo_count=self._history.redo_count(),
        )

    def render(self, operations: Sequence[OperationType]) -> Any:
        """
        Apply operations to the original image without changing state.

        Raises:
            StateError: If no image is loaded
        """
        original = self._snapshot.original
        if original is None:
            raise StateError(NO_IMAGE_MESSAGE)
        return apply_operations(original, operations)

    # ------------------------------------------------------------------
    # Writers
    # ------------------------------------------------------------------

    def load(self, image: Any) -> None:
        """
        Install an already decoded image as both original and current.

        Clears the history and the redo stack.

        Raises:
            ImageLoadError: If image is None (decoding failed upstream)
        """
        if image is None:
            raise ImageLoadError("No decoded image to load")

        image = normalize_mode(image)
        with self._write_lock:
            self._reset_history()
            self._snapshot = Snapshot(original=image, current=image)

        logger.info(f"Loaded image {image.mode} {image.size[0]}x{image.size[1]}")

    def load_file(self, path: Union[str, Path]) -> Tuple[int, int, str]:
        """
        Decode a file and load it.

        Returns:
            (width, height, format_label)
        """
        image = decode_image_file(path, self._max_decoded_bytes)
        self.load(image)
        return image.size[0], image.size[1], format_label(path)

    def apply(self, operation: Union[OperationType, EditOperation]) -> EditOperation:
        """
        Apply an operation to the current image and record it.

        The new image is computed before anything is published; if the
        operation fails the current image and the history are unchanged.

        Args:
            operation: Bare operation, or an EditOperation carrying its own id

        Returns:
            The recorded EditOperation

        Raises:
            StateError: If no image is loaded
            InvalidOperation: If validation fails
            ProcessingError: If the transform fails
        """
        return self.apply_published(operation).edit

    def apply_published(self, operation: Union[OperationType, EditOperation]) -> Published:
        """Like apply(), but also return the snapshot this write published."""
        if isinstance(operation, EditOperation):
            edit = operation
        else:
            edit = EditOperation.create(operation)

        with self._write_lock:
            snapshot = self._snapshot
            if snapshot.current is None:
                raise StateError(NO_IMAGE_MESSAGE)

            result = apply_operation(snapshot.current, edit.operation)

            self._history.add_operation(edit)
            self._undo_images.append((snapshot.current, result))
            self._redo_images.clear()
            evicted = len(self._undo_images) - self._history.history_count()
            if evicted > 0:
                del self._undo_images[:evicted]

            published = Snapshot(original=snapshot.original, current=result)
            self._snapshot = published
            history_state = self.history_state()

        logger.debug(f"Applied {edit.operation.kind} operation {edit.id}")
        return Published(snapshot=published, history_state=history_state, edit=edit)

    def undo(self) -> Optional[List[EditOperation]]:
        """
        Step back one operation.

        Returns:
            Remaining history, or None if there was nothing to undo

        Raises:
            StateError: If no image is loaded
        """
        return self.undo_published().history

    def undo_published(self) -> Published:
        """Like undo(), but also return the snapshot left published."""
        with self._write_lock:
            snapshot = self._snapshot
            if snapshot.current is None:
                raise StateError(NO_IMAGE_MESSAGE)

            remaining = self._history.undo()
            if remaining is None:
                return Published(snapshot=snapshot, history_state=self.history_state(), changed=False)

            before, after = self._undo_images.pop()
            self._redo_images.append((before, after))
            published = Snapshot(original=snapshot.original, current=before)
            self._snapshot = published
            history_state = self.history_state()

        logger.debug(f"Undid operation, {len(remaining)} left in history")
        return Published(snapshot=published, history_state=history_state, history=remaining)

    def redo(self) -> Optional[List[EditOperation]]:
        """
        Re-apply the most recently undone operation.

        Returns:
            Resulting history, or None if there was nothing to redo

        Raises:
            StateError: If no image is loaded
        """
        return self.redo_published().history

    def redo_published(self) -> Published:
        """Like redo(), but also return the snapshot left published."""
        with self._write_lock:
            snapshot = self._snapshot
            if snapshot.current is None:
                raise StateError(NO_IMAGE_MESSAGE)

            history = self._history.redo()
            if history is None:
                return Published(snapshot=snapshot, history_state=self.history_state(), changed=False)

            before, after = self._redo_images.pop()
            self._undo_images.append((before, after))
            published = Snapshot(original=snapshot.original, current=after)
            self._snapshot = published
            history_state = self.history_state()

        logger.debug(f"Redid operation, {len(history)} in history")
        return Published(snapshot=published, history_state=history_state, history=history)

    def clear(self) -> None:
        """Drop both images and all history."""
        with self._write_lock:
            self._reset_history()
            self._snapshot = Snapshot()

        logger.warning("Editor state cleared")

    def _reset_history(self) -> None:
        self._history.clear()
        self._undo_images.clear()
        self._redo_images.clear()
