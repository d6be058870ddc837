"""
Undo/redo ledger.

HistoryManager keeps two stacks of EditOperation: the applied history and
the redo stack. It never touches pixels; recomputing the current image on
undo or redo is the editor state's job.

Invariants:
    - len(history) <= max_history, oldest entries evicted first
    - the redo stack is empty right after add_operation() or clear()
"""

import logging
import threading
from typing import List, Optional

from IE_Libs.constants import MAX_HISTORY
from IE_Libs.ImageEditingLib.operation_types import EditOperation

logger = logging.getLogger(__name__)


class HistoryManager:
    """
    Bounded undo/redo stacks.

    Example:
        >>> history = HistoryManager()
        >>> history.add_operation(op)
        >>> history.undo()        # -> [] (remaining history)
        >>> history.redo()        # -> [op]
        >>> history.undo(); history.undo()   # second undo -> None
    """

    def __init__(self, max_history: int = MAX_HISTORY):
        if max_history <= 0:
            raise ValueError(f"max_history must be > 0, got {max_history}")
        self.max_history = max_history
        self._history: List[EditOperation] = []
        self._redo_stack: List[EditOperation] = []
        self._lock = threading.Lock()

    def add_operation(self, operation: EditOperation) -> List[EditOperation]:
        """
        Record a newly applied operation.

        Clears the redo stack and evicts the oldest entry when the history
        exceeds max_history.

        Returns:
            Copy of the resulting history
        """
        with self._lock:
            self._redo_stack.clear()
            self._history.append(operation)
            if len(self._history) > self.max_history:
                evicted = self._history.pop(0)
                logger.debug(f"History full, evicted operation {evicted.id}")
            return list(self._history)

    def undo(self) -> Optional[List[EditOperation]]:
        """
        Move the newest history entry onto the redo stack.

        Returns:
            Copy of the remaining history, or None if there was nothing to undo
        """
        with self._lock:
            if not self._history:
                return None
            self._redo_stack.append(self._history.pop())
            return list(self._history)

    def redo(self) -> Optional[List[EditOperation]]:
        """
        Move the newest redo entry back onto the history.

        Returns:
            Copy of the resulting history, or None if there was nothing to redo
        """
        with self._lock:
            if not self._redo_stack:
                return None
            self._history.append(self._redo_stack.pop())
            return list(self._history)

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
            self._redo_stack.clear()

    def history(self) -> List[EditOperation]:
        with self._lock:
            return list(self._history)

    def redo_stack(self) -> List[EditOperation]:
        with self._lock:
            return list(self._redo_stack)

    def history_count(self) -> int:
        with self._lock:
            return len(self._history)

    def redo_count(self) -> int:
        with self._lock:
            return len(self._redo_stack)

    def can_undo(self) -> bool:
        return self.history_count() > 0

    def can_redo(self) -> bool:
        return self.redo_count() > 0

    def peek_undo(self) -> Optional[EditOperation]:
        """Newest history entry, or None."""
        with self._lock:
            return self._history[-1] if self._history else None

    def peek_redo(self) -> Optional[EditOperation]:
        """Newest redo entry, or None."""
        with self._lock:
            return self._redo_stack[-1] if self._redo_stack else None
