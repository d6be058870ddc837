"""
Worker pool for CPU-bound editor tasks.

Decode, transform, resize, encode and file I/O run on a bounded
ThreadPoolExecutor so the control thread only waits on futures. Failures
raised inside a task are converted at this boundary: editor errors pass
through unchanged, anything else becomes a ProcessingError chained to the
original exception.
"""

import concurrent.futures
import logging
from typing import Any, Callable, Optional

from IE_Libs.errors import EditorError, ProcessingError

logger = logging.getLogger(__name__)


def _guarded(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    try:
        return fn(*args, **kwargs)
    except EditorError:
        raise
    except Exception as e:
        name = getattr(fn, "__name__", repr(fn))
        logger.exception(f"Worker task {name} failed")
        raise ProcessingError(f"{type(e).__name__}: {e}") from e


class TaskRunner:
    """
    Bounded thread pool returning futures.

    Example:
        >>> with TaskRunner(max_workers=2) as runner:
        ...     future = runner.submit(decode, path)
        ...     image = future.result()
        ...     preview = runner.run(resize_to_fit, image, 800, 600)
    """

    def __init__(self, max_workers: Optional[int] = None, thread_name_prefix: str = "editor-worker"):
        if max_workers is not None and max_workers <= 0:
            raise ValueError(f"max_workers must be > 0, got {max_workers}")
        self._executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix=thread_name_prefix,
        )
        self._closed = False

    def submit(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> concurrent.futures.Future:
        """
        Schedule fn(*args, **kwargs) on the pool.

        Returns:
            Future whose result() re-raises failures as EditorError subclasses

        Raises:
            RuntimeError: If the runner has been shut down
        """
        if self._closed:
            raise RuntimeError("TaskRunner has been shut down")
        return self._executor.submit(_guarded, fn, *args, **kwargs)

    def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Submit fn and wait for its result."""
        return self.submit(fn, *args, **kwargs).result()

    def shutdown(self, wait: bool = True) -> None:
        if not self._closed:
            self._closed = True
            self._executor.shutdown(wait=wait)
            logger.debug("Task runner shut down")

    def __enter__(self) -> "TaskRunner":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
