"""
Data-parallel execution of per-pixel kernels.

Pixel arrays are split along rows into fixed-size, non-overlapping chunks.
Each chunk is processed independently on a thread pool and the results are
stacked back in chunk order, so the output never depends on the number of
threads or on scheduling. numpy releases the GIL inside its array kernels,
which is what lets the threads run concurrently.

Functions:
    configure_parallelism: Set the chunk size and worker count
    map_pixel_chunks: Apply a kernel to an array chunk by chunk
"""

import concurrent.futures
import logging
from typing import Callable, List, Optional

import numpy as np

from IE_Libs.constants import DEFAULT_CHUNK_ROWS

logger = logging.getLogger(__name__)

Kernel = Callable[[np.ndarray], np.ndarray]

_chunk_rows: int = DEFAULT_CHUNK_ROWS
_max_workers: Optional[int] = None


def configure_parallelism(chunk_rows: int = DEFAULT_CHUNK_ROWS, max_workers: Optional[int] = None) -> None:
    """
    Set how pixel arrays are split.

    Args:
        chunk_rows: Number of rows per chunk (must be > 0)
        max_workers: Thread count (None = ThreadPoolExecutor default)

    Raises:
        ValueError: If chunk_rows or max_workers is not positive
    """
    global _chunk_rows, _max_workers

    if chunk_rows <= 0:
        raise ValueError(f"chunk_rows must be > 0, got {chunk_rows}")
    if max_workers is not None and max_workers <= 0:
        raise ValueError(f"max_workers must be > 0, got {max_workers}")

    _chunk_rows = int(chunk_rows)
    _max_workers = max_workers
    logger.debug(f"Pixel parallelism set to {_chunk_rows} rows/chunk, workers={_max_workers}")


def split_rows(array: np.ndarray, chunk_rows: int) -> List[np.ndarray]:
    """Split an array into consecutive row blocks of at most chunk_rows rows."""
    return [array[start:start + chunk_rows] for start in range(0, array.shape[0], chunk_rows)]


def map_pixel_chunks(
    kernel: Kernel,
    array: np.ndarray,
    chunk_rows: Optional[int] = None,
    max_workers: Optional[int] = None,
) -> np.ndarray:
    """
    Apply a row-independent kernel to an array in parallel chunks.

    The kernel must compute each output row from the same input row only,
    and must not modify its input.

    Args:
        kernel: Function mapping an (rows, W, C) array to an array with the
                same number of rows
        array: Input pixel array (H, W, C)
        chunk_rows: Rows per chunk (default: configured value)
        max_workers: Thread count (default: configured value)

    Returns:
        Concatenation of the kernel outputs in row order
    """
    rows = chunk_rows or _chunk_rows
    workers = max_workers or _max_workers

    chunks = split_rows(array, rows)
    if len(chunks) <= 1:
        return kernel(array)

    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        results = list(executor.map(kernel, chunks))

    return np.concatenate(results, axis=0)
