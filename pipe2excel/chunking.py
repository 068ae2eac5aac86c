"""Batch-wise conversion of lines into rows."""

from __future__ import annotations

import asyncio
import logging
from itertools import islice
from typing import Iterable, Iterator, List, Sequence

from .config import DEFAULT_CHUNK_SIZE, DEFAULT_DELIMITER
from .parsing import Row, split_row

logger = logging.getLogger(__name__)


def iter_batches(lines: Iterable[str], chunk_size: int = DEFAULT_CHUNK_SIZE) -> Iterator[List[str]]:
    """Yield consecutive lists of at most ``chunk_size`` lines.

    ``lines`` may be a lazy iterator; only one batch is pulled at a time.
    """

    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    iterator = iter(lines)
    while True:
        batch = list(islice(iterator, chunk_size))
        if not batch:
            return
        yield batch


def _split_batch(batch: Sequence[str], delimiter: str) -> List[Row]:
    return [split_row(line, delimiter) for line in batch]


def process_lines(
    lines: Iterable[str],
    delimiter: str = DEFAULT_DELIMITER,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> List[Row]:
    """Split ``lines`` into rows one batch at a time."""

    rows: List[Row] = []
    batches = 0
    for batch in iter_batches(lines, chunk_size):
        rows.extend(_split_batch(batch, delimiter))
        batches += 1
    logger.debug("Processed %s lines in %s batches of up to %s", len(rows), batches, chunk_size)
    return rows


async def process_lines_async(
    lines: Iterable[str],
    delimiter: str = DEFAULT_DELIMITER,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    yield_every: int = 1,
) -> List[Row]:
    """Asynchronous variant of :func:`process_lines`.

    Control returns to the event loop after every ``yield_every`` batches so
    other tasks keep running during large conversions. The rows produced are
    identical to the synchronous path.
    """

    if yield_every <= 0:
        raise ValueError(f"yield_every must be positive, got {yield_every}")

    rows: List[Row] = []
    for index, batch in enumerate(iter_batches(lines, chunk_size), start=1):
        rows.extend(_split_batch(batch, delimiter))
        if index % yield_every == 0:
            await asyncio.sleep(0)
    return rows


__all__ = ["iter_batches", "process_lines", "process_lines_async"]
