"""Line and row level parsing of delimited text."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence

import numpy as np

from .config import DEFAULT_DELIMITER
from .errors import EmptyInputError

logger = logging.getLogger(__name__)

Row = List[str]


def iter_lines(raw_text: str) -> Iterator[str]:
    """Lazily yield trimmed, non-blank lines of ``raw_text``.

    Both ``\\n`` and ``\\r\\n`` line endings are accepted. Lines are produced
    one at a time, so no list of all lines is held in memory.
    """

    start = 0
    length = len(raw_text)
    while start <= length:
        end = raw_text.find("\n", start)
        if end == -1:
            end = length
        line = raw_text[start:end].strip()
        if line:
            yield line
        start = end + 1


def tokenize_lines(raw_text: str, document_name: Optional[str] = None) -> List[str]:
    """Split ``raw_text`` into trimmed, non-blank lines.

    Raises :class:`EmptyInputError` when nothing remains after trimming.
    """

    lines = list(iter_lines(raw_text))
    if not lines:
        raise EmptyInputError(document_name)
    return lines


def split_row(line: str, delimiter: str = DEFAULT_DELIMITER) -> Row:
    """Split one line on every ``delimiter`` and trim each cell.

    There is no quoting or escaping; leading and trailing delimiters yield
    empty cells at those positions.
    """

    return [cell.strip() for cell in line.split(delimiter)]


def check_column_consistency(
    rows: Sequence[Row],
    sample_size: int,
    document_name: Optional[str] = None,
) -> Optional[str]:
    """Return a warning when the first ``sample_size`` rows differ in width.

    The check is advisory; callers keep the rows either way.
    """

    sample = rows[:sample_size]
    if len(sample) < 2:
        return None

    counts = np.fromiter((len(row) for row in sample), dtype=np.int64, count=len(sample))
    low, high = int(counts.min()), int(counts.max())
    if low == high:
        return None

    label = f"'{document_name}'" if document_name else "input"
    message = (
        f"Inconsistent column counts in {label}: first {len(sample)} rows "
        f"have between {low} and {high} columns"
    )
    logger.warning(message)
    return message


def check_input_size(raw_text: str, limit: int, document_name: Optional[str] = None) -> Optional[str]:
    """Return a warning when ``raw_text`` is longer than ``limit`` characters."""

    size = len(raw_text)
    if limit <= 0 or size <= limit:
        return None
    label = f"'{document_name}'" if document_name else "input"
    message = f"Large input {label}: {size:,} characters; conversion may be slow"
    logger.warning(message)
    return message


__all__ = [
    "Row",
    "check_column_consistency",
    "check_input_size",
    "iter_lines",
    "split_row",
    "tokenize_lines",
]
