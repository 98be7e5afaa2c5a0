"""CSV output for scraped records."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any, TextIO

logger = logging.getLogger(__name__)


def write_rows(
    destination: str | Path | TextIO, rows: Iterable[Sequence[Any]]
) -> int:
    """Write each record as one CSV row, in order.

    Args:
        destination: A file path (created or truncated) or an open text
            stream.
        rows: Row sequences. Records that are not sequences are written as a
            single-cell row.

    Returns:
        Number of rows written.
    """
    if isinstance(destination, (str, Path)):
        with open(destination, "w", newline="", encoding="utf-8") as f:
            return write_rows(f, rows)

    writer = csv.writer(destination)
    count = 0
    for row in rows:
        if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
            row = [row]
        writer.writerow(row)
        count += 1
    logger.debug(f"Wrote {count} rows")
    return count
