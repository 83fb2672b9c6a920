"""
CSV Utilities

Reading and writing CSV files with large-field support.
"""

import csv
from pathlib import Path
from typing import Dict, Iterator, List, Optional


def configure_csv(field_size_limit: int = 10 * 1024 * 1024) -> None:
    """
    Configure CSV module for large fields (long address / permit cells).

    Args:
        field_size_limit: Maximum field size in bytes (default: 10MB)
    """
    csv.field_size_limit(field_size_limit)


def read_csv(file_path: str | Path, encoding: str = 'utf-8') -> Iterator[Dict[str, str]]:
    """
    Read CSV file and yield rows as dictionaries keyed by header.

    Args:
        file_path: Path to CSV file
        encoding: File encoding (default: utf-8)
    """
    configure_csv()

    with open(file_path, 'r', encoding=encoding, newline='') as f:
        yield from csv.DictReader(f)


def write_csv(
    file_path: str | Path,
    rows: List[Dict[str, str]],
    fieldnames: Optional[List[str]] = None,
    encoding: str = 'utf-8'
) -> int:
    """
    Write rows to CSV file.

    The header is always written when ``fieldnames`` is given, even for an
    empty row list, so downstream tools see a stable column layout.

    Args:
        file_path: Path to output CSV file
        rows: List of dictionaries to write
        fieldnames: Column names (if None, uses keys from first row)
        encoding: File encoding (default: utf-8)

    Returns:
        Number of rows written
    """
    if fieldnames is None:
        if not rows:
            return 0
        fieldnames = list(rows[0].keys())

    with open(file_path, 'w', encoding=encoding, newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(rows)

    return len(rows)
