"""
Registry Table Parser

Reads data rows out of registry HTML with BeautifulSoup. Used by the
plain HTTP client; the browser client reads the same selectors from the
live DOM.
"""

import re
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup

from ...common.text_utils import join_lines

TOTAL_RECORDS_PATTERNS = [
    re.compile(r"(\d+)\s+entries\s+selected", re.IGNORECASE),
    re.compile(r"showing\s+\d+\s+to\s+\d+\s+of\s+(\d+)", re.IGNORECASE),
    re.compile(r"of\s+(\d+)\s+entries", re.IGNORECASE),
    re.compile(r"total[:\s]+(\d+)", re.IGNORECASE),
]


class RegistryTableParser:
    """
    Extracts cell text from registry table rows.

    Usage:
        parser = RegistryTableParser(html)
        rows = parser.extract_rows(['table tbody tr'])
        total = parser.extract_total_records()
    """

    def __init__(self, html: str):
        self.soup = BeautifulSoup(html, 'lxml')

    def extract_rows(self, selectors: Sequence[str]) -> Optional[List[List[str]]]:
        """
        Read rows using the first selector that matches anything.

        Args:
            selectors: CSS selectors for table rows, in priority order

        Returns:
            List of rows (each a list of cell strings), or None if no
            selector matched
        """
        for selector in selectors:
            rows = self.soup.select(selector)
            if rows:
                return [self._row_cells(row) for row in rows]
        return None

    def extract_total_records(self) -> Optional[int]:
        """Total record count from the table footer, if the page shows one."""
        text = self.soup.get_text(" ")
        for pattern in TOTAL_RECORDS_PATTERNS:
            match = pattern.search(text)
            if match:
                return int(match.group(1))
        return None

    @staticmethod
    def _row_cells(row) -> List[str]:
        cells = row.find_all(['td', 'th'], recursive=False) or row.find_all('td')
        # Newline separator keeps <br>-split words apart
        return [join_lines(cell.get_text("\n")) for cell in cells]
