"""
Registry CSV Exporter

Exports RegistryRecords to a flat CSV with a fixed 12-column header and
loads such files back (used by the matching CLI).
"""

import csv
import io
import logging
import os
from typing import Dict, List, Sequence

from ..common.csv_utils import read_csv, write_csv
from ..models import RECORD_FIELDS, RegistryRecord

logger = logging.getLogger(__name__)

# Column header per record field, in export order
REGISTRY_CSV_HEADERS = [
    'Drug Name',
    'Dosage Form',
    'Registration Number',
    'Active Ingredient',
    'Manufacturer Name',
    'Manufacturer Country',
    'ATC Code',
    'Issuance Procedure',
    'Wholesaler Name',
    'Wholesaler Address',
    'Wholesaler License',
    'Permit Validity',
]

_HEADER_TO_FIELD = dict(zip(REGISTRY_CSV_HEADERS, RECORD_FIELDS))


class RegistryCSVExporter:
    """
    Writes and reads registry CSV files.

    Usage:
        exporter = RegistryCSVExporter()
        exporter.export(records, "output/latvia_registry.csv")
        records = exporter.load("output/latvia_registry.csv")
    """

    def __init__(self):
        self.fieldnames = REGISTRY_CSV_HEADERS

    def record_to_row(self, record: RegistryRecord) -> Dict[str, str]:
        values = record.to_dict()
        return {header: values[name] for header, name in _HEADER_TO_FIELD.items()}

    def export(self, records: Sequence[RegistryRecord], output_path: str) -> int:
        """
        Export records to CSV. The header is written even for no records.

        Returns:
            Number of rows written
        """
        os.makedirs(os.path.dirname(output_path) or '.', exist_ok=True)
        count = write_csv(output_path, [self.record_to_row(r) for r in records],
                          fieldnames=self.fieldnames)
        logger.info("Wrote %d registry records to %s", count, output_path)
        return count

    def to_csv_string(self, records: Sequence[RegistryRecord]) -> str:
        """Render records as CSV text (header included)."""
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=self.fieldnames, lineterminator='\n')
        writer.writeheader()
        for record in records:
            writer.writerow(self.record_to_row(record))
        return buffer.getvalue()

    def load(self, input_path: str) -> List[RegistryRecord]:
        """
        Load records from a CSV written by ``export``.

        Raises:
            ValueError: If the header does not match the registry layout
        """
        records = []
        for row in read_csv(input_path):
            missing = [h for h in REGISTRY_CSV_HEADERS if h not in row]
            if missing:
                raise ValueError(f"{input_path}: missing columns {', '.join(missing)}")
            records.append(RegistryRecord(**{
                name: (row[header] or '') for header, name in _HEADER_TO_FIELD.items()
            }))
        return records
