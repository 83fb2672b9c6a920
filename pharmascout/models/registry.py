"""
Registry data models.

Pure data classes for rows scraped from the wholesale permissions
registry and the typed records built from them.
"""

import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List

REGISTRATION_NUMBER_RE = re.compile(r"^N\d{6}-\d{2}$")

# Export column order, mirrors the registry table
RECORD_FIELDS = [
    "drug_name",
    "dosage_form",
    "registration_number",
    "active_ingredient",
    "manufacturer_name",
    "manufacturer_country",
    "atc_code",
    "issuance_procedure",
    "wholesaler_name",
    "wholesaler_address",
    "wholesaler_license",
    "permit_validity",
]


@dataclass
class RawTableRow:
    """One table row as read from the page, before parsing."""
    index: int
    cells: List[str]
    page: int = 1


@dataclass
class DrugCellParts:
    """Parsed drug-info cell: name, dosage form and registration number."""
    drug_name: str
    dosage_form: str = ""
    registration_number: str = ""


@dataclass
class ManufacturerCellParts:
    name: str
    country: str


@dataclass
class WholesalerCellParts:
    name: str
    address: str
    license: str = ""


@dataclass
class RegistryRecord:
    """
    One wholesale permission for a medicinal product.

    The registration number (``N######-##``) identifies a record; repeated
    extraction of the same number replaces the earlier record.
    """
    drug_name: str
    dosage_form: str
    registration_number: str
    active_ingredient: str
    manufacturer_name: str
    manufacturer_country: str
    atc_code: str
    issuance_procedure: str
    wholesaler_name: str
    wholesaler_address: str
    wholesaler_license: str
    permit_validity: str

    @property
    def has_valid_registration_number(self) -> bool:
        return bool(REGISTRATION_NUMBER_RE.match(self.registration_number or ""))

    def to_dict(self) -> Dict[str, str]:
        """Field values in export column order."""
        data = asdict(self)
        return {name: data[name] for name in RECORD_FIELDS}


@dataclass
class ExtractionResult:
    """Outcome of one registry extraction run."""
    records: List[RegistryRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    pages_processed: int = 0
    rows_seen: int = 0
    rows_dropped: int = 0

    @property
    def total_records(self) -> int:
        return len(self.records)

    @property
    def success(self) -> bool:
        return bool(self.records)
