"""
Supplier matching models.

Registry records grouped per wholesaler for one active substance,
plus the vendor contact resolved for each group.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass
class VendorContact:
    """A known vendor with a contact email, as held by the vendor store."""
    vendor_id: str
    name: str
    email: str = ""


@dataclass
class DrugEntry:
    drug_name: str
    dosage_form: str
    concentration: str
    registration_number: str
    atc_code: str = ""


@dataclass
class SupplierMatch:
    """All matching drugs supplied by one wholesaler."""
    wholesaler_name: str
    wholesaler_address: str
    wholesaler_license: str = ""
    manufacturer_name: str = ""
    manufacturer_country: str = ""
    drugs: List[DrugEntry] = field(default_factory=list)
    contact: Optional[VendorContact] = None

    @property
    def group_key(self) -> Tuple[str, str]:
        return (self.wholesaler_name, self.wholesaler_address)

    @property
    def product_count(self) -> int:
        return len(self.drugs)
