"""
Supplier Matcher

Finds registry records for a product's active substance, groups them by
wholesaler and resolves each wholesaler to a known vendor contact.

Contact resolution, first successful strategy wins:
1. Exact name match on the raw or quote-stripped wholesaler name
2. Case-insensitive exact match on the quote-stripped name
3. Vendor name contains the cleaned wholesaler name, or equals it with
   spaces replaced by underscores
4. Vendor name contains the first token of the cleaned name

Each strategy only accepts vendors whose email is not on a placeholder
domain. If none qualifies, strategies 3-4 are retried accepting any vendor.
"""

import logging
import re
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ..common.config_loader import load_placeholder_email_domains
from ..common.text_utils import strip_quotes
from ..extraction.parsers.field_parser import extract_concentration
from ..models import DrugEntry, RegistryRecord, SupplierMatch, VendorContact

logger = logging.getLogger(__name__)

NameMatcher = Callable[[str, str], bool]


def clean_wholesaler_name(name: str) -> str:
    """Drop all quote characters and collapse whitespace."""
    return strip_quotes(name or "")


def matches_substance(record: RegistryRecord, active_substance: str,
                      dosage_form: Optional[str] = None) -> bool:
    substance = active_substance.strip().lower()
    ingredient = (record.active_ingredient or "").lower()
    if substance not in ingredient:
        return False
    if dosage_form:
        return dosage_form.strip().lower() in (record.dosage_form or "").lower()
    return True


class SupplierMatcher:
    """
    Groups registry matches per wholesaler and attaches vendor contacts.

    Usage:
        matcher = SupplierMatcher(vendor_store)
        matches = matcher.match(records, "Ibuprofenum")
    """

    def __init__(self, vendor_store=None, placeholder_domains: Optional[Sequence[str]] = None):
        """
        Args:
            vendor_store: VendorStore providing all_vendors(); None skips
                contact resolution
            placeholder_domains: Email domains that are not real contacts
                (default: config/matching.yaml)
        """
        self.vendor_store = vendor_store
        if placeholder_domains is None:
            placeholder_domains = load_placeholder_email_domains()
        self.placeholder_domains = tuple(d.lower().lstrip('@') for d in placeholder_domains)

    def match(self, records: Iterable[RegistryRecord], active_substance: str,
              dosage_form: Optional[str] = None) -> List[SupplierMatch]:
        """
        Select, group and resolve suppliers for a substance.

        Output order depends only on the selected records, not on their
        input order.

        Raises:
            ValueError: If active_substance is empty
        """
        if not active_substance or not active_substance.strip():
            raise ValueError("active_substance must not be empty")

        selected = [r for r in records if matches_substance(r, active_substance, dosage_form)]
        groups: Dict[tuple, List[RegistryRecord]] = {}
        for record in selected:
            groups.setdefault((record.wholesaler_name, record.wholesaler_address), []).append(record)

        vendors = self._vendors()
        matches = []
        for key in sorted(groups):
            group_records = sorted(groups[key], key=lambda r: (r.registration_number, r.drug_name))
            first = group_records[0]
            supplier = SupplierMatch(
                wholesaler_name=first.wholesaler_name,
                wholesaler_address=first.wholesaler_address,
                wholesaler_license=first.wholesaler_license,
                manufacturer_name=first.manufacturer_name,
                manufacturer_country=first.manufacturer_country,
                drugs=self._drug_entries(group_records),
                contact=self.resolve_contact(first.wholesaler_name, vendors),
            )
            matches.append(supplier)

        logger.info("%s: %d registry matches from %d wholesalers",
                    active_substance, len(selected), len(matches))
        return matches

    @staticmethod
    def _drug_entries(records: Sequence[RegistryRecord]) -> List[DrugEntry]:
        entries = []
        seen = set()
        for record in records:
            if record.registration_number in seen:
                continue
            seen.add(record.registration_number)
            entries.append(DrugEntry(
                drug_name=record.drug_name,
                dosage_form=record.dosage_form,
                concentration=extract_concentration(record.drug_name),
                registration_number=record.registration_number,
                atc_code=record.atc_code,
            ))
        return entries

    def _vendors(self) -> List[VendorContact]:
        if self.vendor_store is None:
            return []
        return sorted(self.vendor_store.all_vendors(), key=lambda v: (v.name, v.vendor_id))

    def is_placeholder_email(self, email: str) -> bool:
        domain = (email or "").rpartition('@')[2].lower()
        return not domain or domain in self.placeholder_domains

    def resolve_contact(self, wholesaler_name: str,
                        vendors: Optional[Sequence[VendorContact]] = None) -> Optional[VendorContact]:
        """Vendor contact for a wholesaler name, or None."""
        if vendors is None:
            vendors = self._vendors()
        if not vendors or not wholesaler_name:
            return None

        raw = wholesaler_name.strip()
        clean = clean_wholesaler_name(raw)
        clean_lower = clean.lower()
        underscore = re.sub(r"\s+", "_", clean_lower)
        first_token = clean_lower.split(' ')[0] if clean_lower else ""

        strategies: List[NameMatcher] = [
            lambda name, lower: name in (raw, clean),
            lambda name, lower: lower == clean_lower,
            lambda name, lower: bool(clean_lower) and (clean_lower in lower or lower == underscore),
            lambda name, lower: bool(first_token) and first_token in lower,
        ]

        real = [v for v in vendors if not self.is_placeholder_email(v.email)]
        for index, strategy in enumerate(strategies, 1):
            vendor = self._first(real, strategy)
            if vendor is not None:
                logger.debug("Contact for %r: %s (strategy %d)", wholesaler_name, vendor.name, index)
                return vendor

        for strategy in strategies[2:]:
            vendor = self._first(vendors, strategy)
            if vendor is not None:
                logger.debug("Contact for %r: %s (placeholder email)", wholesaler_name, vendor.name)
                return vendor

        logger.debug("No vendor found for %r", wholesaler_name)
        return None

    @staticmethod
    def _first(vendors: Sequence[VendorContact], strategy: NameMatcher) -> Optional[VendorContact]:
        for vendor in vendors:
            if strategy(vendor.name, vendor.name.lower()):
                return vendor
        return None
