"""
Known Vendor Catalog Adapter

Serves curated vendor entries from config/known_vendors.yaml: entries
whose keyword occurs in the medicine name, plus general distributors
that apply to every medicine.
"""

import logging
from typing import Any, Dict, List, Optional

from ..common.config_loader import load_known_vendors
from ..models import BusinessType, VendorCandidate, VolumeIndicators
from .base import SearchAdapter

logger = logging.getLogger(__name__)


def _entry_to_candidate(entry: Dict[str, Any], source: str) -> VendorCandidate:
    return VendorCandidate(
        company_name=entry['company_name'],
        website=entry.get('website'),
        snippet=entry.get('snippet', ''),
        business_type=BusinessType.parse(entry.get('business_type')),
        confidence=float(entry.get('confidence', 0.8)),
        volume_indicators=VolumeIndicators(
            bulk_supplier=entry.get('bulk_supplier', True),
            serves_hospitals=entry.get('serves_hospitals', True),
            international_shipping=entry.get('international_shipping', True),
        ),
        certifications=set(entry.get('certifications', [])),
        source=source,
    )


class KnownVendorsAdapter(SearchAdapter):
    """
    Curated vendors keyed by medicine keyword.

    The query is matched case-insensitively against catalog keywords, so
    a search variant such as "iohexol 300 mg wholesale supplier" still
    hits the "iohexol" entries.
    """

    name = "known_vendors"
    per_variant = False
    remote = False

    def __init__(self, catalog: Optional[Dict[str, Any]] = None):
        catalog = catalog if catalog is not None else load_known_vendors()
        self.medicines: Dict[str, List[Dict[str, Any]]] = {
            keyword.lower(): entries for keyword, entries in (catalog.get('medicines') or {}).items()
        }
        self.general: List[Dict[str, Any]] = list(catalog.get('general') or [])

    def _search(self, query: str, locale: Optional[str]) -> List[VendorCandidate]:
        lower_query = (query or '').lower()
        entries: List[Dict[str, Any]] = []
        for keyword, keyword_entries in self.medicines.items():
            if keyword in lower_query:
                entries.extend(keyword_entries)
        entries.extend(self.general)
        candidates = [_entry_to_candidate(entry, self.name) for entry in entries]
        logger.debug("known_vendors: %d candidates for %r", len(candidates), query)
        return candidates
