"""
Registry Statistics and Search

In-memory summaries and lookups over extracted RegistryRecords: counts,
top manufacturers and wholesalers, ATC category distribution, filtered
search and per-wholesaler product counts.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Tuple

from ..models import RegistryRecord

ATC_CATEGORIES = {
    'A': 'Alimentary tract and metabolism',
    'B': 'Blood and blood forming organs',
    'C': 'Cardiovascular system',
    'D': 'Dermatologicals',
    'G': 'Genito-urinary system and sex hormones',
    'H': 'Systemic hormonal preparations',
    'J': 'Antiinfectives for systemic use',
    'L': 'Antineoplastic and immunomodulating agents',
    'M': 'Musculo-skeletal system',
    'N': 'Nervous system',
    'P': 'Antiparasitic products',
    'R': 'Respiratory system',
    'S': 'Sensory organs',
    'V': 'Various',
}

SEARCH_FIELDS = {
    'all': ('drug_name', 'active_ingredient', 'atc_code', 'manufacturer_name', 'wholesaler_name'),
    'drug_name': ('drug_name',),
    'atc_code': ('atc_code',),
    'manufacturer': ('manufacturer_name',),
    'wholesaler': ('wholesaler_name',),
}


def atc_category_name(atc_code: str) -> str:
    """First-level ATC group name for a code (e.g. 'N02BE01' -> 'Nervous system')."""
    if not atc_code:
        return 'Unknown'
    return ATC_CATEGORIES.get(atc_code.strip()[:1].upper(), 'Unknown')


@dataclass
class RegistryStats:
    total_drugs: int = 0
    total_manufacturers: int = 0
    total_wholesalers: int = 0
    top_manufacturers: List[Tuple[str, int]] = field(default_factory=list)
    top_wholesalers: List[Tuple[str, int]] = field(default_factory=list)
    atc_distribution: List[Dict[str, object]] = field(default_factory=list)


def _top(counter: Counter, limit: int) -> List[Tuple[str, int]]:
    # Ties ordered by name so output does not depend on input order
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))[:limit]


def registry_stats(records: Sequence[RegistryRecord], top_n: int = 10) -> RegistryStats:
    """
    Summarize a set of registry records.

    Args:
        records: Extracted records
        top_n: Number of manufacturers/wholesalers to list

    Returns:
        RegistryStats with counts, top lists and ATC distribution
    """
    manufacturers = Counter(r.manufacturer_name for r in records)
    wholesalers = Counter(r.wholesaler_name for r in records)
    atc_prefixes = Counter((r.atc_code.strip()[:1].upper() or '?') for r in records)

    return RegistryStats(
        total_drugs=len(records),
        total_manufacturers=len(manufacturers),
        total_wholesalers=len(wholesalers),
        top_manufacturers=_top(manufacturers, top_n),
        top_wholesalers=_top(wholesalers, top_n),
        atc_distribution=[
            {'code': prefix, 'name': atc_category_name(prefix), 'count': count}
            for prefix, count in sorted(atc_prefixes.items())
        ],
    )


def search_records(
    records: Iterable[RegistryRecord],
    query: str = "",
    search_type: str = "all",
    limit: int = 20,
    offset: int = 0,
) -> Tuple[List[RegistryRecord], int]:
    """
    Case-insensitive substring search over registry records.

    Args:
        records: Records to search
        query: Search text (empty matches everything)
        search_type: One of 'all', 'drug_name', 'atc_code', 'manufacturer', 'wholesaler'
        limit: Page size (1-100)
        offset: Number of matches to skip

    Returns:
        (page of matching records sorted by drug name, total match count)

    Raises:
        ValueError: On unknown search type or out-of-range paging
    """
    if search_type not in SEARCH_FIELDS:
        supported = ', '.join(SEARCH_FIELDS)
        raise ValueError(f"Unknown search type: {search_type}. Supported: {supported}")
    if not 1 <= limit <= 100:
        raise ValueError(f"limit must be within 1..100 (got {limit})")
    if offset < 0:
        raise ValueError(f"offset must be >= 0 (got {offset})")

    needle = query.strip().lower()
    fields = SEARCH_FIELDS[search_type]
    matches = [
        r for r in records
        if not needle or any(needle in getattr(r, name).lower() for name in fields)
    ]
    matches.sort(key=lambda r: (r.drug_name.lower(), r.registration_number))
    return matches[offset:offset + limit], len(matches)


@dataclass
class WholesalerSummary:
    name: str
    address: str
    license: str
    product_count: int


def list_wholesalers(records: Iterable[RegistryRecord]) -> List[WholesalerSummary]:
    """Distinct wholesalers with their product counts, largest first."""
    counts = Counter((r.wholesaler_name, r.wholesaler_address, r.wholesaler_license) for r in records)
    return [
        WholesalerSummary(name=name, address=address, license=license, product_count=count)
        for (name, address, license), count in sorted(
            counts.items(), key=lambda item: (-item[1], item[0]))
    ]
