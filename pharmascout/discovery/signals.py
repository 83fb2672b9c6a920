"""
Vendor Text Signals

Heuristic extraction of vendor signals from search snippets and website
text: business type, volume indicators, certifications, staff size,
minimum order quantity, locations, coverage, client types and contacts.
Also converts raw search hits into VendorCandidates.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple
from urllib.parse import urlparse

from ..common.config_loader import load_search_config
from ..common.text_utils import collapse_whitespace
from ..models import (
    BusinessType,
    ContactInfo,
    SearchHit,
    VendorCandidate,
    VolumeIndicators,
)

DEFAULT_CERTIFICATIONS = ['GDP', 'GMP', 'ISO 9001', 'ISO 13485', 'ISO 14001', 'HACCP', 'CE']

DEFAULT_BUSINESS_TYPE_KEYWORDS: List[Tuple[str, List[str]]] = [
    ('Wholesaler', ['wholesale', 'wholesaler']),
    ('Distributor', ['distributor', 'distribution']),
    ('Manufacturer', ['manufacturer', 'manufacturing', 'pharma factory']),
    ('Retailer', ['pharmacy', 'drugstore', 'retail']),
    ('Wholesaler', ['bulk supplier', 'b2b']),
    ('Distributor', ['supply chain', 'logistics']),
]

EMPLOYEE_PATTERNS = [
    re.compile(r"(\d+)\+?\s*employees", re.IGNORECASE),
    re.compile(r"team\s+of\s+(\d+)", re.IGNORECASE),
    re.compile(r"staff\s+of\s+(\d+)", re.IGNORECASE),
    re.compile(r"(\d+)\+?\s*people", re.IGNORECASE),
]

MOQ_PATTERNS = [
    re.compile(r"moq[:\s]+(\d+)", re.IGNORECASE),
    re.compile(r"minimum\s+order[:\s]+(\d+)", re.IGNORECASE),
    re.compile(r"minimum\s+quantity[:\s]+(\d+)", re.IGNORECASE),
]

LOCATION_PATTERNS = [
    re.compile(r"(\d+)\s+(?:locations|warehouses|facilities|offices)", re.IGNORECASE),
    re.compile(r"(?:locations|warehouses|facilities|offices)[:\s]+(\d+)", re.IGNORECASE),
]

COVERAGE_KEYWORDS = [
    ('International', ('international', 'worldwide', 'global')),
    ('Regional', ('regional', 'europe', 'baltic')),
    ('Local', ('local', 'city')),
]

CLIENT_TYPES = ['Hospitals', 'Clinics', 'Pharmacies', 'Laboratories', 'Healthcare Centers']

EMAIL_PATTERN = re.compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}")
PHONE_PATTERN = re.compile(r"(?:\+?\d{1,3}[-.\s]?)?(?:\(\d{2,4}\)|\d{2,4})[-.\s]?\d{3}[-.\s]?\d{3,4}")

ADDRESS_SELECTORS = ['.address', '[itemprop="address"]', '.contact-address', '.company-address']


@dataclass(frozen=True)
class SearchHeuristics:
    """Keyword lists and thresholds used to interpret search results."""
    non_commercial_patterns: Tuple[str, ...] = ()
    document_extensions: Tuple[str, ...] = ('.pdf', '.doc', '.rtf', '.ppt')
    business_type_keywords: Tuple[Tuple[str, Tuple[str, ...]], ...] = tuple(
        (label, tuple(words)) for label, words in DEFAULT_BUSINESS_TYPE_KEYWORDS)
    certifications: Tuple[str, ...] = tuple(DEFAULT_CERTIFICATIONS)
    query_templates: Tuple[str, ...] = ()
    web_hit_confidence: float = 0.6
    result_count: int = 10
    request_timeout: float = 10.0
    delay_ms: int = 1000
    max_workers: int = 4
    enrich_top_n: int = 20
    data_quality: Dict[str, Dict[str, int]] = field(default_factory=lambda: {
        'high': {'candidates': 15, 'sources': 3},
        'medium': {'candidates': 8, 'sources': 2},
    })

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchHeuristics":
        defaults = cls()
        keywords = data.get('business_type_keywords')
        return cls(
            non_commercial_patterns=tuple(data.get('non_commercial_patterns', []) or []),
            document_extensions=tuple(data.get('document_extensions') or defaults.document_extensions),
            business_type_keywords=(
                tuple((label, tuple(words)) for label, words in keywords)
                if keywords else defaults.business_type_keywords
            ),
            certifications=tuple(data.get('certifications') or defaults.certifications),
            query_templates=tuple(data.get('query_templates', []) or []),
            web_hit_confidence=float(data.get('web_hit_confidence', defaults.web_hit_confidence)),
            result_count=int(data.get('result_count', defaults.result_count)),
            request_timeout=float(data.get('request_timeout', defaults.request_timeout)),
            delay_ms=int(data.get('delay_ms', defaults.delay_ms)),
            max_workers=int(data.get('max_workers', defaults.max_workers)),
            enrich_top_n=int(data.get('enrich_top_n', defaults.enrich_top_n)),
            data_quality=data.get('data_quality') or defaults.data_quality,
        )

    @classmethod
    def from_config(cls) -> "SearchHeuristics":
        return cls.from_dict(load_search_config())


def is_non_commercial(url: str, heuristics: SearchHeuristics) -> bool:
    """True for encyclopedia, government, academic and document URLs."""
    lower_url = (url or '').lower()
    if not lower_url:
        return True
    path = urlparse(lower_url).path
    if any(path.endswith(ext) for ext in heuristics.document_extensions):
        return True
    return any(pattern in lower_url for pattern in heuristics.non_commercial_patterns)


def extract_company_name(title: str, url: str) -> str:
    """Title text before the first '-' or '|', else the domain's first label."""
    match = re.match(r"^([^-|]+)", title or "")
    if match and match.group(1).strip():
        return collapse_whitespace(match.group(1))
    host = (urlparse(url).hostname or "") if url else ""
    if host.startswith("www."):
        host = host[4:]
    return host.split(".")[0] if host else ""


def detect_business_type(text: str, heuristics: Optional[SearchHeuristics] = None) -> BusinessType:
    """First keyword group (in priority order) present in the text decides."""
    groups = heuristics.business_type_keywords if heuristics else DEFAULT_BUSINESS_TYPE_KEYWORDS
    lower_text = (text or "").lower()
    for label, keywords in groups:
        if any(keyword in lower_text for keyword in keywords):
            return BusinessType.parse(label)
    return BusinessType.UNKNOWN


def _first_int(text: str, patterns: Sequence[re.Pattern]) -> Optional[int]:
    for pattern in patterns:
        match = pattern.search(text or "")
        if match:
            return int(match.group(1))
    return None


def extract_employee_count(text: str) -> Optional[int]:
    return _first_int(text, EMPLOYEE_PATTERNS)


def extract_minimum_order_qty(text: str) -> Optional[int]:
    return _first_int(text, MOQ_PATTERNS)


def extract_location_count(text: str) -> Optional[int]:
    return _first_int(text, LOCATION_PATTERNS)


def detect_geographic_coverage(text: str) -> Optional[str]:
    lower_text = (text or "").lower()
    for label, keywords in COVERAGE_KEYWORDS:
        if any(keyword in lower_text for keyword in keywords):
            return label
    return None


def detect_client_types(text: str) -> List[str]:
    lower_text = (text or "").lower()
    return [client for client in CLIENT_TYPES if client.lower() in lower_text]


def find_certifications(text: str, certifications: Sequence[str] = DEFAULT_CERTIFICATIONS) -> List[str]:
    """
    Certifications mentioned in the text, as whole words.

    Letter-only codes (GDP, CE) must appear in upper case; codes with
    numbers (ISO 9001) match in any case.
    """
    found = []
    for cert in certifications:
        flags = re.IGNORECASE if any(ch.isdigit() for ch in cert) else 0
        pattern = r"(?<![\w])" + re.escape(cert).replace(r"\ ", r"\s*") + r"(?![\w])"
        if re.search(pattern, text or "", flags):
            found.append(cert)
    return found


def detect_volume_indicators(text: str) -> VolumeIndicators:
    lower_text = (text or "").lower()
    moq = extract_minimum_order_qty(lower_text)
    return VolumeIndicators(
        bulk_supplier='bulk' in lower_text or 'wholesale quantities' in lower_text,
        minimum_order_qty=str(moq) if moq is not None else None,
        serves_hospitals='hospital' in lower_text or 'healthcare facilities' in lower_text,
        international_shipping=(
            'international' in lower_text or 'worldwide' in lower_text
            or 'global shipping' in lower_text
        ),
    )


def extract_contact_info(text: str, soup=None) -> ContactInfo:
    """Email and phone from text; address from common page elements if a soup is given."""
    email = EMAIL_PATTERN.search(text or "")
    phone = PHONE_PATTERN.search(text or "")
    address = None
    if soup is not None:
        for selector in ADDRESS_SELECTORS:
            element = soup.select_one(selector)
            if element and element.get_text(strip=True):
                address = collapse_whitespace(element.get_text(" "))
                break
    return ContactInfo(
        email=email.group(0) if email else None,
        phone=collapse_whitespace(phone.group(0)) if phone else None,
        address=address,
    )


def candidate_from_hit(hit: SearchHit, source: str, heuristics: SearchHeuristics) -> Optional[VendorCandidate]:
    """
    Convert a web search hit into a VendorCandidate.

    Returns:
        Candidate, or None when no company name can be derived
    """
    company_name = extract_company_name(hit.title, hit.url)
    if not company_name:
        return None
    text = f"{hit.title} {hit.snippet}"
    return VendorCandidate(
        company_name=company_name,
        website=hit.url or None,
        snippet=hit.snippet,
        business_type=detect_business_type(text, heuristics),
        confidence=heuristics.web_hit_confidence,
        volume_indicators=detect_volume_indicators(text),
        certifications=set(find_certifications(text, heuristics.certifications)),
        contact_info=extract_contact_info(hit.snippet),
        source=source,
    )
