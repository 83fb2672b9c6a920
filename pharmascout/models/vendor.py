"""
Vendor data models.

Search hits, vendor candidates from search sources, the aggregated
search result, and per-vendor intelligence produced by research.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, List, Optional, Set

from ..common.text_utils import collapse_whitespace, normalize_domain

RESEARCH_MAX_AGE = timedelta(days=30)


class BusinessType(str, Enum):
    MANUFACTURER = "Manufacturer"
    DISTRIBUTOR = "Distributor"
    WHOLESALER = "Wholesaler"
    RETAILER = "Retailer"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "BusinessType":
        """Lenient lookup by value (case-insensitive); unknown text maps to UNKNOWN."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return cls.UNKNOWN
        text = value.strip().lower()
        for member in cls:
            if member.value.lower() == text:
                return member
        return cls.UNKNOWN


class DataQuality(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ResearchStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"


@dataclass
class SearchHit:
    """One organic result from a web search engine."""
    title: str
    url: str
    snippet: str = ""


@dataclass
class VolumeIndicators:
    bulk_supplier: bool = False
    minimum_order_qty: Optional[str] = None
    serves_hospitals: bool = False
    international_shipping: bool = False


@dataclass
class ContactInfo:
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


@dataclass
class VendorCandidate:
    """A potential vendor surfaced by one search source."""
    company_name: str
    website: Optional[str] = None
    snippet: str = ""
    business_type: BusinessType = BusinessType.UNKNOWN
    confidence: float = 0.5
    volume_indicators: VolumeIndicators = field(default_factory=VolumeIndicators)
    certifications: Set[str] = field(default_factory=set)
    contact_info: ContactInfo = field(default_factory=ContactInfo)
    source: str = ""

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1] (got {self.confidence})")

    @property
    def domain(self) -> Optional[str]:
        return normalize_domain(self.website)

    @property
    def dedup_key(self) -> str:
        """Website domain, falling back to the normalized company name."""
        return self.domain or collapse_whitespace(self.company_name).lower()


@dataclass
class InsightSummary:
    summary: str
    market_analysis: str = ""
    recommendations: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    next_steps: List[str] = field(default_factory=list)


@dataclass
class AggregatedSearchResult:
    """Merged, deduplicated vendor candidates for one medicine query."""
    medicine_name: str
    search_query: str
    candidates: List[VendorCandidate] = field(default_factory=list)
    candidates_by_source: Dict[str, int] = field(default_factory=dict)
    candidates_by_type: Dict[str, List[VendorCandidate]] = field(default_factory=dict)
    insights: Optional[InsightSummary] = None
    data_quality: DataQuality = DataQuality.LOW
    sources_used: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    search_time: float = 0.0

    @property
    def total_found(self) -> int:
        return len(self.candidates)


@dataclass
class VendorIntelligence:
    """
    Research findings and classification for one vendor.

    Lifecycle: Pending -> InProgress -> Completed | Failed. Completed
    records are reused while fresh; Failed records keep the error and may
    be researched again.
    """
    vendor_name: str
    business_type: Optional[str] = None
    company_size: Optional[str] = None
    employee_count: Optional[int] = None
    minimum_order_qty: Optional[int] = None
    number_of_locations: Optional[int] = None
    geographic_coverage: Optional[str] = None
    certifications_found: List[str] = field(default_factory=list)
    primary_client_types: List[str] = field(default_factory=list)
    supplier_classification: Optional[str] = None
    classification_score: int = 0
    confidence_score: float = 0.0
    official_website: Optional[str] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    data_source: str = ""
    research_status: ResearchStatus = ResearchStatus.PENDING
    researched_at: Optional[datetime] = None
    research_error: Optional[str] = None

    def is_fresh(self, now: Optional[datetime] = None,
                 max_age: timedelta = RESEARCH_MAX_AGE) -> bool:
        """True for completed research younger than ``max_age``."""
        if self.research_status != ResearchStatus.COMPLETED or self.researched_at is None:
            return False
        now = now or datetime.now()
        return now - self.researched_at < max_age
