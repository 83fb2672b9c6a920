"""
Vendor Researcher

Gathers intelligence about a single vendor:
1. Find the official website (web search, unless already known)
2. Scrape the homepage for vendor signals
3. Classify and score the result

Research results are kept in an IntelligenceStore. Completed research is
reused for 30 days; failed research keeps its error and is retried on the
next call.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Optional, Tuple

import requests
from bs4 import BeautifulSoup

from ..discovery.base import ADAPTER_ERRORS
from ..discovery.google import GoogleSearchAdapter
from ..discovery.signals import (
    detect_business_type,
    detect_client_types,
    detect_geographic_coverage,
    extract_contact_info,
    extract_employee_count,
    extract_location_count,
    extract_minimum_order_qty,
    find_certifications,
    is_non_commercial,
)
from ..models import BusinessType, ResearchStatus, VendorIntelligence
from ..storage import StorageError
from .classifier import calculate_confidence, classify_vendor, company_size

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
WEBSITE_RESULT_COUNT = 5

# Failures that end a research attempt as Failed
SCRAPE_ERRORS = (
    requests.exceptions.RequestException,
    UnicodeDecodeError,
)


class VendorResearcher:
    """
    Researches vendors and records the outcome.

    Usage:
        researcher = VendorResearcher(google_adapter, store=store)
        intel = researcher.research("Tamro", country="Latvia")
    """

    def __init__(
        self,
        search_adapter: Optional[GoogleSearchAdapter] = None,
        store=None,
        session: Optional[requests.Session] = None,
        timeout: float = 15.0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            search_adapter: Web search used for website discovery; None
                disables discovery (known websites are still scraped)
            store: IntelligenceStore for caching results (optional)
            session: requests session used for scraping
            timeout: Page fetch timeout in seconds
            clock: Current time source
        """
        self.search_adapter = search_adapter
        self.store = store
        self.session = session or requests.Session()
        self.session.headers.setdefault('User-Agent', DEFAULT_USER_AGENT)
        self.timeout = timeout
        self.clock = clock
        if search_adapter is None:
            logger.warning("No web search configured - website discovery disabled")

    def research(self, vendor_name: str, country: Optional[str] = None,
                 known_website: Optional[str] = None, force: bool = False) -> VendorIntelligence:
        """
        Research a vendor, reusing fresh stored results unless ``force``.

        Raises:
            ValueError: If vendor_name is empty
        """
        if not vendor_name or not vendor_name.strip():
            raise ValueError("vendor_name must not be empty")
        vendor_name = vendor_name.strip()

        if self.store is not None and not force:
            existing = self._load(vendor_name)
            if existing is not None and existing.is_fresh(self.clock()):
                logger.info("Using cached research for %s (%s)", vendor_name, existing.researched_at)
                return existing

        intel = VendorIntelligence(vendor_name=vendor_name, research_status=ResearchStatus.IN_PROGRESS)
        self._save(intel)
        logger.info("Researching vendor: %s", vendor_name)

        sources = []
        website = known_website
        if not website:
            website = self.find_official_website(vendor_name, country)
            if website:
                sources.append('GoogleSearch')

        try:
            if website:
                intel = self._apply_signals(intel, self.scrape_website(website))
                sources.append('Website')
        except SCRAPE_ERRORS as e:
            error_msg = f"{type(e).__name__}: {str(e)[:100]}"
            logger.error("Research failed for %s: %s", vendor_name, error_msg)
            intel = replace(
                intel,
                official_website=website,
                data_source=','.join(sources),
                research_status=ResearchStatus.FAILED,
                researched_at=self.clock(),
                research_error=error_msg,
            )
            self._save(intel)
            return intel

        classification = classify_vendor(replace(intel, official_website=website))
        intel = replace(
            intel,
            official_website=website,
            company_size=company_size(intel.employee_count),
            supplier_classification=classification.label,
            classification_score=classification.score,
            data_source=','.join(sources),
            research_status=ResearchStatus.COMPLETED,
            researched_at=self.clock(),
            research_error=None,
        )
        intel.confidence_score = calculate_confidence(intel)

        logger.info("Research complete: %s -> %s (score %d, confidence %.0f%%)",
                    vendor_name, intel.supplier_classification, intel.classification_score,
                    intel.confidence_score * 100)
        self._save(intel)
        return intel

    def find_official_website(self, vendor_name: str, country: Optional[str] = None) -> Optional[str]:
        """First commercial search result for the vendor, or None."""
        if self.search_adapter is None:
            return None
        query = f"{vendor_name} {country} pharmaceutical wholesale" if country else \
            f"{vendor_name} pharmaceutical wholesale"
        try:
            hits = self.search_adapter.search_hits(query, WEBSITE_RESULT_COUNT)
        except ADAPTER_ERRORS as e:
            logger.warning("Website search failed for %s: %s: %s", vendor_name, type(e).__name__, str(e)[:100])
            return None
        for hit in hits:
            if not is_non_commercial(hit.url, self.search_adapter.heuristics):
                logger.debug("Official website for %s: %s", vendor_name, hit.url)
                return hit.url
        return None

    def scrape_website(self, url: str) -> Tuple[str, BeautifulSoup]:
        """
        Fetch a page and return its visible text and parsed soup.

        Raises:
            requests.exceptions.RequestException: On transport or HTTP errors
        """
        response = self.session.get(url, timeout=self.timeout)
        response.raise_for_status()
        soup = BeautifulSoup(response.text, 'lxml')
        for element in soup(['script', 'style', 'noscript']):
            element.decompose()
        body = soup.body or soup
        return body.get_text(" "), soup

    @staticmethod
    def _apply_signals(intel: VendorIntelligence, page: Tuple[str, BeautifulSoup]) -> VendorIntelligence:
        text, soup = page
        lower_text = text.lower()
        business_type = detect_business_type(lower_text)
        contact = extract_contact_info(text, soup)
        return replace(
            intel,
            business_type=business_type.value if business_type != BusinessType.UNKNOWN else None,
            employee_count=extract_employee_count(lower_text),
            minimum_order_qty=extract_minimum_order_qty(lower_text),
            number_of_locations=extract_location_count(lower_text),
            geographic_coverage=detect_geographic_coverage(lower_text),
            certifications_found=find_certifications(text),
            primary_client_types=detect_client_types(lower_text),
            contact_email=contact.email,
            contact_phone=contact.phone,
        )

    def _load(self, vendor_name: str) -> Optional[VendorIntelligence]:
        try:
            return self.store.get(vendor_name)
        except StorageError as e:
            logger.error("Could not load research for %s: %s: %s", vendor_name, type(e).__name__, str(e)[:100])
            return None

    def _save(self, intel: VendorIntelligence) -> None:
        """Persist progress; a store failure does not discard the research."""
        if self.store is None:
            return
        try:
            self.store.upsert(intel)
        except StorageError as e:
            logger.error("Could not save research for %s: %s: %s", intel.vendor_name, type(e).__name__, str(e)[:100])
