"""
Pipeline entry points.

Each entry point wires configuration, clients and stores together and
returns a result object. Unit-level failures (pages, adapters, stored
items) come back as error strings; only invalid arguments raise.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from .common.settings import Settings
from .discovery import GoogleSearchAdapter, VendorAggregator, build_adapters
from .discovery.signals import SearchHeuristics
from .extraction.clients import get_table_client
from .extraction.registry_extractor import ExtractorConfig, RegistryExtractor
from .intelligence.researcher import VendorResearcher
from .matching.supplier_matcher import SupplierMatcher
from .models import (
    AggregatedSearchResult,
    ExtractionResult,
    RegistryRecord,
    SupplierMatch,
    VendorIntelligence,
)
from .storage import StorageError

logger = logging.getLogger(__name__)


@dataclass
class SyncReport:
    """Outcome of writing records to a RegistryStore."""
    synced: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.synced + self.failed


def extract_registry(
    max_pages: Optional[int] = None,
    page_size: Optional[int] = None,
    delay_ms: Optional[int] = None,
    client: str = "http",
    config: Optional[ExtractorConfig] = None,
) -> ExtractionResult:
    """
    Extract registry records with a named table client ('http' or 'browser').

    Raises:
        ValueError: On an unknown client or invalid limits
    """
    config = config or ExtractorConfig.from_config()
    kwargs = {'user_agent': config.user_agent} if config.user_agent else {}
    with get_table_client(client, **kwargs) as table_client:
        extractor = RegistryExtractor(table_client, config=config)
        return extractor.extract(max_pages=max_pages, page_size=page_size, delay_ms=delay_ms)


def sync_registry_records(records: Iterable[RegistryRecord], store) -> SyncReport:
    """Upsert records into a RegistryStore, skipping items the store rejects."""
    report = SyncReport()
    for record in records:
        try:
            store.upsert(record)
            report.synced += 1
        except (StorageError, ValueError) as e:
            report.failed += 1
            error_msg = f"{record.registration_number or record.drug_name}: {type(e).__name__}: {str(e)[:100]}"
            report.errors.append(error_msg)
            logger.error("Sync failed for %s", error_msg)
    logger.info("Synced %d record(s), %d failed", report.synced, report.failed)
    return report


def research_vendor(
    name: str,
    country: Optional[str] = None,
    known_website: Optional[str] = None,
    store=None,
    settings: Optional[Settings] = None,
    force: bool = False,
) -> VendorIntelligence:
    """
    Research one vendor. Website discovery needs Google credentials.

    Raises:
        ValueError: If name is empty
    """
    settings = settings or Settings.from_env()
    search_adapter = None
    if settings.has_google:
        search_adapter = GoogleSearchAdapter(settings.google_api_key, settings.google_search_engine_id)
    researcher = VendorResearcher(search_adapter, store=store)
    return researcher.research(name, country=country, known_website=known_website, force=force)


def aggregate_vendor_search(
    medicine_name: str,
    dosage: Optional[str] = None,
    country: Optional[str] = None,
    search_depth: int = 3,
    settings: Optional[Settings] = None,
    adapter_names: Optional[Sequence[str]] = None,
) -> AggregatedSearchResult:
    """
    Search every configured source for vendors of a medicine.

    Raises:
        ValueError: On an empty name, invalid depth, unknown adapter names
            or when no adapter is available
    """
    settings = settings or Settings.from_env()
    heuristics = SearchHeuristics.from_config()
    adapters, llm_client = build_adapters(settings, adapter_names, heuristics)
    aggregator = VendorAggregator(adapters, llm_client, heuristics)
    return aggregator.aggregate(medicine_name, dosage=dosage, country=country, search_depth=search_depth)


def match_product_to_suppliers(
    active_substance: str,
    dosage_form: Optional[str] = None,
    records: Iterable[RegistryRecord] = (),
    vendor_store=None,
) -> List[SupplierMatch]:
    """
    Wholesalers carrying a substance, with resolved vendor contacts.

    Raises:
        ValueError: If active_substance is empty
    """
    matcher = SupplierMatcher(vendor_store)
    return matcher.match(records, active_substance, dosage_form)
