"""
Registry Extractor

Extracts wholesale permission records from the registry's paginated HTML
table.

Features:
- Page 1 is read first to learn the total record count and plan pages
- Remaining pages load on a small bounded worker pool
- Shared rate limiter enforces a fixed delay between page loads
- Rows are parsed, normalized and validated; bad rows become error strings
- Results are merged in page order after all workers finish, upserting
  records by registration number
"""

from __future__ import annotations

import dataclasses
import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

from ..common.config_loader import load_registry_config
from ..common.rate_limit import RateLimiter
from ..models import ExtractionResult, RawTableRow, RegistryRecord
from .clients import PageHandle, TableClient, TableClientError
from .normalizer import TerminologyNormalizer
from .parsers.field_parser import (
    DEFAULT_DOSAGE_FORM_PATTERNS,
    DEFAULT_ISSUANCE,
    build_drug_rules,
    parse_row,
)
from .validator import RegistryRecordValidator

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://dati.zva.gov.lv/zr-n-permissions/"
DEFAULT_ROW_SELECTORS = [
    'table tbody tr',
    '.dataTables_wrapper table tbody tr',
    '[role="grid"] tbody tr',
    '.table-responsive table tbody tr',
    'table.dataTable tbody tr',
]


@dataclass
class ExtractorConfig:
    """Registry extraction settings (defaults mirror config/registry.yaml)."""
    base_url: str = DEFAULT_BASE_URL
    page_size: int = 50
    max_pages: int = 10
    delay_ms: int = 1000
    max_workers: int = 2
    min_cells: int = 7
    wait_until: str = "networkidle"
    timeout_ms: int = 30000
    selector_timeout_ms: int = 5000
    row_selectors: List[str] = field(default_factory=lambda: list(DEFAULT_ROW_SELECTORS))
    dosage_form_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_DOSAGE_FORM_PATTERNS))
    default_issuance: str = DEFAULT_ISSUANCE
    user_agent: str = ""

    def __post_init__(self):
        for name in ('page_size', 'max_pages', 'max_workers', 'min_cells'):
            if getattr(self, name) < 1:
                raise ValueError(f"{name} must be >= 1 (got {getattr(self, name)})")
        for name in ('delay_ms', 'timeout_ms', 'selector_timeout_ms'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0 (got {getattr(self, name)})")
        if not self.row_selectors:
            raise ValueError("row_selectors must not be empty")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExtractorConfig":
        navigation = data.get('navigation', {}) or {}
        defaults = cls()
        return cls(
            base_url=data.get('base_url', defaults.base_url),
            page_size=data.get('page_size', defaults.page_size),
            max_pages=data.get('max_pages', defaults.max_pages),
            delay_ms=data.get('delay_ms', defaults.delay_ms),
            max_workers=data.get('max_workers', defaults.max_workers),
            min_cells=data.get('min_cells', defaults.min_cells),
            wait_until=navigation.get('wait_until', defaults.wait_until),
            timeout_ms=navigation.get('timeout_ms', defaults.timeout_ms),
            selector_timeout_ms=navigation.get('selector_timeout_ms', defaults.selector_timeout_ms),
            row_selectors=data.get('row_selectors') or defaults.row_selectors,
            dosage_form_patterns=data.get('dosage_form_patterns') or defaults.dosage_form_patterns,
            default_issuance=data.get('default_issuance', defaults.default_issuance),
            user_agent=data.get('user_agent', defaults.user_agent),
        )

    @classmethod
    def from_config(cls) -> "ExtractorConfig":
        return cls.from_dict(load_registry_config())

    def page_url(self, page: int) -> str:
        separator = '&' if '?' in self.base_url else '?'
        return f"{self.base_url}{separator}{urlencode({'page': page, 'pageSize': self.page_size})}"


@dataclass
class PageResult:
    """Outcome of one page, merged after all pages finish."""
    page: int
    records: List[RegistryRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    rows_seen: int = 0
    rows_dropped: int = 0
    total_records: Optional[int] = None
    loaded: bool = False


class RegistryExtractor:
    """
    Extracts RegistryRecords through a TableClient.

    Usage:
        with HttpTableClient() as client:
            extractor = RegistryExtractor(client)
            result = extractor.extract(max_pages=5)
        print(result.total_records, result.errors)
    """

    def __init__(
        self,
        client: TableClient,
        normalizer: Optional[TerminologyNormalizer] = None,
        config: Optional[ExtractorConfig] = None,
    ):
        self.client = client
        self.normalizer = normalizer or TerminologyNormalizer()
        self.config = config or ExtractorConfig.from_config()
        self._drug_rules = build_drug_rules(self.config.dosage_form_patterns)
        self.start_time = None

    def extract(
        self,
        max_pages: Optional[int] = None,
        page_size: Optional[int] = None,
        delay_ms: Optional[int] = None,
    ) -> ExtractionResult:
        """
        Extract records from up to ``max_pages`` registry pages.

        Args:
            max_pages: Page limit (default from config)
            page_size: Records per page requested from the registry
            delay_ms: Minimum delay between page loads in milliseconds

        Returns:
            ExtractionResult with valid records and error strings

        Raises:
            ValueError: If a limit is invalid
        """
        config = self.config
        overrides = {k: v for k, v in
                     (('max_pages', max_pages), ('page_size', page_size), ('delay_ms', delay_ms))
                     if v is not None}
        if overrides:
            config = dataclasses.replace(config, **overrides)

        self.start_time = time.monotonic()
        limiter = RateLimiter.from_millis(config.delay_ms)

        first = self._extract_page(1, config, limiter)
        total_pages = self._plan_pages(first, config)
        logger.info("Extracting %d page(s) from %s", total_pages, config.base_url)

        page_results = [first]
        remaining = list(range(2, total_pages + 1))
        if remaining:
            workers = config.max_workers if self.client.thread_safe else 1
            if workers == 1:
                page_results.extend(self._extract_page(p, config, limiter) for p in remaining)
            else:
                with ThreadPoolExecutor(max_workers=workers) as pool:
                    futures = [pool.submit(self._extract_page, p, config, limiter) for p in remaining]
                    for future in as_completed(futures):
                        page_results.append(future.result())

        result = self._merge(page_results)
        elapsed = time.monotonic() - self.start_time
        logger.info("Extracted %d records from %d page(s) in %.1fs (%d errors)",
                    result.total_records, result.pages_processed, elapsed, len(result.errors))
        return result

    def _plan_pages(self, first: PageResult, config: ExtractorConfig) -> int:
        if first.total_records:
            needed = math.ceil(first.total_records / config.page_size)
            return max(1, min(needed, config.max_pages))
        return config.max_pages

    def _extract_page(self, page: int, config: ExtractorConfig, limiter: RateLimiter) -> PageResult:
        """Load one page and process its rows. Never raises for page-level failures."""
        result = PageResult(page=page)
        url = config.page_url(page)
        handle: Optional[PageHandle] = None

        limiter.wait()
        logger.info("Page %d: %s", page, url)
        try:
            handle = self.client.navigate(url, config.wait_until, config.timeout_ms)
            cells = self.client.read_rows(handle, config.row_selectors, config.selector_timeout_ms)
            result.total_records = self.client.total_records(handle)
            result.loaded = True
        except TableClientError as e:
            error_msg = f"Page {page}: {type(e).__name__}: {str(e)[:100]}"
            logger.error("%s", error_msg)
            result.errors.append(error_msg)
            return result
        finally:
            if handle is not None:
                self.client.release(handle)

        rows = [RawTableRow(index=i, cells=row, page=page) for i, row in enumerate(cells)]
        self._process_rows(rows, config, result)
        logger.debug("Page %d: %d rows, %d records", page, result.rows_seen, len(result.records))
        return result

    def _process_rows(self, rows: List[RawTableRow], config: ExtractorConfig, result: PageResult) -> None:
        for row in rows:
            result.rows_seen += 1
            record = self.process_row(row, config, result.errors)
            if record is None:
                result.rows_dropped += 1
            else:
                result.records.append(record)

    def process_row(self, row: RawTableRow, config: ExtractorConfig,
                    errors: List[str]) -> Optional[RegistryRecord]:
        """
        Parse, normalize and validate one row.

        Appends exactly one error string to ``errors`` when the row yields
        no record.
        """
        location = f"Page {row.page} row {row.index}"
        if len(row.cells) < config.min_cells:
            error_msg = f"{location}: expected at least {config.min_cells} cells, got {len(row.cells)}"
            logger.warning("%s", error_msg)
            errors.append(error_msg)
            return None

        try:
            draft = parse_row(row.cells, self._drug_rules, config.default_issuance)
            record = self.normalizer.normalize_record(draft)
        except (ValueError, TypeError, AttributeError, IndexError) as e:
            error_msg = f"{location}: {type(e).__name__}: {str(e)[:100]}"
            logger.error("%s", error_msg)
            errors.append(error_msg)
            return None

        validation = RegistryRecordValidator(record).validate()
        if not validation['valid']:
            error_msg = f"{location}: dropped ({'; '.join(validation['errors'])})"
            logger.warning("%s", error_msg)
            errors.append(error_msg)
            return None

        for warning in validation['warnings']:
            logger.debug("%s (%s): %s", location, record.registration_number, warning)
        return record

    @staticmethod
    def _merge(page_results: List[PageResult]) -> ExtractionResult:
        """Combine page results in page order, upserting by registration number."""
        merged = ExtractionResult()
        by_registration: Dict[str, RegistryRecord] = {}

        for page_result in sorted(page_results, key=lambda r: r.page):
            merged.errors.extend(page_result.errors)
            merged.rows_seen += page_result.rows_seen
            merged.rows_dropped += page_result.rows_dropped
            if page_result.loaded:
                merged.pages_processed += 1
            for record in page_result.records:
                by_registration[record.registration_number] = record

        merged.records = list(by_registration.values())
        return merged
