"""
Registry extraction.

Modules:
    clients - HTTP and headless-browser table clients
    normalizer - TerminologyNormalizer for Latvian -> English vocabulary
    validator - RegistryRecordValidator for record schema checks
    registry_extractor - RegistryExtractor with paging and bounded workers
    registry_stats - statistics, search and wholesaler listing over records
    parsers - field and table parsers
"""

from .clients import (
    CLIENTS,
    BrowserTableClient,
    HttpTableClient,
    NavigationError,
    PageHandle,
    SelectorNotFound,
    TableClient,
    TableClientError,
    get_table_client,
)
from .normalizer import TerminologyNormalizer, TerminologyTables
from .registry_extractor import ExtractorConfig, RegistryExtractor
from .registry_stats import (
    atc_category_name,
    list_wholesalers,
    registry_stats,
    search_records,
)
from .validator import RegistryRecordValidator

__all__ = [
    'CLIENTS',
    'TableClient',
    'TableClientError',
    'NavigationError',
    'SelectorNotFound',
    'PageHandle',
    'HttpTableClient',
    'BrowserTableClient',
    'get_table_client',
    'TerminologyNormalizer',
    'TerminologyTables',
    'RegistryRecordValidator',
    'ExtractorConfig',
    'RegistryExtractor',
    'atc_category_name',
    'registry_stats',
    'search_records',
    'list_wholesalers',
]
