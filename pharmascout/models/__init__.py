"""
Data models for registry extraction and vendor intelligence.

This module contains pure data classes with no business logic.
"""

from .matching import DrugEntry, SupplierMatch, VendorContact
from .registry import (
    RECORD_FIELDS,
    DrugCellParts,
    ExtractionResult,
    ManufacturerCellParts,
    RawTableRow,
    RegistryRecord,
    WholesalerCellParts,
)
from .vendor import (
    AggregatedSearchResult,
    BusinessType,
    ContactInfo,
    DataQuality,
    InsightSummary,
    ResearchStatus,
    SearchHit,
    VendorCandidate,
    VendorIntelligence,
    VolumeIndicators,
)

__all__ = [
    'RECORD_FIELDS', 'RawTableRow', 'DrugCellParts', 'ManufacturerCellParts',
    'WholesalerCellParts', 'RegistryRecord', 'ExtractionResult',
    'BusinessType', 'DataQuality', 'ResearchStatus', 'SearchHit',
    'VolumeIndicators', 'ContactInfo', 'VendorCandidate', 'InsightSummary',
    'AggregatedSearchResult', 'VendorIntelligence',
    'VendorContact', 'DrugEntry', 'SupplierMatch',
]
