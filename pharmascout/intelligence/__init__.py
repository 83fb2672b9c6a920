"""
Vendor intelligence: classification and per-vendor research.
"""

from .classifier import (
    BULK_SUPPLIER,
    MID_SIZE_DISTRIBUTOR,
    SMALL_RETAILER,
    Classification,
    calculate_confidence,
    classify_vendor,
    company_size,
    score_vendor,
)
from .researcher import VendorResearcher

__all__ = [
    'BULK_SUPPLIER',
    'MID_SIZE_DISTRIBUTOR',
    'SMALL_RETAILER',
    'Classification',
    'classify_vendor',
    'score_vendor',
    'calculate_confidence',
    'company_size',
    'VendorResearcher',
]
