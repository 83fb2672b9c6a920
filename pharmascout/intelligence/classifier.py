"""
Vendor Classifier

Deterministic scoring of VendorIntelligence signals into a supplier
scale label, plus a completeness-based confidence score.

Point values:
    MOQ >= 1000 +3, >= 5000 +2 more; MOQ < 100 -2
    employees > 50 +2, > 100 +2 more; employees < 10 -2
    locations > 1 +2, > 5 +2 more
    business type: wholesale +3, distributor +2, manufacturer +2,
                   retail -2, pharmacy -2
    coverage: International +2, Regional +1, Local -1
    >= 2 certifications +2, GDP +1, GMP +1
    clients: Hospitals +2, Clinics +1

Labels: score >= 5 Bulk Supplier, >= 2 Mid-size Distributor, else
Small Retailer.
"""

from dataclasses import dataclass
from typing import Optional

from ..models import VendorIntelligence

BULK_SUPPLIER = "Bulk Supplier"
MID_SIZE_DISTRIBUTOR = "Mid-size Distributor"
SMALL_RETAILER = "Small Retailer"

BULK_SUPPLIER_MIN_SCORE = 5
MID_SIZE_MIN_SCORE = 2

CONFIDENCE_FIELDS = (
    'business_type',
    'employee_count',
    'minimum_order_qty',
    'number_of_locations',
    'geographic_coverage',
    'certifications_found',
    'primary_client_types',
    'official_website',
)


@dataclass(frozen=True)
class Classification:
    label: str
    score: int


def score_vendor(intel: VendorIntelligence) -> int:
    """Signed classification score; pure function of the input signals."""
    score = 0
    moq = intel.minimum_order_qty
    employees = intel.employee_count
    locations = intel.number_of_locations
    business_type = (intel.business_type or "").lower()
    certifications = intel.certifications_found or []
    clients = intel.primary_client_types or []

    # Scale
    if moq:
        if moq >= 1000:
            score += 3
        if moq >= 5000:
            score += 2
        if moq < 100:
            score -= 2
    if employees:
        if employees > 50:
            score += 2
        if employees > 100:
            score += 2
        if employees < 10:
            score -= 2
    if locations:
        if locations > 1:
            score += 2
        if locations > 5:
            score += 2

    # Declared business type
    if 'wholesale' in business_type:
        score += 3
    if 'distributor' in business_type:
        score += 2
    if 'manufacturer' in business_type:
        score += 2
    if 'retail' in business_type:
        score -= 2
    if 'pharmacy' in business_type:
        score -= 2

    # Reach
    if intel.geographic_coverage == 'International':
        score += 2
    elif intel.geographic_coverage == 'Regional':
        score += 1
    elif intel.geographic_coverage == 'Local':
        score -= 1

    # Compliance
    if len(certifications) >= 2:
        score += 2
    if 'GDP' in certifications:
        score += 1
    if 'GMP' in certifications:
        score += 1

    # Clientele
    if 'Hospitals' in clients:
        score += 2
    if 'Clinics' in clients:
        score += 1

    return score


def label_for_score(score: int) -> str:
    if score >= BULK_SUPPLIER_MIN_SCORE:
        return BULK_SUPPLIER
    if score >= MID_SIZE_MIN_SCORE:
        return MID_SIZE_DISTRIBUTOR
    return SMALL_RETAILER


def classify_vendor(intel: VendorIntelligence) -> Classification:
    score = score_vendor(intel)
    return Classification(label=label_for_score(score), score=score)


def calculate_confidence(intel: VendorIntelligence) -> float:
    """Fraction of the checklist fields that are populated (0-1)."""
    filled = sum(1 for name in CONFIDENCE_FIELDS if getattr(intel, name))
    return filled / len(CONFIDENCE_FIELDS)


def company_size(employee_count: Optional[int]) -> Optional[str]:
    """Small (<10), Medium (<=100) or Large (>100) by headcount."""
    if not employee_count:
        return None
    if employee_count < 10:
        return "Small"
    if employee_count <= 100:
        return "Medium"
    return "Large"
