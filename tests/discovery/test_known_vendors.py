"""Tests for pharmascout/discovery/known_vendors.py"""

from pharmascout.discovery.known_vendors import KnownVendorsAdapter
from pharmascout.models import BusinessType

CATALOG = {
    "medicines": {
        "Iohexol": [
            {"company_name": "GE Healthcare", "website": "https://www.gehealthcare.com",
             "business_type": "Manufacturer", "confidence": 0.95, "certifications": ["GMP"]},
        ],
    },
    "general": [
        {"company_name": "McKesson", "business_type": "Distributor", "international_shipping": False},
    ],
}


class TestKnownVendorsAdapter:
    def test_keyword_in_query(self):
        candidates = KnownVendorsAdapter(CATALOG).search("iohexol 300 mg wholesale supplier")
        assert [c.company_name for c in candidates] == ["GE Healthcare", "McKesson"]
        assert candidates[0].business_type == BusinessType.MANUFACTURER
        assert candidates[0].confidence == 0.95
        assert candidates[0].certifications == {"GMP"}

    def test_general_entries_always_apply(self):
        candidates = KnownVendorsAdapter(CATALOG).search("paracetamol")
        assert [c.company_name for c in candidates] == ["McKesson"]
        assert candidates[0].confidence == 0.8
        assert not candidates[0].volume_indicators.international_shipping

    def test_called_once_and_local(self):
        assert KnownVendorsAdapter.per_variant is False
        assert KnownVendorsAdapter.remote is False

    def test_bundled_catalog_loads(self):
        candidates = KnownVendorsAdapter().search("Iohexol")
        assert any(c.company_name == "GE Healthcare" for c in candidates)
