"""Tests for pharmascout/extraction/registry_stats.py"""

import pytest

from pharmascout.extraction.registry_stats import (
    atc_category_name,
    list_wholesalers,
    registry_stats,
    search_records,
)


@pytest.fixture
def records(record_factory):
    return [
        record_factory(),
        record_factory(drug_name="Ibuprofen 200mg", registration_number="N000111-02",
                       active_ingredient="Ibuprofenum", atc_code="M01AE01"),
        record_factory(drug_name="Amoxicillin 500 mg", registration_number="N765432-10",
                       active_ingredient="Amoxicillinum", atc_code="J01CA04",
                       manufacturer_name="Sandoz", wholesaler_name="Tamro",
                       wholesaler_address="Rīga, Noliktavu iela 5", wholesaler_license="L00042"),
    ]


class TestAtcCategoryName:
    def test_known_group(self):
        assert atc_category_name("N02BE01") == "Nervous system"

    def test_unknown(self):
        assert atc_category_name("") == "Unknown"
        assert atc_category_name("Z99") == "Unknown"


class TestRegistryStats:
    def test_counts(self, records):
        stats = registry_stats(records)
        assert stats.total_drugs == 3
        assert stats.total_manufacturers == 2
        assert stats.total_wholesalers == 2
        assert stats.top_wholesalers[0] == ("Pharma Plus", 2)

    def test_atc_distribution(self, records):
        codes = {entry["code"]: entry["count"] for entry in registry_stats(records).atc_distribution}
        assert codes == {"J": 1, "M": 1, "N": 1}

    def test_empty(self):
        stats = registry_stats([])
        assert stats.total_drugs == 0
        assert stats.top_manufacturers == []


class TestSearchRecords:
    def test_all_fields(self, records):
        page, total = search_records(records, "tamro")
        assert total == 1
        assert page[0].drug_name == "Amoxicillin 500 mg"

    def test_by_atc_code(self, records):
        page, total = search_records(records, "m01", search_type="atc_code")
        assert total == 1
        assert page[0].registration_number == "N000111-02"

    def test_paging(self, records):
        page, total = search_records(records, "", limit=2, offset=2)
        assert total == 3
        assert len(page) == 1

    def test_unknown_search_type(self, records):
        with pytest.raises(ValueError, match="Unknown search type"):
            search_records(records, "x", search_type="address")

    def test_limit_bounds(self, records):
        with pytest.raises(ValueError):
            search_records(records, "x", limit=0)
        with pytest.raises(ValueError):
            search_records(records, "x", limit=101)


class TestListWholesalers:
    def test_product_counts(self, records):
        summaries = list_wholesalers(records)
        assert [(s.name, s.product_count) for s in summaries] == [("Pharma Plus", 2), ("Tamro", 1)]
