"""Tests for pharmascout/common/config_loader.py"""

import pytest

from pharmascout.common.config_loader import (
    load_config,
    load_known_vendors,
    load_placeholder_email_domains,
    load_registry_config,
    load_search_config,
    load_terminology,
)


class TestLoadConfig:
    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_config("does_not_exist.yaml")


class TestRegistryConfig:
    def test_has_paging_defaults(self):
        config = load_registry_config()
        assert config["page_size"] == 50
        assert config["max_pages"] == 10
        assert config["min_cells"] == 7
        assert config["row_selectors"][0] == "table tbody tr"

    def test_navigation_timeouts(self):
        navigation = load_registry_config()["navigation"]
        assert navigation["timeout_ms"] == 30000
        assert navigation["selector_timeout_ms"] == 5000


class TestTerminology:
    def test_sections_present(self):
        terminology = load_terminology()
        assert terminology["countries"]["Vācija"] == "Germany"
        assert terminology["dosage_forms"]["apvalkotā tablete"] == "coated tablet"
        assert "SIA" in terminology["legal_entity_terms"]
        assert terminology["issuance_procedures"]["Pr."] == "Prescription required"


class TestSearchConfig:
    def test_templates_and_thresholds(self):
        config = load_search_config()
        assert len(config["query_templates"]) == 5
        assert config["data_quality"]["high"] == {"candidates": 15, "sources": 3}
        assert "wikipedia.org" in config["non_commercial_patterns"]


class TestKnownVendors:
    def test_shape(self):
        catalog = load_known_vendors()
        assert set(catalog) == {"medicines", "general"}
        assert "iohexol" in catalog["medicines"]
        assert all("company_name" in entry for entry in catalog["general"])


class TestPlaceholderDomains:
    def test_lowercase_domains(self):
        assert load_placeholder_email_domains() == ["pharma.lv"]
