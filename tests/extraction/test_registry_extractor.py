"""Tests for pharmascout/extraction/registry_extractor.py"""

import pytest

from pharmascout.extraction.clients import NavigationError, SelectorNotFound
from pharmascout.extraction.registry_extractor import ExtractorConfig, RegistryExtractor
from pharmascout.models import RawTableRow


@pytest.fixture
def config():
    return ExtractorConfig(base_url="https://registry.example/list", max_pages=3, delay_ms=0)


@pytest.fixture
def extractor_for(normalizer, config):
    def build(client):
        return RegistryExtractor(client, normalizer=normalizer, config=config)
    return build


class TestExtractorConfig:
    def test_page_url(self, config):
        assert config.page_url(2) == "https://registry.example/list?page=2&pageSize=50"

    def test_page_url_with_existing_query(self):
        config = ExtractorConfig(base_url="https://registry.example/list?lang=en")
        assert config.page_url(1) == "https://registry.example/list?lang=en&page=1&pageSize=50"

    def test_invalid_values_rejected(self):
        with pytest.raises(ValueError):
            ExtractorConfig(page_size=0)
        with pytest.raises(ValueError):
            ExtractorConfig(delay_ms=-1)

    def test_from_dict_reads_navigation(self):
        config = ExtractorConfig.from_dict({
            "page_size": 25,
            "navigation": {"timeout_ms": 10000, "selector_timeout_ms": 2000},
        })
        assert config.page_size == 25
        assert config.timeout_ms == 10000
        assert config.selector_timeout_ms == 2000
        assert config.min_cells == 7


class TestExtract:
    def test_failed_page_does_not_stop_other_pages(self, extractor_for, fake_client_cls, row_factory):
        client = fake_client_cls({
            1: [row_factory("Paracetamol 500mg tablete N123456-01")],
            2: NavigationError("Timeout after 30000ms loading page 2"),
            3: [row_factory("Ibuprofen 200mg tablete N000111-02")],
        })
        result = extractor_for(client).extract()

        assert len(result.errors) == 1
        assert result.errors[0].startswith("Page 2: NavigationError")
        assert sorted(r.registration_number for r in result.records) == ["N000111-02", "N123456-01"]
        assert result.pages_processed == 2

    def test_selector_failure_becomes_error(self, extractor_for, fake_client_cls, row_factory):
        client = fake_client_cls({
            1: [row_factory("Paracetamol 500mg tablete N123456-01")],
            2: SelectorNotFound("No table rows"),
        })
        result = extractor_for(client).extract(max_pages=2)
        assert len(result.records) == 1
        assert "SelectorNotFound" in result.errors[0]

    def test_pages_planned_from_total(self, extractor_for, fake_client_cls, row_factory):
        client = fake_client_cls({1: [row_factory("Paracetamol 500mg tablete N123456-01")]}, total=120)
        extractor_for(client).extract(max_pages=10)
        assert len(client.visited) == 3

    def test_max_pages_caps_plan(self, extractor_for, fake_client_cls):
        client = fake_client_cls({}, total=1000)
        extractor_for(client).extract(max_pages=2)
        assert len(client.visited) == 2

    def test_page_size_override_in_urls(self, extractor_for, fake_client_cls):
        client = fake_client_cls({}, total=10)
        extractor_for(client).extract(page_size=10)
        assert client.visited == ["https://registry.example/list?page=1&pageSize=10"]

    def test_records_are_normalized(self, extractor_for, fake_client_cls, sample_row):
        result = extractor_for(fake_client_cls({1: [sample_row]}, total=1)).extract()
        record = result.records[0]
        assert record.wholesaler_name == "Pharma Plus"
        assert record.manufacturer_country == "Germany"
        assert record.dosage_form == "Tablet"
        assert record.issuance_procedure == "Medical prescription"

    def test_duplicate_registration_number_upserted(self, extractor_for, fake_client_cls, row_factory):
        client = fake_client_cls({
            1: [row_factory("Paracetamol 500mg tablete N123456-01")],
            2: [row_factory("Paracetamol 500mg tablete N123456-01", active_ingredient="Paracetamolum (updated)")],
        }, total=100)
        result = extractor_for(client).extract(max_pages=2)
        assert len(result.records) == 1
        assert result.records[0].active_ingredient == "Paracetamolum (updated)"

    def test_rerun_is_idempotent(self, extractor_for, fake_client_cls, row_factory):
        pages = {
            1: [row_factory("Paracetamol 500mg tablete N123456-01")],
            2: [row_factory("Ibuprofen 200mg tablete N000111-02")],
        }
        first = extractor_for(fake_client_cls(pages, total=100)).extract(max_pages=2)
        second = extractor_for(fake_client_cls(pages, total=100)).extract(max_pages=2)
        assert first.records == second.records

    def test_single_worker_client(self, extractor_for, fake_client_cls, row_factory):
        client = fake_client_cls({
            1: [row_factory("Paracetamol 500mg tablete N123456-01")],
            3: [row_factory("Ibuprofen 200mg tablete N000111-02")],
        }, thread_safe=False)
        result = extractor_for(client).extract()
        assert client.visited == [
            "https://registry.example/list?page=1&pageSize=50",
            "https://registry.example/list?page=2&pageSize=50",
            "https://registry.example/list?page=3&pageSize=50",
        ]
        assert len(result.records) == 2

    def test_invalid_override_rejected(self, extractor_for, fake_client_cls):
        with pytest.raises(ValueError):
            extractor_for(fake_client_cls({})).extract(max_pages=0)


class TestProcessRow:
    def test_short_row_yields_one_error(self, extractor_for, fake_client_cls, config):
        errors = []
        record = extractor_for(fake_client_cls({})).process_row(
            RawTableRow(index=4, cells=["a", "b", "c"], page=2), config, errors)
        assert record is None
        assert errors == ["Page 2 row 4: expected at least 7 cells, got 3"]

    def test_row_without_registration_number_dropped(self, extractor_for, fake_client_cls, config, row_factory):
        errors = []
        record = extractor_for(fake_client_cls({})).process_row(
            RawTableRow(index=0, cells=row_factory("Paracetamol 500mg tablete")), config, errors)
        assert record is None
        assert len(errors) == 1
        assert "dropped" in errors[0]
        assert "registration_number: missing" in errors[0]

    def test_valid_row(self, extractor_for, fake_client_cls, config, sample_row):
        errors = []
        record = extractor_for(fake_client_cls({})).process_row(
            RawTableRow(index=0, cells=sample_row), config, errors)
        assert record is not None
        assert errors == []

    def test_rows_and_drops_counted(self, extractor_for, fake_client_cls, row_factory):
        client = fake_client_cls({1: [
            row_factory("Paracetamol 500mg tablete N123456-01"),
            ["too", "short"],
        ]}, total=2)
        result = extractor_for(client).extract()
        assert result.rows_seen == 2
        assert result.rows_dropped == 1
        assert len(result.errors) == 1
