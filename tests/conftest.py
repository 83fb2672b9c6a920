"""Shared test fixtures."""

from typing import Dict, List, Optional

import pytest

from pharmascout.extraction.clients import NavigationError, PageHandle, TableClient
from pharmascout.extraction.normalizer import TerminologyNormalizer, TerminologyTables
from pharmascout.models import RegistryRecord

REGISTRY_ROW = [
    "Paracetamol 500mg tablete\nN123456-01",
    "Paracetamolum",
    "Pharma Factory GmbH, Vācija",
    "N02BE01",
    "Mr.",
    '"SIA Pharma Plus", Riga, LV-1010, L00031',
    "Beztermiņa",
]


def make_record(**overrides) -> RegistryRecord:
    """Valid normalized record; keyword arguments replace single fields."""
    values = dict(
        drug_name="Paracetamol 500mg",
        dosage_form="Tablet",
        registration_number="N123456-01",
        active_ingredient="Paracetamolum",
        manufacturer_name="Pharma Factory GmbH",
        manufacturer_country="Germany",
        atc_code="N02BE01",
        issuance_procedure="Medical prescription",
        wholesaler_name="Pharma Plus",
        wholesaler_address="Riga, LV-1010",
        wholesaler_license="L00031",
        permit_validity="Beztermiņa",
    )
    values.update(overrides)
    return RegistryRecord(**values)


def registry_row(drug_cell: str, wholesaler_cell: str = REGISTRY_ROW[5],
                 active_ingredient: str = REGISTRY_ROW[1]) -> List[str]:
    row = list(REGISTRY_ROW)
    row[0] = drug_cell
    row[1] = active_ingredient
    row[5] = wholesaler_cell
    return row


class FakeTableClient(TableClient):
    """
    In-memory table client.

    ``pages`` maps page number to rows; a page mapped to an exception
    instance raises it from navigate().
    """

    def __init__(self, pages: Dict[int, object], total: Optional[int] = None, thread_safe: bool = True):
        self.pages = pages
        self.total = total
        self.thread_safe = thread_safe
        self.visited: List[str] = []
        self.released = 0
        self.closed = False

    @staticmethod
    def _page_number(url: str) -> int:
        return int(url.split("page=")[1].split("&")[0])

    def navigate(self, url, wait_until="networkidle", timeout_ms=30000):
        self.visited.append(url)
        content = self.pages.get(self._page_number(url), [])
        if isinstance(content, Exception):
            raise content
        return PageHandle(url=url)

    def read_rows(self, handle, selectors, timeout_ms=5000):
        return self.pages.get(self._page_number(handle.url), [])

    def total_records(self, handle):
        return self.total

    def release(self, handle):
        self.released += 1

    def close(self):
        self.closed = True


@pytest.fixture
def terminology_tables():
    """Small terminology table set."""
    return TerminologyTables.from_dict({
        "countries": {"Vācija": "Germany", "Latvija": "Latvia", "Somija": "Finland"},
        "dosage_forms": {
            "apvalkotā tablete": "coated tablet",
            "tablete": "tablet",
            "šķīdums": "solution",
            "deguna aerosols": "nasal spray",
            "aerosols": "aerosol",
        },
        "legal_entity_terms": ["Sabiedrība ar ierobežotu atbildību", "SIA", "AS"],
        "issuance_procedures": {"Pr.": "Prescription required", "Mr.": "Medical prescription"},
    })


@pytest.fixture
def normalizer(terminology_tables):
    return TerminologyNormalizer(terminology_tables)


@pytest.fixture
def sample_record():
    return make_record()


@pytest.fixture
def sample_row():
    return list(REGISTRY_ROW)


@pytest.fixture
def page_navigation_error():
    return NavigationError("Timeout after 30000ms loading page 2")


@pytest.fixture
def record_factory():
    """Factory for RegistryRecords: record_factory(drug_name="...")."""
    return make_record


@pytest.fixture
def row_factory():
    """Factory for raw 7-cell rows: row_factory(drug_cell, wholesaler_cell)."""
    return registry_row


@pytest.fixture
def fake_client_cls():
    return FakeTableClient
