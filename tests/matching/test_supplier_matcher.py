"""Tests for pharmascout/matching/supplier_matcher.py"""

import random

import pytest

from pharmascout.matching.supplier_matcher import (
    SupplierMatcher,
    clean_wholesaler_name,
    matches_substance,
)
from pharmascout.models import VendorContact
from pharmascout.storage import InMemoryVendorStore


@pytest.fixture
def ibuprofen_records(record_factory):
    return [
        record_factory(drug_name="Ibuprofen 200mg", registration_number="N000111-02",
                       active_ingredient="Ibuprofenum", dosage_form="Tablet"),
        record_factory(drug_name="Ibuprofen 400mg", registration_number="N000112-02",
                       active_ingredient="Ibuprofenum", dosage_form="Coated tablet"),
        record_factory(drug_name="Ibuprofen 100 mg/5 ml", registration_number="N000113-01",
                       active_ingredient="Ibuprofenum", dosage_form="Oral suspension",
                       wholesaler_name="Tamro", wholesaler_address="Rīga, Noliktavu iela 5",
                       wholesaler_license="L00042", manufacturer_name="Sandoz"),
        record_factory(),
    ]


@pytest.fixture
def matcher():
    return SupplierMatcher(placeholder_domains=["pharma.lv"])


def _vendor(name, email="", vendor_id=None):
    return VendorContact(vendor_id=vendor_id or name, name=name, email=email)


class TestCleanWholesalerName:
    def test_quotes_removed(self):
        assert clean_wholesaler_name('„Tamro”  SIA') == "Tamro SIA"
        assert clean_wholesaler_name('"Pharma Plus"') == "Pharma Plus"

    def test_empty(self):
        assert clean_wholesaler_name(None) == ""


class TestMatchesSubstance:
    def test_case_insensitive_containment(self, record_factory):
        record = record_factory(active_ingredient="Ibuprofenum")
        assert matches_substance(record, "ibuprofen")
        assert not matches_substance(record, "paracetamol")

    def test_dosage_form_filter(self, record_factory):
        record = record_factory(active_ingredient="Ibuprofenum", dosage_form="Coated tablet")
        assert matches_substance(record, "Ibuprofen", "tablet")
        assert not matches_substance(record, "Ibuprofen", "suspension")


class TestMatch:
    def test_grouped_per_wholesaler(self, matcher, ibuprofen_records):
        groups = matcher.match(ibuprofen_records, "Ibuprofen")
        assert [g.wholesaler_name for g in groups] == ["Pharma Plus", "Tamro"]
        assert [d.registration_number for d in groups[0].drugs] == ["N000111-02", "N000112-02"]
        assert groups[0].drugs[0].concentration == "200mg"
        assert groups[1].wholesaler_license == "L00042"
        assert groups[1].manufacturer_name == "Sandoz"
        assert groups[1].product_count == 1

    def test_stable_under_reordering(self, matcher, ibuprofen_records):
        expected = matcher.match(ibuprofen_records, "Ibuprofen")
        shuffled = list(ibuprofen_records)
        random.Random(7).shuffle(shuffled)
        assert matcher.match(shuffled, "Ibuprofen") == expected
        assert matcher.match(list(reversed(ibuprofen_records)), "Ibuprofen") == expected

    def test_dosage_form(self, matcher, ibuprofen_records):
        groups = matcher.match(ibuprofen_records, "Ibuprofen", dosage_form="suspension")
        assert [g.wholesaler_name for g in groups] == ["Tamro"]

    def test_duplicate_registration_number_listed_once(self, matcher, record_factory):
        record = record_factory(active_ingredient="Ibuprofenum")
        groups = matcher.match([record, record], "Ibuprofen")
        assert groups[0].product_count == 1

    def test_no_matches(self, matcher, ibuprofen_records):
        assert matcher.match(ibuprofen_records, "Iohexol") == []

    def test_empty_substance(self, matcher, ibuprofen_records):
        with pytest.raises(ValueError):
            matcher.match(ibuprofen_records, " ")

    def test_contacts_attached(self, ibuprofen_records):
        store = InMemoryVendorStore([_vendor("Tamro", "orders@tamro.lv")])
        groups = SupplierMatcher(store, placeholder_domains=["pharma.lv"]).match(ibuprofen_records, "Ibuprofen")
        assert groups[0].contact is None
        assert groups[1].contact.email == "orders@tamro.lv"


class TestResolveContact:
    def test_exact_name(self, matcher):
        vendors = [_vendor("Tamro Baltics", "a@tamro.lv"), _vendor("Tamro", "b@tamro.lv")]
        assert matcher.resolve_contact("Tamro", vendors).email == "b@tamro.lv"

    def test_quoted_name_matches_clean_vendor(self, matcher):
        vendors = [_vendor("Pharma Plus", "info@pharmaplus.lv")]
        assert matcher.resolve_contact('"Pharma Plus"', vendors).name == "Pharma Plus"

    def test_case_insensitive(self, matcher):
        vendors = [_vendor("TAMRO", "b@tamro.lv")]
        assert matcher.resolve_contact("Tamro", vendors).name == "TAMRO"

    def test_contained_name(self, matcher):
        vendors = [_vendor("Recipe Plus Baltics", "x@recipeplus.lv")]
        assert matcher.resolve_contact("Recipe Plus", vendors).name == "Recipe Plus Baltics"

    def test_underscore_name(self, matcher):
        vendors = [_vendor("recipe_plus", "x@recipeplus.lv")]
        assert matcher.resolve_contact("Recipe Plus", vendors).name == "recipe_plus"

    def test_first_token(self, matcher):
        vendors = [_vendor("Magnum Medical", "x@magnum.lv")]
        assert matcher.resolve_contact("Magnum Distribution", vendors).name == "Magnum Medical"

    def test_placeholder_email_skipped_when_real_exists(self, matcher):
        vendors = [_vendor("Tamro", "tamro@pharma.lv"), _vendor("Tamro Baltics", "b@tamro.lv")]
        assert matcher.resolve_contact("Tamro", vendors).email == "b@tamro.lv"

    def test_placeholder_email_as_last_resort(self, matcher):
        vendors = [_vendor("Tamro Baltics", "tamro@pharma.lv")]
        assert matcher.resolve_contact("Tamro", vendors).email == "tamro@pharma.lv"

    def test_placeholder_only_vendor_found_by_containment(self, matcher):
        vendors = [_vendor("Tamro", "")]
        assert matcher.resolve_contact("Tamro", vendors).name == "Tamro"

    def test_no_match(self, matcher):
        assert matcher.resolve_contact("Tamro", [_vendor("Recipe Plus", "x@recipeplus.lv")]) is None
        assert matcher.resolve_contact("Tamro", []) is None

    def test_is_placeholder_email(self, matcher):
        assert matcher.is_placeholder_email("x@Pharma.lv")
        assert matcher.is_placeholder_email("")
        assert not matcher.is_placeholder_email("x@tamro.lv")
