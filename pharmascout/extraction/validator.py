"""
Registry Record Validator

Checks normalized RegistryRecords against the record schema before they
leave the extractor. Records with errors are dropped; warnings are only
logged.
"""

from __future__ import annotations

import re

from ..models import RegistryRecord
from .parsers.field_parser import UNKNOWN_WHOLESALER

# Anatomical Therapeutic Chemical code, levels 1-5 (e.g. N02, N02BE01)
ATC_CODE_RE = re.compile(r"^[A-Z](?:\d{2}(?:[A-Z](?:[A-Z](?:\d{2})?)?)?)?$")


class RegistryRecordValidator:
    """Validates a single RegistryRecord."""

    def __init__(self, record: RegistryRecord):
        self.record = record

    def validate(self) -> dict:
        """
        Run all validations.

        Returns a dict with keys:
          valid    - False if any error fires
          errors   - blocking problems (record must be dropped)
          warnings - suspicious but acceptable values
        """
        errors: list[str] = []
        warnings: list[str] = []
        r = self.record

        # registration_number: required, N######-##
        if not r.registration_number:
            errors.append("registration_number: missing")
        elif not r.has_valid_registration_number:
            errors.append(f"registration_number: invalid format ({r.registration_number!r})")

        # drug_name: required, must not carry the registration number
        if not r.drug_name or not r.drug_name.strip():
            errors.append("drug_name: empty")
        elif r.registration_number and r.registration_number in r.drug_name:
            errors.append("drug_name: contains registration number")

        if not r.active_ingredient.strip():
            warnings.append("active_ingredient: empty")

        if r.atc_code and not ATC_CODE_RE.match(r.atc_code.strip()):
            warnings.append(f"atc_code: unexpected format ({r.atc_code!r})")

        if r.wholesaler_name == UNKNOWN_WHOLESALER:
            warnings.append("wholesaler_name: not found in cell")

        if not r.wholesaler_license:
            warnings.append("wholesaler_license: missing")

        if not r.permit_validity:
            warnings.append("permit_validity: empty")

        return {
            'valid': not errors,
            'errors': errors,
            'warnings': warnings,
        }
