"""
Terminology Normalizer

Maps Latvian registry vocabulary to canonical English:
- Country names ("Vācija" -> "Germany")
- Dosage forms ("apvalkotā tablete" -> "Coated tablet")
- Company names (legal-entity designators and quotes removed)
- Issuance procedure codes ("Pr." -> "Prescription required")

Every function is total and idempotent: unknown terms pass through
unchanged and normalizing an already normalized value is a no-op.
"""

import dataclasses
import logging
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Pattern, Tuple

from ..common.config_loader import load_terminology
from ..common.text_utils import collapse_whitespace, strip_quotes
from ..models import RegistryRecord

logger = logging.getLogger(__name__)

_EDGE_PUNCTUATION = " ,;-"


def _whole_word_pattern(terms, flags: int = 0) -> Optional[Pattern]:
    """Alternation of terms, longest first, matched only as whole words."""
    ordered = sorted({t for t in terms if t}, key=len, reverse=True)
    if not ordered:
        return None
    alternation = "|".join(re.escape(t) for t in ordered)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", flags)


@dataclass(frozen=True)
class TerminologyTables:
    """Immutable lookup tables, loaded once and injected into the normalizer."""
    countries: Mapping[str, str] = field(default_factory=dict)
    dosage_forms: Mapping[str, str] = field(default_factory=dict)
    legal_entity_terms: Tuple[str, ...] = ()
    issuance_procedures: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the mappings so shared tables cannot drift between workers
        object.__setattr__(self, 'countries', MappingProxyType(dict(self.countries)))
        object.__setattr__(self, 'dosage_forms',
                           MappingProxyType({k.lower(): v for k, v in self.dosage_forms.items()}))
        object.__setattr__(self, 'legal_entity_terms', tuple(self.legal_entity_terms))
        object.__setattr__(self, 'issuance_procedures', MappingProxyType(dict(self.issuance_procedures)))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TerminologyTables":
        return cls(
            countries=data.get('countries', {}) or {},
            dosage_forms=data.get('dosage_forms', {}) or {},
            legal_entity_terms=tuple(data.get('legal_entity_terms', []) or []),
            issuance_procedures=data.get('issuance_procedures', {}) or {},
        )

    @classmethod
    def from_config(cls) -> "TerminologyTables":
        """Load tables from config/terminology.yaml."""
        return cls.from_dict(load_terminology())


class TerminologyNormalizer:
    """
    Normalizes registry terminology using injected lookup tables.

    Usage:
        normalizer = TerminologyNormalizer(TerminologyTables.from_config())
        normalizer.country("Vācija")          # "Germany"
        normalizer.company_name('"SIA Foo"')   # "Foo"
        record = normalizer.normalize_record(draft)
    """

    def __init__(self, tables: Optional[TerminologyTables] = None):
        self.tables = tables if tables is not None else TerminologyTables.from_config()
        self._countries_folded = {k.casefold(): v for k, v in self.tables.countries.items()}
        self._dosage_pattern = _whole_word_pattern(self.tables.dosage_forms.keys())
        self._legal_pattern = _whole_word_pattern(self.tables.legal_entity_terms)

    def country(self, value: str) -> str:
        """Translate a country name; trailing commas/periods are dropped."""
        if not value:
            return ""
        trimmed = value.strip().rstrip(",.").strip()
        if trimmed in self.tables.countries:
            return self.tables.countries[trimmed]
        return self._countries_folded.get(trimmed.casefold(), trimmed)

    def dosage_form(self, value: str) -> str:
        """
        Translate dosage-form terms and capitalize the first letter.

        Terms are replaced as whole words in one pass, longest first, so
        "apvalkotā tablete" wins over "tablete".
        """
        if not value:
            return ""
        translated = collapse_whitespace(value).lower()
        if self._dosage_pattern is not None:
            translated = self._dosage_pattern.sub(
                lambda m: self.tables.dosage_forms[m.group(0)], translated)
        return translated[:1].upper() + translated[1:]

    def company_name(self, value: str) -> str:
        """
        Strip legal-entity designators (SIA, AS, ...) and quote characters.

        A name consisting only of a designator is kept as is.
        """
        if not value:
            return ""
        cleaned = strip_quotes(value).strip(_EDGE_PUNCTUATION)
        if self._legal_pattern is None:
            return cleaned

        result = cleaned
        while True:
            stripped = collapse_whitespace(self._legal_pattern.sub(" ", result)).strip(_EDGE_PUNCTUATION)
            if stripped == result:
                break
            result = stripped
        return result or cleaned

    def issuance(self, value: str) -> str:
        """Translate an issuance procedure code; unknown codes pass through."""
        if not value:
            return ""
        trimmed = value.strip()
        return self.tables.issuance_procedures.get(trimmed, trimmed)

    def normalize_record(self, record: RegistryRecord) -> RegistryRecord:
        """Return a copy of a parsed record with canonical terminology."""
        return dataclasses.replace(
            record,
            dosage_form=self.dosage_form(record.dosage_form),
            manufacturer_country=self.country(record.manufacturer_country),
            issuance_procedure=self.issuance(record.issuance_procedure),
            wholesaler_name=self.company_name(record.wholesaler_name),
        )
