"""
Registry Field Parser

Splits raw registry table cells into semantic sub-fields:
- Drug-info cell: drug name, dosage form, registration number
- Manufacturer cell: "name, country"
- Wholesaler cell: company name, address, license code

Heuristics are expressed as ordered rule tables of (pattern, extractor)
pairs. The first rule whose pattern matches and whose extractor accepts
the match wins; every table ends in a fallback that always succeeds, so a
malformed cell yields best-effort values instead of failing the row.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, List, Optional, Pattern, Sequence, TypeVar

from ...common.text_utils import collapse_whitespace, join_lines, strip_quotes
from ...models import (
    DrugCellParts,
    ManufacturerCellParts,
    RegistryRecord,
    WholesalerCellParts,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

REGISTRATION_NUMBER_PATTERN = re.compile(r"N\d{6}-\d{2}$")
CONCENTRATION_PATTERN = re.compile(r"\d+\s*(?:mg|ml|g|iu|%)", re.IGNORECASE)
LICENSE_PATTERN = re.compile(r"\b(L\d{5}|LPN-\d+/\d+|L\d{3,})\b")

# Most specific to least; first match by list order wins
DEFAULT_DOSAGE_FORM_PATTERNS = [
    r"tablet|tablete|apvalkotā tablete",
    r"capsule|kapsula",
    r"solution|šķīdums|suspensija",
    r"powder|pulveris|polvere",
    r"gel|gels",
    r"aerosol|aerosols",
    r"cream|krēms",
    r"ointment|ziede",
]

UNKNOWN_MANUFACTURER = "Unknown Manufacturer"
UNKNOWN_COUNTRY = "Unknown Country"
UNKNOWN_WHOLESALER = "Unknown Wholesaler"
ADDRESS_NOT_SPECIFIED = "Not specified"
DEFAULT_ISSUANCE = "Mr."

# Cell positions in the registry table
DRUG_INFO, ACTIVE_INGREDIENT, MANUFACTURER, ATC_CODE, ISSUANCE, WHOLESALER, PERMIT_VALIDITY = range(7)


@dataclass(frozen=True)
class Rule(Generic[T]):
    """One heuristic: a pattern plus an extractor that may still reject the match."""
    name: str
    pattern: Pattern
    extract: Callable[[str, "re.Match"], Optional[T]]


def apply_rules(text: str, rules: Iterable[Rule[T]], fallback: Callable[[str], T]) -> T:
    """
    Run an ordered rule table against text.

    Args:
        text: Cleaned cell text
        rules: Rules in priority order
        fallback: Total function used when no rule produces a value

    Returns:
        The first extractor result that is not None, else fallback(text)
    """
    for rule in rules:
        match = rule.pattern.search(text)
        if not match:
            continue
        result = rule.extract(text, match)
        if result is not None:
            logger.debug("Rule %s matched %r", rule.name, text[:60])
            return result
    return fallback(text)


# ── Drug-info cell ──────────────────────────────────────────────────────


def _split_at_form(text: str, match: "re.Match") -> Optional[DrugCellParts]:
    # A form keyword at position 0 leaves no drug name; let the next rule try
    if match.start() == 0:
        return None
    return DrugCellParts(
        drug_name=text[:match.start()].strip(),
        dosage_form=text[match.start():].strip(),
    )


def _split_before_concentration(text: str, match: "re.Match") -> Optional[DrugCellParts]:
    if match.start() == 0:
        return None
    split_index = text.rfind(" ", 0, match.start() + 1)
    if split_index <= 0:
        return None
    return DrugCellParts(
        drug_name=text[:split_index].strip(),
        dosage_form=text[split_index:].strip(),
    )


def build_drug_rules(dosage_form_patterns: Optional[Sequence[str]] = None) -> List[Rule[DrugCellParts]]:
    """
    Build the drug-info rule table.

    Args:
        dosage_form_patterns: Regex alternations in priority order
            (default: English and Latvian tablet/capsule/... variants)
    """
    patterns = dosage_form_patterns or DEFAULT_DOSAGE_FORM_PATTERNS
    rules: List[Rule[DrugCellParts]] = [
        Rule(
            name=f"dosage_form:{pattern.split('|')[0]}",
            pattern=re.compile(f"(?:{pattern})", re.IGNORECASE),
            extract=_split_at_form,
        )
        for pattern in patterns
    ]
    rules.append(Rule(name="concentration", pattern=CONCENTRATION_PATTERN,
                      extract=_split_before_concentration))
    return rules


DEFAULT_DRUG_RULES = build_drug_rules()


def split_registration_number(text: str) -> tuple:
    """
    Separate a trailing registration number from drug-info text.

    Returns:
        (remaining text, registration number or "")
    """
    text = join_lines(text)
    match = REGISTRATION_NUMBER_PATTERN.search(text)
    if not match:
        return text, ""
    return text[:match.start()].strip(), match.group(0)


def parse_drug_cell(text: str, rules: Optional[Sequence[Rule[DrugCellParts]]] = None) -> DrugCellParts:
    """
    Parse the drug-info cell.

    Example:
        "Paracetamol 500mg tablet N123456-01" ->
        DrugCellParts("Paracetamol 500mg", "tablet", "N123456-01")
    """
    remainder, registration_number = split_registration_number(text)
    parts = apply_rules(
        remainder,
        rules if rules is not None else DEFAULT_DRUG_RULES,
        fallback=lambda t: DrugCellParts(drug_name=t),
    )
    parts.registration_number = registration_number
    return parts


# ── Manufacturer cell ───────────────────────────────────────────────────


def parse_manufacturer_cell(text: str) -> ManufacturerCellParts:
    """Parse "Name, Country"; missing parts become Unknown placeholders."""
    parts = [p.strip() for p in join_lines(text).split(",")]
    name = parts[0] if parts and parts[0] else UNKNOWN_MANUFACTURER
    country = parts[1] if len(parts) > 1 and parts[1] else UNKNOWN_COUNTRY
    return ManufacturerCellParts(name=name, country=country)


# ── Wholesaler cell ─────────────────────────────────────────────────────


def _split_company_and_address(text: str, license_code: str = "") -> WholesalerCellParts:
    segments = [s.strip() for s in text.split(",")]
    name = strip_quotes(segments[0]) if segments else ""
    address_parts = [s for s in segments[1:] if s]
    return WholesalerCellParts(
        name=name or UNKNOWN_WHOLESALER,
        address=", ".join(address_parts) or ADDRESS_NOT_SPECIFIED,
        license=license_code,
    )


def _extract_with_license(text: str, match: "re.Match") -> WholesalerCellParts:
    license_code = match.group(1)
    without_license = collapse_whitespace(text[:match.start()] + text[match.end():])
    return _split_company_and_address(without_license, license_code)


WHOLESALER_RULES: List[Rule[WholesalerCellParts]] = [
    Rule(name="license", pattern=LICENSE_PATTERN, extract=_extract_with_license),
]


def parse_wholesaler_cell(text: str) -> WholesalerCellParts:
    """
    Parse the wholesaler cell into company name, address and license.

    Example:
        '"SIA Pharma Plus", Riga, LV-1010, L00031' ->
        WholesalerCellParts('SIA Pharma Plus', 'Riga, LV-1010', 'L00031')
    """
    return apply_rules(join_lines(text), WHOLESALER_RULES, fallback=_split_company_and_address)


# ── Whole row ───────────────────────────────────────────────────────────


def _cell(cells: Sequence[str], index: int) -> str:
    return join_lines(cells[index]) if index < len(cells) and cells[index] else ""


def parse_row(cells: Sequence[str], drug_rules: Optional[Sequence[Rule[DrugCellParts]]] = None,
              default_issuance: str = DEFAULT_ISSUANCE) -> RegistryRecord:
    """
    Parse one table row into a draft (not yet normalized) RegistryRecord.

    Cells: drug info, active ingredient, manufacturer, ATC code, issuance
    procedure, wholesaler, permit validity. Missing cells degrade to
    empty or placeholder values.
    """
    drug = parse_drug_cell(_cell(cells, DRUG_INFO), drug_rules)
    manufacturer = parse_manufacturer_cell(_cell(cells, MANUFACTURER))
    wholesaler = parse_wholesaler_cell(_cell(cells, WHOLESALER))

    return RegistryRecord(
        drug_name=drug.drug_name,
        dosage_form=drug.dosage_form,
        registration_number=drug.registration_number,
        active_ingredient=_cell(cells, ACTIVE_INGREDIENT),
        manufacturer_name=manufacturer.name,
        manufacturer_country=manufacturer.country,
        atc_code=_cell(cells, ATC_CODE),
        issuance_procedure=_cell(cells, ISSUANCE) or default_issuance,
        wholesaler_name=wholesaler.name,
        wholesaler_address=wholesaler.address,
        wholesaler_license=wholesaler.license,
        permit_validity=_cell(cells, PERMIT_VALIDITY),
    )


# ── Concentration (used when presenting matched drugs) ─────────────────

CONCENTRATION_PATTERNS = [
    re.compile(r"\d+(?:[.,]\d+)?\s*(?:mg|mcg|µg|μg|g|ml|l|iu|u)\b"
               r"(?:\s*/\s*\d*(?:[.,]\d+)?\s*(?:mg|ml|l)\b)?", re.IGNORECASE),
    re.compile(r"\d+(?:[.,]\d+)?\s*%"),
]


def extract_concentration(text: str) -> str:
    """
    Find a strength such as "500 mg", "300 mg/ml" or "5%" in drug text.

    Returns:
        The matched strength, or "" when none is present
    """
    if not text:
        return ""
    for pattern in CONCENTRATION_PATTERNS:
        match = pattern.search(text)
        if match:
            return collapse_whitespace(match.group(0))
    return ""
