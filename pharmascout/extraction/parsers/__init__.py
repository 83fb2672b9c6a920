"""
Parsers for registry table content.

- field_parser: rule-table parsing of drug, manufacturer and wholesaler cells
- table_parser: BeautifulSoup extraction of table rows from registry HTML
"""

from .field_parser import (
    Rule,
    apply_rules,
    build_drug_rules,
    extract_concentration,
    parse_drug_cell,
    parse_manufacturer_cell,
    parse_row,
    parse_wholesaler_cell,
)
from .table_parser import RegistryTableParser

__all__ = [
    'Rule',
    'apply_rules',
    'build_drug_rules',
    'parse_drug_cell',
    'parse_manufacturer_cell',
    'parse_wholesaler_cell',
    'parse_row',
    'extract_concentration',
    'RegistryTableParser',
]
