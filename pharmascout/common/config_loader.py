"""
Configuration Loader

Loads the YAML configuration files under config/: registry layout,
terminology tables, search heuristics, the curated vendor catalog and
contact matching rules.
"""

from pathlib import Path
from typing import Any, Dict, List

import yaml


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Repository root (next to the package) first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'registry.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_registry_config() -> Dict[str, Any]:
    """
    Load registry source settings.

    Returns:
        Dictionary with base_url, page_size, row_selectors,
        dosage_form_patterns, navigation timeouts, etc.
    """
    return load_config('registry.yaml')


def load_terminology() -> Dict[str, Any]:
    """
    Load Latvian-to-English terminology tables.

    Returns:
        Dictionary with 'countries', 'dosage_forms', 'legal_entity_terms'
        and 'issuance_procedures'
    """
    return load_config('terminology.yaml')


def load_search_config() -> Dict[str, Any]:
    """Load vendor search heuristics (query templates, filters, keywords)."""
    return load_config('search.yaml')


def load_known_vendors() -> Dict[str, Any]:
    """
    Load the curated vendor catalog.

    Returns:
        Dictionary with 'medicines' (keyword -> vendor entries) and
        'general' (entries applied to every medicine)
    """
    config = load_config('known_vendors.yaml')
    return {
        'medicines': config.get('medicines', {}) or {},
        'general': config.get('general', []) or [],
    }


def load_placeholder_email_domains() -> List[str]:
    """
    Load email domains used for seeded placeholder vendor contacts.

    Example:
        ['pharma.lv']
    """
    config = load_config('matching.yaml')
    return [d.lower() for d in config.get('placeholder_email_domains', [])]
