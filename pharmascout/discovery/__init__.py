"""
Vendor discovery across search sources.

Modules:
    base - SearchAdapter interface and web-search adapter base
    google, bing - web search engine adapters
    llm - language-model client, knowledge adapter and enrichment
    known_vendors - curated vendor catalog adapter
    signals - text heuristics for vendor signals
    aggregator - VendorAggregator fan-out / merge
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..common.settings import Settings
from .aggregator import (
    VendorAggregator,
    assess_data_quality,
    build_query_variants,
    categorize_by_type,
    merge_candidates,
)
from .base import SearchAdapter, WebSearchAdapter
from .bing import BingSearchAdapter
from .google import GoogleSearchAdapter
from .known_vendors import KnownVendorsAdapter
from .llm import LLMClient, LLMKnowledgeAdapter, parse_json_payload
from .signals import SearchHeuristics

logger = logging.getLogger(__name__)

# Registry of supported search sources
ADAPTERS = {
    'google': GoogleSearchAdapter,
    'bing': BingSearchAdapter,
    'llm': LLMKnowledgeAdapter,
    'known_vendors': KnownVendorsAdapter,
}


def build_adapters(
    settings: Settings,
    names: Optional[Sequence[str]] = None,
    heuristics: Optional[SearchHeuristics] = None,
) -> Tuple[List[SearchAdapter], Optional[LLMClient]]:
    """
    Create the configured adapters. Sources without credentials are
    skipped with a warning.

    Args:
        settings: Credentials and model selection
        names: Adapter names (default: settings.adapters)
        heuristics: Shared search heuristics (default: config/search.yaml)

    Returns:
        (adapters, language-model client or None)

    Raises:
        ValueError: If an adapter name is unknown
    """
    names = list(names or settings.adapters)
    unknown = [n for n in names if n not in ADAPTERS]
    if unknown:
        supported = ', '.join(ADAPTERS)
        raise ValueError(f"Unknown search adapter(s): {', '.join(unknown)}. Supported: {supported}")

    heuristics = heuristics or SearchHeuristics.from_config()
    llm_client = LLMClient(settings.openai_api_key, settings.openai_model) if settings.has_openai else None

    adapters: List[SearchAdapter] = []
    for name in names:
        if name == 'google':
            if not settings.has_google:
                logger.warning("GOOGLE_SEARCH_API_KEY / GOOGLE_SEARCH_ENGINE_ID not set - skipping google")
                continue
            adapters.append(GoogleSearchAdapter(settings.google_api_key, settings.google_search_engine_id,
                                                heuristics))
        elif name == 'bing':
            if not settings.has_bing:
                logger.warning("BING_API_KEY not set - skipping bing")
                continue
            adapters.append(BingSearchAdapter(settings.bing_api_key, settings.bing_market, heuristics))
        elif name == 'llm':
            if llm_client is None:
                logger.warning("OPENAI_API_KEY not set - skipping llm")
                continue
            adapters.append(LLMKnowledgeAdapter(llm_client))
        else:
            adapters.append(ADAPTERS[name]())

    return adapters, llm_client


__all__ = [
    'ADAPTERS',
    'build_adapters',
    'SearchAdapter',
    'WebSearchAdapter',
    'GoogleSearchAdapter',
    'BingSearchAdapter',
    'LLMClient',
    'LLMKnowledgeAdapter',
    'KnownVendorsAdapter',
    'SearchHeuristics',
    'VendorAggregator',
    'build_query_variants',
    'merge_candidates',
    'assess_data_quality',
    'categorize_by_type',
    'parse_json_payload',
]
