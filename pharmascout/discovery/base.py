"""
Search Source Adapter Interface

Every vendor source (web search engines, language-model knowledge, the
curated catalog) implements ``search(query, locale) -> [VendorCandidate]``.
A failing adapter logs and returns an empty list; it never raises into
the aggregator.
"""

import logging
import time
from typing import List, Optional, Tuple

import openai
import requests

from ..models import SearchHit, VendorCandidate
from .signals import SearchHeuristics, candidate_from_hit, is_non_commercial

logger = logging.getLogger(__name__)

# Failures isolated to a single adapter call
ADAPTER_ERRORS = (
    requests.exceptions.RequestException,
    openai.OpenAIError,
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
)


class SearchAdapter:
    """Base class for vendor search sources."""

    name = "base"
    # Called for every query variant; False means once per aggregation
    per_variant = True
    # Remote sources share the rate limiter
    remote = True

    def search(self, query: str, locale: Optional[str] = None) -> List[VendorCandidate]:
        """Return vendor candidates for a query; empty list on any failure."""
        candidates, _ = self.search_with_error(query, locale)
        return candidates

    def search_with_error(self, query: str, locale: Optional[str] = None) -> Tuple[List[VendorCandidate], Optional[str]]:
        """
        Like ``search`` but also reports the failure, if any.

        Returns:
            (candidates, error description or None)
        """
        try:
            return self._search(query, locale), None
        except ADAPTER_ERRORS as e:
            error_msg = f"{self.name}: {type(e).__name__}: {str(e)[:100]}"
            logger.error("Search failed (%s) for %r", error_msg, query)
            return [], error_msg

    def _search(self, query: str, locale: Optional[str]) -> List[VendorCandidate]:
        raise NotImplementedError


class WebSearchAdapter(SearchAdapter):
    """
    Adapter over a web search engine returning title/url/snippet hits.

    Subclasses implement ``search_hits``. Non-commercial results are
    dropped before hits become candidates.
    """

    RETRYABLE_STATUS_CODES = {429, 502, 503, 504}
    MAX_RETRIES = 3

    def __init__(self, heuristics: Optional[SearchHeuristics] = None,
                 session: Optional[requests.Session] = None):
        self.heuristics = heuristics or SearchHeuristics.from_config()
        self.session = session or requests.Session()

    def search_hits(self, query: str, result_count: int, locale: Optional[str] = None) -> List[SearchHit]:
        raise NotImplementedError

    def _get_json(self, url: str, params: dict, headers: Optional[dict] = None) -> dict:
        """GET with retry on rate limiting; raises requests exceptions."""
        for attempt in range(self.MAX_RETRIES):
            response = self.session.get(url, params=params, headers=headers,
                                        timeout=self.heuristics.request_timeout)
            if response.status_code not in self.RETRYABLE_STATUS_CODES or attempt == self.MAX_RETRIES - 1:
                break
            wait = 2 ** attempt
            logger.warning("%s: HTTP %d, retry %d/%d in %ds", self.name,
                           response.status_code, attempt + 1, self.MAX_RETRIES, wait)
            time.sleep(wait)
        response.raise_for_status()
        return response.json()

    def _search(self, query: str, locale: Optional[str]) -> List[VendorCandidate]:
        hits = self.search_hits(query, self.heuristics.result_count, locale)
        candidates = []
        for hit in hits:
            if is_non_commercial(hit.url, self.heuristics):
                logger.debug("%s: skipping non-commercial %s", self.name, hit.url)
                continue
            candidate = candidate_from_hit(hit, self.name, self.heuristics)
            if candidate is not None:
                candidates.append(candidate)
        logger.info("%s: %d hits -> %d candidates for %r", self.name, len(hits), len(candidates), query)
        return candidates
