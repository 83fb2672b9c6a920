"""Bing Web Search v7 adapter."""

import logging
import re
from typing import List, Optional

import requests

from ..models import SearchHit
from .base import WebSearchAdapter
from .signals import SearchHeuristics

logger = logging.getLogger(__name__)

MARKET_RE = re.compile(r"^[a-z]{2}-[A-Z]{2}$")


class BingSearchAdapter(WebSearchAdapter):
    """Vendor candidates from the Bing Web Search API."""

    name = "bing"
    API_URL = "https://api.bing.microsoft.com/v7.0/search"
    MAX_RESULTS = 50

    def __init__(self, api_key: str, market: str = "en-US",
                 heuristics: Optional[SearchHeuristics] = None,
                 session: Optional[requests.Session] = None):
        super().__init__(heuristics, session)
        self.api_key = api_key
        self.market = market

    def search_hits(self, query: str, result_count: int, locale: Optional[str] = None) -> List[SearchHit]:
        params = {
            'q': query,
            'count': max(1, min(result_count, self.MAX_RESULTS)),
            'mkt': locale if locale and MARKET_RE.match(locale) else self.market,
        }
        headers = {'Ocp-Apim-Subscription-Key': self.api_key}
        data = self._get_json(self.API_URL, params, headers)
        pages = (data.get('webPages') or {}).get('value', []) or []
        return [
            SearchHit(title=page.get('name', ''), url=page.get('url', ''), snippet=page.get('snippet', ''))
            for page in pages
        ]
