"""Google Custom Search JSON API adapter."""

import logging
from typing import List, Optional

import requests

from ..models import SearchHit
from .base import WebSearchAdapter
from .signals import SearchHeuristics

logger = logging.getLogger(__name__)


class GoogleSearchAdapter(WebSearchAdapter):
    """Vendor candidates from Google Custom Search (max 10 results per call)."""

    name = "google"
    API_URL = "https://www.googleapis.com/customsearch/v1"
    MAX_RESULTS = 10

    def __init__(self, api_key: str, search_engine_id: str,
                 heuristics: Optional[SearchHeuristics] = None,
                 session: Optional[requests.Session] = None):
        super().__init__(heuristics, session)
        self.api_key = api_key
        self.search_engine_id = search_engine_id

    def search_hits(self, query: str, result_count: int, locale: Optional[str] = None) -> List[SearchHit]:
        params = {
            'key': self.api_key,
            'cx': self.search_engine_id,
            'q': query,
            'num': max(1, min(result_count, self.MAX_RESULTS)),
        }
        # Country names go into the query text; only ISO codes map to gl
        if locale and len(locale) == 2 and locale.isalpha():
            params['gl'] = locale.lower()
        data = self._get_json(self.API_URL, params)
        return [
            SearchHit(title=item.get('title', ''), url=item.get('link', ''), snippet=item.get('snippet', ''))
            for item in data.get('items', []) or []
        ]
