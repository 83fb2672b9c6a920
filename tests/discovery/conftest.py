"""Fixtures for vendor discovery tests."""

from unittest.mock import MagicMock

import pytest

from pharmascout.discovery.base import SearchAdapter
from pharmascout.discovery.signals import SearchHeuristics


class StaticAdapter(SearchAdapter):
    """Adapter returning fixed candidates and recording its queries."""

    def __init__(self, name, candidates=(), error=None, per_variant=True, remote=False):
        self.name = name
        self.candidates = list(candidates)
        self.error = error
        self.per_variant = per_variant
        self.remote = remote
        self.queries = []

    def _search(self, query, locale):
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.candidates)


@pytest.fixture
def heuristics():
    return SearchHeuristics(
        non_commercial_patterns=("wikipedia.org", ".gov", ".edu"),
        delay_ms=0,
        max_workers=2,
    )


@pytest.fixture
def static_adapter_cls():
    return StaticAdapter


@pytest.fixture
def json_response():
    """Factory for a mocked requests response with a JSON body."""
    def build(payload, status_code=200):
        response = MagicMock()
        response.status_code = status_code
        response.json.return_value = payload
        return response
    return build
