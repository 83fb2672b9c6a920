"""
Vendor Aggregator

Fans a medicine query out to every configured search adapter, then
merges the results:

1. Build up to five query variants from medicine, dosage and country
2. Run each adapter on the first ``search_depth`` variants on a bounded
   worker pool, with a shared rate limiter between calls
3. After all calls return, merge candidates by dedup key (domain, else
   name), keeping the highest-confidence candidate per key
4. Optionally enrich the top candidates with the language model
5. Summarize: insights, data-quality rating, per-type buckets
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from ..common.rate_limit import RateLimiter
from ..common.text_utils import collapse_whitespace
from ..models import (
    AggregatedSearchResult,
    BusinessType,
    DataQuality,
    VendorCandidate,
)
from .base import SearchAdapter
from .llm import LLMClient, enrich_candidates, generate_insights
from .signals import SearchHeuristics

logger = logging.getLogger(__name__)

MAX_QUERY_VARIANTS = 5

DEFAULT_QUERY_TEMPLATES = [
    "{base} wholesale supplier {location}",
    "{base} pharmaceutical distributor {location}",
    "buy {base} bulk wholesale {location}",
    "{base} medicine supplier B2B {location}",
    "{base} pharma wholesaler {location}",
]

TYPE_BUCKETS = {
    BusinessType.WHOLESALER: 'wholesalers',
    BusinessType.DISTRIBUTOR: 'distributors',
    BusinessType.RETAILER: 'retailers',
    BusinessType.MANUFACTURER: 'manufacturers',
    BusinessType.UNKNOWN: 'uncategorized',
}


def build_query_variants(medicine_name: str, dosage: Optional[str] = None, country: Optional[str] = None,
                         templates: Optional[Sequence[str]] = None) -> List[str]:
    """
    Query variants for a medicine, most specific first, deduplicated.

    Raises:
        ValueError: If the medicine name is empty
    """
    if not medicine_name or not medicine_name.strip():
        raise ValueError("medicine_name must not be empty")
    base = collapse_whitespace(f"{medicine_name} {dosage or ''}")
    location = collapse_whitespace(country or '')
    variants: List[str] = []
    for template in templates or DEFAULT_QUERY_TEMPLATES:
        query = collapse_whitespace(template.format(base=base, location=location))
        if query not in variants:
            variants.append(query)
        if len(variants) == MAX_QUERY_VARIANTS:
            break
    return variants


def _merge_pair(kept: VendorCandidate, other: VendorCandidate) -> VendorCandidate:
    """Higher confidence wins (first seen on ties); certifications are pooled."""
    winner = other if other.confidence > kept.confidence else kept
    pooled = kept.certifications | other.certifications
    if pooled == winner.certifications:
        return winner
    return VendorCandidate(
        company_name=winner.company_name,
        website=winner.website,
        snippet=winner.snippet,
        business_type=winner.business_type,
        confidence=winner.confidence,
        volume_indicators=winner.volume_indicators,
        certifications=pooled,
        contact_info=winner.contact_info,
        source=winner.source,
    )


def merge_candidates(candidate_lists: Iterable[Iterable[VendorCandidate]]) -> List[VendorCandidate]:
    """
    Deduplicate candidates by ``dedup_key``.

    Idempotent: merging a merged list (or a list with itself) changes
    nothing. Output is ordered by confidence, then first appearance.
    """
    merged: Dict[str, VendorCandidate] = {}
    first_seen: Dict[str, int] = {}
    for candidates in candidate_lists:
        for candidate in candidates:
            key = candidate.dedup_key
            if not key:
                continue
            if key in merged:
                merged[key] = _merge_pair(merged[key], candidate)
            else:
                merged[key] = candidate
                first_seen[key] = len(first_seen)
    return sorted(merged.values(), key=lambda c: (-c.confidence, first_seen[c.dedup_key]))


def assess_data_quality(candidate_count: int, source_count: int,
                        thresholds: Optional[Dict[str, Dict[str, int]]] = None) -> DataQuality:
    """>=15 candidates from >=3 sources is High, >=8 from >=2 Medium, else Low."""
    thresholds = thresholds or SearchHeuristics().data_quality
    high, medium = thresholds['high'], thresholds['medium']
    if candidate_count >= high['candidates'] and source_count >= high['sources']:
        return DataQuality.HIGH
    if candidate_count >= medium['candidates'] and source_count >= medium['sources']:
        return DataQuality.MEDIUM
    return DataQuality.LOW


def categorize_by_type(candidates: Sequence[VendorCandidate]) -> Dict[str, List[VendorCandidate]]:
    buckets: Dict[str, List[VendorCandidate]] = {name: [] for name in TYPE_BUCKETS.values()}
    for candidate in candidates:
        buckets[TYPE_BUCKETS[candidate.business_type]].append(candidate)
    return buckets


@dataclass
class _AdapterCall:
    order: int
    adapter: SearchAdapter
    query: str
    candidates: List[VendorCandidate] = field(default_factory=list)
    error: Optional[str] = None


class VendorAggregator:
    """
    Multi-source vendor search.

    Usage:
        aggregator = VendorAggregator([GoogleSearchAdapter(...), KnownVendorsAdapter()])
        result = aggregator.aggregate("Iohexol", dosage="300 mg/ml", country="Latvia")
        for candidate in result.candidates:
            print(candidate.company_name, candidate.confidence)
    """

    def __init__(
        self,
        adapters: Sequence[SearchAdapter],
        llm_client: Optional[LLMClient] = None,
        heuristics: Optional[SearchHeuristics] = None,
        enrich: bool = True,
    ):
        if not adapters:
            raise ValueError("At least one search adapter is required")
        self.adapters = list(adapters)
        self.llm_client = llm_client
        self.heuristics = heuristics or SearchHeuristics.from_config()
        self.enrich = enrich

    def aggregate(
        self,
        medicine_name: str,
        dosage: Optional[str] = None,
        country: Optional[str] = None,
        search_depth: int = 3,
    ) -> AggregatedSearchResult:
        """
        Search all adapters and merge their candidates.

        Args:
            medicine_name: Medicine to find suppliers for
            dosage: Optional strength qualifier (e.g. "500 mg")
            country: Optional region qualifier
            search_depth: Number of query variants per adapter (1-5)

        Returns:
            AggregatedSearchResult (errors listed, never raised)

        Raises:
            ValueError: On empty medicine name or out-of-range depth
        """
        if not 1 <= search_depth <= MAX_QUERY_VARIANTS:
            raise ValueError(f"search_depth must be within 1..{MAX_QUERY_VARIANTS} (got {search_depth})")

        start = time.monotonic()
        variants = build_query_variants(medicine_name, dosage, country,
                                        self.heuristics.query_templates or None)
        calls = self._plan_calls(variants[:search_depth])
        logger.info("Searching %d adapter(s) with %d query variant(s) for %r",
                    len(self.adapters), min(search_depth, len(variants)), medicine_name)

        self._run_calls(calls, country)

        result = AggregatedSearchResult(medicine_name=medicine_name, search_query=variants[0])
        for call in calls:
            result.candidates_by_source[call.adapter.name] = (
                result.candidates_by_source.get(call.adapter.name, 0) + len(call.candidates))
            if call.error:
                result.errors.append(call.error)
        result.sources_used = [name for name, count in result.candidates_by_source.items() if count > 0]

        candidates = merge_candidates(call.candidates for call in calls)
        if self.enrich and self.llm_client is not None and candidates:
            candidates, error = enrich_candidates(self.llm_client, candidates, medicine_name,
                                                  self.heuristics.enrich_top_n)
            if error:
                result.errors.append(error)

        result.candidates = candidates
        result.candidates_by_type = categorize_by_type(candidates)
        result.data_quality = assess_data_quality(len(candidates), len(result.sources_used),
                                                  self.heuristics.data_quality)
        result.insights = generate_insights(
            self.llm_client, medicine_name, candidates,
            {name: len(bucket) for name, bucket in result.candidates_by_type.items()},
            country,
        )
        result.search_time = time.monotonic() - start

        logger.info("Found %d unique vendors from %d source(s) (%s quality) in %.1fs",
                    len(candidates), len(result.sources_used), result.data_quality.value,
                    result.search_time)
        return result

    def _plan_calls(self, variants: List[str]) -> List[_AdapterCall]:
        calls: List[_AdapterCall] = []
        for adapter in self.adapters:
            queries = variants if adapter.per_variant else variants[:1]
            for query in queries:
                calls.append(_AdapterCall(order=len(calls), adapter=adapter, query=query))
        return calls

    def _run_calls(self, calls: List[_AdapterCall], country: Optional[str]) -> None:
        """Run every call; each worker writes only to its own call object."""
        limiter = RateLimiter.from_millis(self.heuristics.delay_ms)

        def run(call: _AdapterCall) -> None:
            if call.adapter.remote:
                limiter.wait()
            call.candidates, call.error = call.adapter.search_with_error(call.query, country)

        workers = max(1, min(self.heuristics.max_workers, len(calls)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            # list() joins all workers and re-raises programmer errors
            list(pool.map(run, calls))
