"""
Language-Model Vendor Knowledge

- LLMClient: thin wrapper over the OpenAI chat completions API
- parse_json_payload: tolerant JSON extraction from model output
- LLMKnowledgeAdapter: vendor candidates from model knowledge
- enrich_candidates / generate_insights: post-merge enrichment steps
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

import openai

from ..common.text_utils import normalize_domain
from ..models import (
    BusinessType,
    ContactInfo,
    InsightSummary,
    VendorCandidate,
    VolumeIndicators,
)
from .base import SearchAdapter

logger = logging.getLogger(__name__)

SUPPLY_CHAIN_SYSTEM_PROMPT = (
    "You are an expert in pharmaceutical supply chains with extensive "
    "knowledge of global medicine suppliers. Answer with JSON only."
)

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)

KNOWLEDGE_CONFIDENCE_WITH_WEBSITE = 0.9
KNOWLEDGE_CONFIDENCE = 0.7
ENRICHMENT_CONFIDENCE = 0.7


class LLMClient:
    """
    Chat completion client.

    Usage:
        client = LLMClient(api_key="sk-...", model="gpt-4o-mini")
        text = client.complete("List vendors as JSON", max_tokens=500)
    """

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", timeout: float = 30.0,
                 client: Optional[openai.OpenAI] = None):
        if not api_key and client is None:
            raise ValueError("OpenAI API key is required")
        self.model = model
        self._client = client or openai.OpenAI(api_key=api_key, timeout=timeout)

    def complete(self, prompt: str, max_tokens: int = 1500, system: Optional[str] = None) -> str:
        """
        Run one chat completion.

        Raises:
            openai.OpenAIError: On API failures (callers isolate these)
        """
        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})
        response = self._client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
        )
        return (response.choices[0].message.content or "").strip()


def parse_json_payload(text: str) -> Optional[Any]:
    """
    Parse JSON from model output that may be fenced or wrapped in prose.

    Returns:
        Parsed object/array, or None when nothing parses
    """
    if not text or not text.strip():
        return None
    cleaned = _FENCE_RE.sub("", text.strip())
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    # Fall back to the outermost {...} or [...] span
    for opener, closer in (("{", "}"), ("[", "]")):
        start, end = cleaned.find(opener), cleaned.rfind(closer)
        if start != -1 and end > start:
            try:
                return json.loads(cleaned[start:end + 1])
            except json.JSONDecodeError:
                continue
    logger.warning("Could not parse JSON from model output (%d chars)", len(text))
    return None


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


def _as_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def _string_set(value: Any) -> set:
    if not isinstance(value, list):
        return set()
    return {v.strip() for v in value if isinstance(v, str) and v.strip()}


def _vendor_from_json(item: Dict[str, Any], source: str) -> Optional[VendorCandidate]:
    name = item.get("companyName") or item.get("company_name") or item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    name = name.strip()
    website = item.get("website")
    # Only real hostnames count as websites; "N/A" and the like are dropped
    if not isinstance(website, str) or normalize_domain(website) is None:
        website = None
    contact = item.get("contactInfo") or {}
    return VendorCandidate(
        company_name=name,
        website=website,
        snippet=item.get("snippet") or f"{item.get('businessType', 'Supplier')} of pharmaceutical products",
        business_type=BusinessType.parse(item.get("businessType")),
        confidence=KNOWLEDGE_CONFIDENCE_WITH_WEBSITE if website else KNOWLEDGE_CONFIDENCE,
        volume_indicators=VolumeIndicators(
            bulk_supplier=True,
            serves_hospitals=bool(item.get("servesHospitals")),
            international_shipping=bool(item.get("internationalShipping")),
        ),
        certifications=_string_set(item.get("certifications")),
        contact_info=ContactInfo(
            email=contact.get("email") if isinstance(contact, dict) else None,
            phone=contact.get("phone") if isinstance(contact, dict) else None,
        ),
        source=source,
    )


class LLMKnowledgeAdapter(SearchAdapter):
    """
    Vendor candidates from the language model's own knowledge.

    Called once per aggregation with the base query rather than once per
    query variant.
    """

    name = "llm"
    per_variant = False

    def __init__(self, client: LLMClient, max_tokens: int = 2000):
        self.client = client
        self.max_tokens = max_tokens

    def _search(self, query: str, locale: Optional[str]) -> List[VendorCandidate]:
        prompt = (
            "List reputable wholesale suppliers, distributors and manufacturers "
            "for the following medicine.\n\n"
            f"Medicine query: {query}\n"
            f"Region: {locale or 'International'}\n\n"
            "Focus on B2B suppliers, not retail pharmacies. Only name real companies.\n"
            'Respond as JSON: {"vendors": [{"companyName": "...", '
            '"businessType": "Wholesaler|Distributor|Manufacturer", "website": "https://...", '
            '"snippet": "...", "certifications": ["GDP"], "servesHospitals": true, '
            '"internationalShipping": false, "contactInfo": {"email": "...", "phone": "..."}}]}'
        )
        payload = parse_json_payload(self.client.complete(prompt, self.max_tokens, SUPPLY_CHAIN_SYSTEM_PROMPT))
        if isinstance(payload, dict):
            items = payload.get("vendors") or []
        elif isinstance(payload, list):
            items = payload
        else:
            return []

        candidates = []
        for item in items:
            if isinstance(item, dict):
                candidate = _vendor_from_json(item, self.name)
                if candidate is not None:
                    candidates.append(candidate)
        return candidates


def _merge_enhancement(candidate: VendorCandidate, enhancement: Dict[str, Any]) -> VendorCandidate:
    business_type = BusinessType.parse(enhancement.get("businessType"))
    if business_type == BusinessType.UNKNOWN:
        business_type = candidate.business_type
    confidence = _clamp(_as_float(enhancement.get("confidence"), ENRICHMENT_CONFIDENCE) or ENRICHMENT_CONFIDENCE)
    return VendorCandidate(
        company_name=candidate.company_name,
        website=candidate.website,
        snippet=candidate.snippet,
        business_type=business_type,
        confidence=max(candidate.confidence, confidence),
        volume_indicators=VolumeIndicators(
            bulk_supplier=candidate.volume_indicators.bulk_supplier,
            minimum_order_qty=candidate.volume_indicators.minimum_order_qty,
            serves_hospitals=(
                candidate.volume_indicators.serves_hospitals
                or bool(enhancement.get("servesHospitals"))
                or _as_float(enhancement.get("hospitalLikelihood"), 0.0) >= 0.5
            ),
            international_shipping=(
                candidate.volume_indicators.international_shipping
                or bool(enhancement.get("internationalShipping"))
            ),
        ),
        certifications=candidate.certifications | _string_set(enhancement.get("certifications")),
        contact_info=candidate.contact_info,
        source=candidate.source,
    )


def enrich_candidates(client: LLMClient, candidates: Sequence[VendorCandidate], medicine_name: str,
                      top_n: int = 20) -> Tuple[List[VendorCandidate], Optional[str]]:
    """
    Ask the model to refine the top ``top_n`` candidates, merged back by position.

    Confidence never decreases. On any failure the input list is returned
    unchanged along with an error description.

    Returns:
        (candidates, error or None)
    """
    candidates = list(candidates)
    head = candidates[:top_n]
    if not head:
        return candidates, None

    vendor_list = [{"name": c.company_name, "website": c.website, "snippet": c.snippet} for c in head]
    prompt = (
        f"Analyze these potential pharmaceutical vendors for {medicine_name}:\n\n"
        f"{json.dumps(vendor_list, indent=2, ensure_ascii=False)}\n\n"
        "For each vendor, in the same order, return an object with: businessType "
        "(Wholesaler, Distributor, Manufacturer, Retailer), hospitalLikelihood (0-1), "
        "internationalShipping (bool), certifications (array), confidence (0-1).\n"
        "Return a JSON array only."
    )
    try:
        payload = parse_json_payload(client.complete(prompt, 1500, SUPPLY_CHAIN_SYSTEM_PROMPT))
    except openai.OpenAIError as e:
        error_msg = f"llm enrichment: {type(e).__name__}: {str(e)[:100]}"
        logger.error("%s", error_msg)
        return candidates, error_msg

    if isinstance(payload, dict):
        payload = payload.get("vendors")
    if not isinstance(payload, list):
        return candidates, "llm enrichment: unparseable response"

    enriched = []
    for index, candidate in enumerate(head):
        enhancement = payload[index] if index < len(payload) else None
        if not isinstance(enhancement, dict):
            enriched.append(candidate)
            continue
        try:
            enriched.append(_merge_enhancement(candidate, enhancement))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping enrichment for %s: %s: %s", candidate.company_name, type(e).__name__, str(e)[:100])
            enriched.append(candidate)
    logger.info("Enriched %d of %d candidates", len(enriched), len(candidates))
    return enriched + candidates[top_n:], None


def fallback_insights(medicine_name: str, candidates: Sequence[VendorCandidate]) -> InsightSummary:
    return InsightSummary(
        summary=f"Found {len(candidates)} potential vendors for {medicine_name}",
        recommendations=['Review vendor list', 'Contact top-rated suppliers', 'Verify certifications']
        if candidates else [],
    )


def generate_insights(client: Optional[LLMClient], medicine_name: str, candidates: Sequence[VendorCandidate],
                      by_type: Dict[str, int], region: Optional[str] = None) -> InsightSummary:
    """Free-text synthesis of the vendor landscape; deterministic fallback without a model."""
    if client is None or not candidates:
        return fallback_insights(medicine_name, candidates)

    summary = {
        "total": len(candidates),
        "byType": by_type,
        "topVendors": [
            {"name": c.company_name, "type": c.business_type.value, "confidence": c.confidence}
            for c in candidates[:5]
        ],
    }
    prompt = (
        "Analyze these medicine vendor search results and provide procurement insights.\n\n"
        f"Medicine: {medicine_name}\nRegion: {region or 'International'}\n"
        f"Vendors found: {json.dumps(summary, indent=2, ensure_ascii=False)}\n\n"
        "Respond as JSON with keys: summary, marketAnalysis, recommendations (array), "
        "warnings (array), nextSteps (array)."
    )
    try:
        payload = parse_json_payload(client.complete(
            prompt, 1500, "You are a pharmaceutical procurement strategist."))
    except openai.OpenAIError as e:
        logger.error("Insight generation failed: %s", e)
        return fallback_insights(medicine_name, candidates)

    if not isinstance(payload, dict):
        return fallback_insights(medicine_name, candidates)

    def _strings(key):
        value = payload.get(key) or []
        return [str(v) for v in value] if isinstance(value, list) else [str(value)]

    return InsightSummary(
        summary=str(payload.get("summary") or f"Found {len(candidates)} potential vendors for {medicine_name}"),
        market_analysis=str(payload.get("marketAnalysis") or ""),
        recommendations=_strings("recommendations"),
        warnings=_strings("warnings"),
        next_steps=_strings("nextSteps"),
    )
