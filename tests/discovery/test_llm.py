"""Tests for pharmascout/discovery/llm.py"""

from unittest.mock import MagicMock

import openai
import pytest

from pharmascout.discovery.llm import (
    LLMClient,
    LLMKnowledgeAdapter,
    enrich_candidates,
    generate_insights,
    parse_json_payload,
)
from pharmascout.discovery import merge_candidates
from pharmascout.models import BusinessType, VendorCandidate


@pytest.fixture
def llm_client():
    client = MagicMock(spec=LLMClient)
    return client


class TestParseJsonPayload:
    def test_plain(self):
        assert parse_json_payload('{"vendors": []}') == {"vendors": []}

    def test_fenced(self):
        assert parse_json_payload('```json\n[{"a": 1}]\n```') == [{"a": 1}]

    def test_wrapped_in_prose(self):
        assert parse_json_payload('Here you go: {"summary": "ok"} Hope it helps.') == {"summary": "ok"}

    def test_unparseable(self):
        assert parse_json_payload("no json here") is None
        assert parse_json_payload("") is None


class TestLLMClient:
    def test_requires_key(self):
        with pytest.raises(ValueError, match="API key"):
            LLMClient("")

    def test_complete_sends_messages(self):
        sdk = MagicMock()
        sdk.chat.completions.create.return_value.choices = [MagicMock(message=MagicMock(content=" hi "))]
        client = LLMClient("", model="gpt-4o-mini", client=sdk)
        assert client.complete("prompt", max_tokens=10, system="sys") == "hi"
        kwargs = sdk.chat.completions.create.call_args.kwargs
        assert kwargs["messages"][0] == {"role": "system", "content": "sys"}
        assert kwargs["max_tokens"] == 10


class TestLLMKnowledgeAdapter:
    def test_vendors_from_response(self, llm_client):
        llm_client.complete.return_value = (
            '{"vendors": [{"companyName": "GE Healthcare", "businessType": "Manufacturer", '
            '"website": "https://www.gehealthcare.com", "certifications": ["GMP"]}, '
            '{"companyName": "Local Pharma", "businessType": "wholesaler"}, {"website": "x"}]}'
        )
        candidates = LLMKnowledgeAdapter(llm_client).search("iohexol")
        assert [c.company_name for c in candidates] == ["GE Healthcare", "Local Pharma"]
        assert candidates[0].confidence == 0.9
        assert candidates[1].confidence == 0.7
        assert candidates[1].business_type == BusinessType.WHOLESALER

    def test_placeholder_websites_do_not_merge_vendors(self, llm_client):
        llm_client.complete.return_value = (
            '{"vendors": [{"companyName": "Tamro", "website": "N/A"}, '
            '{"companyName": "Magnum Medical", "website": "N/A"}]}'
        )
        candidates = LLMKnowledgeAdapter(llm_client).search("iohexol")
        assert [c.website for c in candidates] == [None, None]
        assert candidates[0].confidence == 0.7
        assert len(merge_candidates([candidates])) == 2

    def test_malformed_fields_ignored(self, llm_client):
        llm_client.complete.return_value = (
            '{"vendors": [{"companyName": 42}, {"companyName": "Tamro", "website": 7, '
            '"businessType": 3, "certifications": [{"name": "GDP"}, "GMP"]}]}'
        )
        candidates = LLMKnowledgeAdapter(llm_client).search("iohexol")
        assert len(candidates) == 1
        assert candidates[0].website is None
        assert candidates[0].business_type == BusinessType.UNKNOWN
        assert candidates[0].certifications == {"GMP"}

    def test_unparseable_response(self, llm_client):
        llm_client.complete.return_value = "I cannot help with that."
        assert LLMKnowledgeAdapter(llm_client).search("iohexol") == []

    def test_api_error_isolated(self, llm_client):
        llm_client.complete.side_effect = openai.OpenAIError("quota exceeded")
        candidates, error = LLMKnowledgeAdapter(llm_client).search_with_error("iohexol")
        assert candidates == []
        assert error.startswith("llm: OpenAIError")

    def test_called_once_per_aggregation(self):
        assert LLMKnowledgeAdapter.per_variant is False


class TestEnrichCandidates:
    def test_confidence_never_decreases(self, llm_client):
        candidates = [
            VendorCandidate(company_name="Acme", website="https://acme.lv", confidence=0.9),
            VendorCandidate(company_name="Baltic Med", confidence=0.5),
        ]
        llm_client.complete.return_value = (
            '[{"businessType": "Distributor", "confidence": 0.4, "hospitalLikelihood": 0.8}, '
            '{"confidence": 0.85, "certifications": ["GDP"]}]'
        )
        enriched, error = enrich_candidates(llm_client, candidates, "iohexol")
        assert error is None
        assert enriched[0].confidence == 0.9
        assert enriched[0].business_type == BusinessType.DISTRIBUTOR
        assert enriched[0].volume_indicators.serves_hospitals
        assert enriched[1].confidence == 0.85
        assert enriched[1].certifications == {"GDP"}

    def test_only_top_n_sent(self, llm_client):
        candidates = [VendorCandidate(company_name=f"V{i}") for i in range(3)]
        llm_client.complete.return_value = "[]"
        enriched, _ = enrich_candidates(llm_client, candidates, "iohexol", top_n=2)
        assert enriched == candidates
        assert "V2" not in llm_client.complete.call_args.args[0]

    def test_api_error_returns_input(self, llm_client):
        candidates = [VendorCandidate(company_name="Acme")]
        llm_client.complete.side_effect = openai.OpenAIError("timeout")
        enriched, error = enrich_candidates(llm_client, candidates, "iohexol")
        assert enriched == candidates
        assert "OpenAIError" in error

    def test_malformed_enhancement_keeps_candidate(self, llm_client):
        candidates = [
            VendorCandidate(company_name="Acme", business_type=BusinessType.WHOLESALER, confidence=0.6),
            VendorCandidate(company_name="Baltic Med", certifications={"GDP"}, confidence=0.5),
        ]
        llm_client.complete.return_value = (
            '[{"businessType": 3, "confidence": 0.7}, {"certifications": [{"name": "GMP"}]}]'
        )
        enriched, error = enrich_candidates(llm_client, candidates, "iohexol")
        assert error is None
        assert enriched[0].business_type == BusinessType.WHOLESALER
        assert enriched[0].confidence == 0.7
        assert enriched[1].certifications == {"GDP"}

    def test_merge_failure_keeps_candidate(self, llm_client, monkeypatch):
        candidates = [VendorCandidate(company_name="Acme", confidence=0.6)]
        llm_client.complete.return_value = '[{"confidence": 0.9}]'

        def broken_merge(candidate, enhancement):
            raise TypeError("unhashable type")

        monkeypatch.setattr("pharmascout.discovery.llm._merge_enhancement", broken_merge)
        enriched, error = enrich_candidates(llm_client, candidates, "iohexol")
        assert error is None
        assert enriched == candidates


class TestGenerateInsights:
    def test_fallback_without_client(self):
        insights = generate_insights(None, "iohexol", [VendorCandidate(company_name="Acme")], {})
        assert insights.summary == "Found 1 potential vendors for iohexol"
        assert insights.recommendations

    def test_model_response(self, llm_client):
        llm_client.complete.return_value = (
            '{"summary": "Two manufacturers dominate", "recommendations": ["Contact GE"], "warnings": "Few sources"}')
        insights = generate_insights(llm_client, "iohexol", [VendorCandidate(company_name="Acme")], {})
        assert insights.summary == "Two manufacturers dominate"
        assert insights.recommendations == ["Contact GE"]
        assert insights.warnings == ["Few sources"]
