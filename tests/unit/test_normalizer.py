"""
Unit Tests — ResponseNormalizer
═══════════════════════════════
Coverage targets:
  ✅ Canonical payload of every provider → ok, text extracted
  ✅ Entities + sentiment from Google Natural Language
  ✅ NER grouping, de-duplication
  ✅ Missing fields / wrong types / empty text → MALFORMED_RESPONSE, never raises
  ✅ Unknown provider name → MALFORMED_RESPONSE
"""

from __future__ import annotations

import pytest

from docgateway.orchestration.normalizer import (
    MalformedPayload,
    ResponseNormalizer,
    dig,
    format_entities,
    polarity_for,
)
from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.schemas.tasks import Capability, FailureKind, Polarity


@pytest.fixture
def normalizer() -> ResponseNormalizer:
    return ResponseNormalizer()


@pytest.mark.unit
class TestCanonicalPayloads:

    @pytest.mark.parametrize("provider,expected", [
        ("openai",           "OpenAI answer."),
        ("gemini",           "Gemini answer."),
        ("anthropic",        "Claude answer."),
        ("huggingface",      "Hugging Face summary."),
        ("google_translate", "नमस्ते"),
    ])
    def test_text_providers(self, normalizer, descriptor_for, sample_payloads, provider, expected):
        result = normalizer.normalize(descriptor_for(provider), sample_payloads[provider])
        assert result.ok
        assert result.text == expected
        assert result.failure is None

    def test_google_natural_language(self, normalizer, descriptor_for, sample_payloads):
        result = normalizer.normalize(
            descriptor_for("google_natural_language"), sample_payloads["google_natural_language"],
        )
        assert result.ok
        assert [(e.name, e.type) for e in result.entities] == [
            ("Union of India", "ORGANIZATION"), ("R. Sharma", "PERSON"),
        ]
        assert result.entities[0].salience == pytest.approx(0.42)
        assert result.sentiment.score == pytest.approx(-0.6)
        assert result.sentiment.polarity is Polarity.NEGATIVE
        assert result.text == "- Union of India (ORGANIZATION)\n- R. Sharma (PERSON)"

    def test_huggingface_ner_dedupes(self, normalizer, descriptor_for):
        payload = [
            {"entity_group": "ORG", "word": "Union of India", "score": 0.99},
            {"entity_group": "ORG", "word": "Union of India", "score": 0.95},
            {"entity": "B-PER", "word": " Sharma ", "score": 0.9},
            {"entity_group": "LOC", "word": "", "score": 0.5},
        ]
        result = normalizer.normalize(descriptor_for("huggingface_ner"), payload)
        assert result.ok
        assert [(e.name, e.type) for e in result.entities] == [("Union of India", "ORG"), ("Sharma", "B-PER")]
        assert result.sentiment is None

    def test_huggingface_generated_text_object(self, normalizer, descriptor_for):
        result = normalizer.normalize(descriptor_for("huggingface"), {"generated_text": "  Answer.  "})
        assert result.ok and result.text == "Answer."

    def test_anthropic_skips_non_text_blocks(self, normalizer, descriptor_for):
        payload = {"content": [{"type": "tool_use", "id": "t1"}, {"type": "text", "text": "Final."}]}
        assert normalizer.normalize(descriptor_for("anthropic"), payload).text == "Final."

    def test_no_entities_is_still_a_success(self, normalizer, descriptor_for):
        result = normalizer.normalize(descriptor_for("google_natural_language"), {"entities": []})
        assert result.ok
        assert result.entities == ()
        assert result.text == "No named entities detected."


@pytest.mark.unit
class TestMalformedPayloads:

    @pytest.mark.parametrize("provider,payload", [
        ("openai",                  {"choices": []}),
        ("openai",                  {"error": {"message": "quota"}}),
        ("openai",                  {"choices": [{"message": {"content": None}}]}),
        ("gemini",                  {"candidates": [{"finishReason": "SAFETY"}]}),
        ("gemini",                  {"candidates": [{"content": {"parts": [{"text": "   "}]}}]}),
        ("anthropic",               {"content": "not a list"}),
        ("anthropic",               {"content": []}),
        ("huggingface",             []),
        ("huggingface",             [{"label": "x"}]),
        ("huggingface",             "plain string"),
        ("google_translate",        {"data": {"translations": []}}),
        ("google_natural_language", {"documentSentiment": {"score": 0.1}}),
        ("google_natural_language", {"entities": "none"}),
        ("huggingface_ner",         {"error": "Model is loading"}),
        ("openai",                  None),
    ])
    def test_malformed_is_classified_not_raised(self, normalizer, descriptor_for, provider, payload):
        result = normalizer.normalize(descriptor_for(provider), payload)
        assert not result.ok
        assert result.failure is FailureKind.MALFORMED_RESPONSE
        assert result.detail

    def test_unknown_provider(self, normalizer):
        descriptor = ProviderDescriptor(name="mystery", capability=Capability.TEXT_GENERATION, base_url="http://x")
        result = normalizer.normalize(descriptor, {"text": "hi"})
        assert result.failure is FailureKind.MALFORMED_RESPONSE
        assert "mystery" in result.detail

    def test_custom_mapping_errors_are_contained(self, descriptor_for):
        def _broken(payload):
            return payload.upper()   # AttributeError on dict
        normalizer = ResponseNormalizer({"openai": _broken})
        result = normalizer.normalize(descriptor_for("openai"), {"choices": []})
        assert result.failure is FailureKind.MALFORMED_RESPONSE
        assert "AttributeError" in result.detail


@pytest.mark.unit
class TestHelpers:

    def test_dig(self):
        assert dig({"a": [{"b": 1}]}, "a", 0, "b") == 1
        with pytest.raises(MalformedPayload, match="missing index"):
            dig({"a": []}, "a", 0)
        with pytest.raises(MalformedPayload, match="missing field 'c'"):
            dig({"a": {}}, "a", "c")

    @pytest.mark.parametrize("score,polarity", [
        (0.8,   Polarity.POSITIVE),
        (0.1,   Polarity.NEUTRAL),
        (0.0,   Polarity.NEUTRAL),
        (-0.1,  Polarity.NEUTRAL),
        (-0.25, Polarity.NEGATIVE),
    ])
    def test_polarity_for(self, score, polarity):
        assert polarity_for(score) is polarity

    def test_format_entities_empty(self):
        assert format_entities([]) == "No named entities detected."
