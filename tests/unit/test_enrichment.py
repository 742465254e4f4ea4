"""
Unit Tests — EnrichmentPipeline
═══════════════════════════════
Coverage targets:
  ✅ Entities + sentiment attached for long documents
  ✅ Short document / disabled / non-generation task → no call
  ✅ No extraction provider available → no call
  ✅ Extraction failure or exception → request unchanged, never raises
  ✅ Exactly one extraction call (no NLP fallback)
  ✅ Entity cap and sample size honoured
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from docgateway.orchestration.enrichment import EnrichmentPipeline, summarize_signals
from docgateway.orchestration.fallback import FallbackExecutor
from docgateway.orchestration.requests import TaskRequest
from docgateway.orchestration.router import TaskRouter
from docgateway.schemas.tasks import Entity, Polarity, Sentiment, TaskType

LONG_DOCUMENT = (
    "This lease agreement is made between R. Sharma and the Union of India. "
    "The lessee shall pay monthly rent and may terminate with ninety days notice. "
) * 3


@pytest.fixture
def pipeline_for(fake_providers):
    def _build(executor: FallbackExecutor | None = None) -> EnrichmentPipeline:
        return EnrichmentPipeline(executor or FallbackExecutor(fake_providers.client()), TaskRouter())
    return _build


@pytest.mark.unit
class TestEnrichmentPipeline:

    async def test_signals_attached(self, fake_providers, make_store, pipeline_for):
        fake_providers.succeed("google_natural_language")
        snapshot = make_store(google_nlp_api_key="nlp").snapshot()
        request  = TaskRequest.create(TaskType.SUMMARIZE, LONG_DOCUMENT)

        enriched = await pipeline_for().enrich(request, snapshot)

        assert enriched.request is request
        assert enriched.signals.provider == "google_natural_language"
        assert [e.name for e in enriched.signals.entities] == ["Union of India", "R. Sharma"]
        assert enriched.signals.sentiment.polarity is Polarity.NEGATIVE
        assert enriched.signals.summary == (
            "Key entities detected: Union of India (ORGANIZATION), R. Sharma (PERSON). "
            "Document sentiment: negative."
        )

    async def test_short_document_skipped(self, fake_providers, make_store, pipeline_for):
        snapshot = make_store(google_nlp_api_key="nlp").snapshot()
        enriched = await pipeline_for().enrich(TaskRequest.create(TaskType.SUMMARIZE, "Short note."), snapshot)
        assert enriched.signals is None
        assert fake_providers.called == []

    async def test_disabled_by_settings(self, fake_providers, make_store, pipeline_for):
        snapshot = make_store(google_nlp_api_key="nlp", enrichment_enabled=False).snapshot()
        enriched = await pipeline_for().enrich(TaskRequest.create(TaskType.SUMMARIZE, LONG_DOCUMENT), snapshot)
        assert enriched.signals is None
        assert fake_providers.called == []

    @pytest.mark.parametrize("task,options", [
        (TaskType.TRANSLATE,        {"target_language": "hi"}),
        (TaskType.EXTRACT_ENTITIES, None),
    ])
    async def test_non_generation_tasks_skipped(self, fake_providers, make_store, pipeline_for, task, options):
        snapshot = make_store(google_nlp_api_key="nlp").snapshot()
        enriched = await pipeline_for().enrich(TaskRequest.create(task, LONG_DOCUMENT, options=options), snapshot)
        assert enriched.signals is None
        assert fake_providers.called == []

    async def test_no_extraction_provider(self, fake_providers, make_store, pipeline_for):
        snapshot = make_store(openai_api_key="sk").snapshot()
        enriched = await pipeline_for().enrich(TaskRequest.create(TaskType.SUMMARIZE, LONG_DOCUMENT), snapshot)
        assert enriched.signals is None
        assert fake_providers.called == []

    async def test_question_uses_context_as_document(self, fake_providers, make_store, pipeline_for):
        fake_providers.succeed("google_natural_language")
        snapshot = make_store(google_nlp_api_key="nlp").snapshot()
        request  = TaskRequest.create(TaskType.ANSWER_QUESTION, "Who pays rent?", context=LONG_DOCUMENT)

        enriched = await pipeline_for().enrich(request, snapshot)

        assert enriched.signals is not None
        sent = json.loads(fake_providers.requests_for("google_natural_language")[0].content)
        assert sent["document"]["content"] == LONG_DOCUMENT

    async def test_failure_returns_request_unchanged(self, fake_providers, make_store, pipeline_for, caplog):
        fake_providers.reply("google_natural_language", status=403)
        fake_providers.succeed("huggingface_ner")
        snapshot = make_store(google_nlp_api_key="nlp", huggingface_api_key="hf").snapshot()

        enriched = await pipeline_for().enrich(TaskRequest.create(TaskType.SUMMARIZE, LONG_DOCUMENT), snapshot)

        assert enriched.signals is None
        # one call only: enrichment does not fall back to a second NLP provider
        assert fake_providers.called == ["google_natural_language"]
        assert "(non-fatal)" in caplog.text

    async def test_unexpected_exception_is_contained(self, make_store, pipeline_for, fake_providers):
        executor = FallbackExecutor(fake_providers.client())
        executor.attempt = AsyncMock(side_effect=RuntimeError("adapter bug"))
        snapshot = make_store(google_nlp_api_key="nlp").snapshot()

        enriched = await pipeline_for(executor).enrich(TaskRequest.create(TaskType.SUMMARIZE, LONG_DOCUMENT), snapshot)

        assert enriched.signals is None
        executor.attempt.assert_awaited_once()

    async def test_entity_cap_and_sample_size(self, fake_providers, make_store, pipeline_for):
        fake_providers.reply("huggingface_ner", json=[
            {"entity_group": "ORG", "word": f"Company {i}", "score": 0.9} for i in range(30)
        ])
        snapshot = make_store(
            huggingface_api_key="hf", enrichment_max_entities=3, enrichment_sample_chars=50,
        ).snapshot()

        enriched = await pipeline_for().enrich(TaskRequest.create(TaskType.SUMMARIZE, LONG_DOCUMENT), snapshot)

        assert [e.name for e in enriched.signals.entities] == ["Company 0", "Company 1", "Company 2"]
        sent = json.loads(fake_providers.requests_for("huggingface_ner")[0].content)
        assert sent["inputs"] == LONG_DOCUMENT[:50]


@pytest.mark.unit
class TestSummarizeSignals:

    def test_without_entities_or_sentiment(self):
        assert summarize_signals((), None) == "Key entities detected: none."

    def test_with_sentiment(self):
        summary = summarize_signals(
            (Entity(name="SEBI", type="ORG"),),
            Sentiment(score=0.5, polarity=Polarity.POSITIVE),
        )
        assert summary == "Key entities detected: SEBI (ORG). Document sentiment: positive."
