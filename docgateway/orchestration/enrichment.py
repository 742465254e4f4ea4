"""
Enrichment Pipeline — Entity / Sentiment Signals before Generation

Before a text-generation task reaches its provider, the pipeline may run
one entity-extraction call over the document and attach a compact summary:

  Key entities detected: Union of India (ORGANIZATION), R. Sharma (PERSON).
  Document sentiment: negative.

Applies only when ALL hold:
  - enrichment_enabled is true
  - the task routes to text-generation
  - an entity-extraction provider is available
  - the document text is longer than enrichment_min_chars

Exactly one provider call: the first entity-extraction provider in
extract-entities routing order, over the first enrichment_sample_chars of
the document. No fallback to a second NLP provider.

Graceful degradation:
  Enrichment is best-effort. Any failure (transport, malformed payload or
  an unexpected adapter exception) is logged and the request is
  returned without signals. It never blocks generation.
"""

from __future__ import annotations

import logging

from docgateway.orchestration.fallback import FallbackExecutor
from docgateway.orchestration.registry import ConfigSnapshot
from docgateway.orchestration.requests import EnrichedRequest, EnrichmentSignals, TaskRequest
from docgateway.orchestration.router import TaskRouter
from docgateway.providers import ProviderCall
from docgateway.schemas.tasks import Capability, Entity, Sentiment, TaskType

logger = logging.getLogger(__name__)


def summarize_signals(entities: tuple[Entity, ...], sentiment: Sentiment | None) -> str:
    names   = ", ".join(f"{e.name} ({e.type})" for e in entities) or "none"
    summary = f"Key entities detected: {names}."
    if sentiment is not None:
        summary += f" Document sentiment: {sentiment.polarity.value}."
    return summary


class EnrichmentPipeline:
    """
    Usage::

        pipeline = EnrichmentPipeline(executor, router)
        enriched = await pipeline.enrich(request, store.snapshot())
    """

    def __init__(self, executor: FallbackExecutor, router: TaskRouter) -> None:
        self._executor = executor
        self._router   = router

    def applies_to(self, request: TaskRequest, snapshot: ConfigSnapshot) -> bool:
        settings = snapshot.settings
        return (
            settings.enrichment_enabled
            and self._router.route(request.task) == Capability.TEXT_GENERATION
            and len(request.document_text) > settings.enrichment_min_chars
        )

    async def enrich(self, request: TaskRequest, snapshot: ConfigSnapshot) -> EnrichedRequest:
        """Return the request with signals attached, or unchanged. Never raises."""
        plain = EnrichedRequest(request=request)
        if not self.applies_to(request, snapshot):
            return plain

        providers = self._router.providers_for(TaskType.EXTRACT_ENTITIES, snapshot.registry)
        if not providers:
            logger.debug("EnrichmentPipeline | no entity-extraction provider available, skipping")
            return plain

        descriptor = providers[0]
        settings   = snapshot.settings
        call       = ProviderCall(
            task=TaskType.EXTRACT_ENTITIES,
            text=request.document_text[: settings.enrichment_sample_chars],
        )

        try:
            record, normalized = await self._executor.attempt(descriptor, call)
        except Exception as exc:
            logger.warning(
                "EnrichmentPipeline | provider=%s error (non-fatal): %s",
                descriptor.name, exc, exc_info=True,
            )
            return plain

        if normalized is None:
            logger.warning(
                "EnrichmentPipeline | provider=%s failure=%s detail=%s (non-fatal)",
                descriptor.name,
                record.failure.value if record.failure else "-",
                record.detail,
            )
            return plain

        entities = normalized.entities[: settings.enrichment_max_entities]
        signals  = EnrichmentSignals(
            provider=descriptor.name,
            entities=entities,
            sentiment=normalized.sentiment,
            summary=summarize_signals(entities, normalized.sentiment),
        )
        logger.info(
            "EnrichmentPipeline | task=%s provider=%s entities=%d sentiment=%s",
            request.task.value, descriptor.name, len(entities),
            normalized.sentiment.polarity.value if normalized.sentiment else "-",
        )
        return EnrichedRequest(request=request, signals=signals)
