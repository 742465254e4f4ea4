"""
Hugging Face Inference API adapters.

Two descriptors share one API key:
  huggingface      text generation; summarize uses a dedicated
                   summarization model fed the raw document
  huggingface_ner  token classification for entity extraction
"""

from __future__ import annotations

from typing import Any

from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.providers.base import AdapterError, ProviderAdapter, ProviderCall, RequestSpec, bearer
from docgateway.schemas.tasks import TaskType

MIN_SUMMARY_LENGTH = 100
MAX_NER_CHARS      = 10_000


class HuggingFaceAdapter(ProviderAdapter):
    """POST {base}/{model} with {inputs, parameters}."""

    name = "huggingface"

    def _model_for(self, descriptor: ProviderDescriptor, call: ProviderCall) -> str:
        if call.task == TaskType.SUMMARIZE:
            return descriptor.option("summarization_model") or descriptor.model or ""
        return descriptor.model or ""

    def build_request(self, descriptor: ProviderDescriptor, call: ProviderCall) -> RequestSpec:
        model = self._model_for(descriptor, call)
        if not model:
            raise AdapterError("no Hugging Face model configured")

        summarizing = call.task == TaskType.SUMMARIZE and bool(call.text)
        max_length  = descriptor.max_tokens or 500
        payload: dict[str, Any] = {
            "inputs": call.text if summarizing else call.prompt,
            "parameters": {
                "max_length":  max_length,
                "min_length":  min(MIN_SUMMARY_LENGTH, max_length),
                "temperature": descriptor.temperature,
            },
        }
        return RequestSpec(
            method="POST",
            url=f"{descriptor.base_url}/{model}",
            headers=bearer(descriptor),
            json=payload,
        )

    def probe_request(self, descriptor: ProviderDescriptor) -> RequestSpec:
        return RequestSpec(method="GET", url=f"{descriptor.base_url}/{descriptor.model}", headers=bearer(descriptor))


class HuggingFaceNERAdapter(ProviderAdapter):
    """POST {base}/{ner_model} with grouped entity output."""

    name = "huggingface_ner"

    def build_request(self, descriptor: ProviderDescriptor, call: ProviderCall) -> RequestSpec:
        if not descriptor.model:
            raise AdapterError("no Hugging Face NER model configured")
        return RequestSpec(
            method="POST",
            url=f"{descriptor.base_url}/{descriptor.model}",
            headers=bearer(descriptor),
            json={
                "inputs":     call.text[:MAX_NER_CHARS],
                "parameters": {"aggregation_strategy": "simple"},
            },
        )

    def probe_request(self, descriptor: ProviderDescriptor) -> RequestSpec:
        return RequestSpec(method="GET", url=f"{descriptor.base_url}/{descriptor.model}", headers=bearer(descriptor))
