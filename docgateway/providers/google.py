"""
Google Cloud adapters: Translation v2 and Natural Language v1.

Both take the API key as a `key` query parameter.
"""

from __future__ import annotations

from typing import Any

from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.providers.base import AdapterError, ProviderAdapter, ProviderCall, RequestSpec

MAX_NLP_CHARS = 10_000   # document size limit we send per request

_JSON = {"Content-Type": "application/json"}


def _key(descriptor: ProviderDescriptor) -> dict[str, str]:
    return {"key": descriptor.credential("api_key")}


class GoogleTranslateAdapter(ProviderAdapter):
    """POST {base}?key=... with {q, source, target, format, model}."""

    name = "google_translate"

    def build_request(self, descriptor: ProviderDescriptor, call: ProviderCall) -> RequestSpec:
        if not call.target_language:
            raise AdapterError("translation requires a target language")

        payload: dict[str, Any] = {
            "q":      call.text,
            "target": call.target_language,
            "format": "text",
            "model":  "nmt",
        }
        if call.source_language:
            payload["source"] = call.source_language
        return RequestSpec(
            method="POST",
            url=descriptor.base_url,
            headers=dict(_JSON),
            params=_key(descriptor),
            json=payload,
        )

    def probe_request(self, descriptor: ProviderDescriptor) -> RequestSpec:
        return RequestSpec(method="GET", url=f"{descriptor.base_url}/languages", params=_key(descriptor))


class GoogleNaturalLanguageAdapter(ProviderAdapter):
    """POST {base}/documents:annotateText: entities and document sentiment in one call."""

    name = "google_natural_language"

    @staticmethod
    def _envelope(text: str) -> dict[str, Any]:
        return {
            "document": {"content": text[:MAX_NLP_CHARS], "type": "PLAIN_TEXT"},
            "features": {"extractEntities": True, "extractDocumentSentiment": True},
            "encodingType": "UTF8",
        }

    def build_request(self, descriptor: ProviderDescriptor, call: ProviderCall) -> RequestSpec:
        return RequestSpec(
            method="POST",
            url=f"{descriptor.base_url}/documents:annotateText",
            headers=dict(_JSON),
            params=_key(descriptor),
            json=self._envelope(call.text),
        )

    def probe_request(self, descriptor: ProviderDescriptor) -> RequestSpec:
        return RequestSpec(
            method="POST",
            url=f"{descriptor.base_url}/documents:analyzeSentiment",
            headers=dict(_JSON),
            params=_key(descriptor),
            json={"document": {"content": "Connection check.", "type": "PLAIN_TEXT"}},
        )
