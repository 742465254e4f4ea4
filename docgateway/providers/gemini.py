"""Google Gemini generateContent adapter."""

from __future__ import annotations

from typing import Any

from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.providers.base import ProviderAdapter, ProviderCall, RequestSpec

_JSON = {"Content-Type": "application/json"}


class GeminiAdapter(ProviderAdapter):
    """
    POST {base}/models/{model}:generateContent?key=...

    Gemini's v1beta contents array has no system role, so the system
    instruction is prefixed to the user text.
    """

    name = "gemini"

    def build_request(self, descriptor: ProviderDescriptor, call: ProviderCall) -> RequestSpec:
        text = f"{call.system} {call.prompt}" if call.system else call.prompt
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "temperature":     descriptor.temperature,
                "maxOutputTokens": descriptor.max_tokens,
            },
        }
        return RequestSpec(
            method="POST",
            url=f"{descriptor.base_url}/models/{descriptor.model}:generateContent",
            headers=dict(_JSON),
            params={"key": descriptor.credential("api_key")},
            json=payload,
        )

    def probe_request(self, descriptor: ProviderDescriptor) -> RequestSpec:
        return RequestSpec(
            method="GET",
            url=f"{descriptor.base_url}/models",
            params={"key": descriptor.credential("api_key")},
        )
