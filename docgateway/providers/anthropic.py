"""Anthropic Messages API adapter."""

from __future__ import annotations

from typing import Any

from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.providers.base import ProviderAdapter, ProviderCall, RequestSpec

ANTHROPIC_VERSION = "2023-06-01"


def _headers(descriptor: ProviderDescriptor) -> dict[str, str]:
    return {
        "x-api-key":         descriptor.credential("api_key"),
        "anthropic-version": ANTHROPIC_VERSION,
        "Content-Type":      "application/json",
    }


class AnthropicAdapter(ProviderAdapter):
    """
    POST {base}/messages

    The system prompt is a top-level `system` field, NOT a message with
    role "system" (the opposite of OpenAI).
    """

    name = "anthropic"

    def build_request(self, descriptor: ProviderDescriptor, call: ProviderCall) -> RequestSpec:
        payload: dict[str, Any] = {
            "model":       descriptor.model,
            "max_tokens":  descriptor.max_tokens,
            "temperature": descriptor.temperature,
            "messages":    [{"role": "user", "content": call.prompt}],
        }
        if call.system:
            payload["system"] = call.system
        return RequestSpec(
            method="POST",
            url=f"{descriptor.base_url}/messages",
            headers=_headers(descriptor),
            json=payload,
        )

    def probe_request(self, descriptor: ProviderDescriptor) -> RequestSpec:
        return RequestSpec(method="GET", url=f"{descriptor.base_url}/models", headers=_headers(descriptor))
