"""OpenAI Chat Completions adapter."""

from __future__ import annotations

from typing import Any

from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.providers.base import ProviderAdapter, ProviderCall, RequestSpec, bearer


class OpenAIAdapter(ProviderAdapter):
    """POST {base}/chat/completions with a system + user message array."""

    name = "openai"

    def build_request(self, descriptor: ProviderDescriptor, call: ProviderCall) -> RequestSpec:
        messages: list[dict[str, str]] = []
        if call.system:
            messages.append({"role": "system", "content": call.system})
        messages.append({"role": "user", "content": call.prompt})

        payload: dict[str, Any] = {
            "model":       descriptor.model,
            "messages":    messages,
            "max_tokens":  descriptor.max_tokens,
            "temperature": descriptor.temperature,
        }
        return RequestSpec(
            method="POST",
            url=f"{descriptor.base_url}/chat/completions",
            headers=bearer(descriptor),
            json=payload,
        )

    def probe_request(self, descriptor: ProviderDescriptor) -> RequestSpec:
        return RequestSpec(method="GET", url=f"{descriptor.base_url}/models", headers=bearer(descriptor))
