"""
Root conftest.py — Shared fixtures for ALL tests (unit + integration)

Fixture hierarchy:
  autouse         : isolated_env (no DOCGATEWAY_* leakage, fresh settings cache)
  function-scoped : make_settings, all_keys, make_store, fake_providers,
                    make_gateway, descriptor_for, sample_payloads

Environment strategy:
  - Settings are built with _env_file=None so a developer's .env never
    leaks into a test run.
  - Every provider HTTP call goes through httpx.MockTransport backed by
    FakeProviders, which picks the provider from the request host/path and
    records every call in order. No test touches the network.

How to run:
  pytest                                   # all tests
  pytest -m unit                           # unit tests only
  pytest -m integration                    # FastAPI routing stack
  pytest tests/unit/test_gateway.py        # single file
"""

from __future__ import annotations

import os
from typing import Any

import httpx
import pytest

from docgateway.core.config import Settings, get_settings


# ─────────────────────────────────────────────────────────────────────────────
# Environment isolation
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Strip DOCGATEWAY_* variables and reset the cached Settings."""
    for key in list(os.environ):
        if key.upper().startswith("DOCGATEWAY_"):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ─────────────────────────────────────────────────────────────────────────────
# Settings factories
# ─────────────────────────────────────────────────────────────────────────────

ALL_KEYS: dict[str, str] = {
    "openai_api_key":           "sk-test-openai",
    "gemini_api_key":           "test-gemini-key",
    "anthropic_api_key":        "sk-ant-test",
    "huggingface_api_key":      "hf_test",
    "google_translate_api_key": "test-translate-key",
    "google_nlp_api_key":       "test-nlp-key",
}


@pytest.fixture
def make_settings():
    """
    Factory: Settings with no credentials unless given.

    Usage:
        settings = make_settings(gemini_api_key="k")
        settings = make_settings(**all_keys, enrichment_enabled=False)
    """
    def _build(**overrides: Any) -> Settings:
        return Settings(_env_file=None, **overrides)
    return _build


@pytest.fixture
def all_keys() -> dict[str, str]:
    return dict(ALL_KEYS)


@pytest.fixture
def make_store(make_settings):
    from docgateway.orchestration.registry import ConfigStore

    def _build(**overrides: Any) -> ConfigStore:
        return ConfigStore(make_settings(**overrides))
    return _build


@pytest.fixture
def descriptor_for(make_settings):
    """Descriptor for a provider name, built from a fully-keyed Settings."""
    from docgateway.orchestration.registry import ProviderRegistry

    def _get(name: str, **overrides: Any):
        settings = make_settings(**{**ALL_KEYS, **overrides})
        descriptor = ProviderRegistry.from_settings(settings).descriptor(name)
        assert descriptor is not None, name
        return descriptor
    return _get


# ─────────────────────────────────────────────────────────────────────────────
# Canonical provider payloads
# ─────────────────────────────────────────────────────────────────────────────

SAMPLE_PAYLOADS: dict[str, Any] = {
    "openai": {
        "id": "chatcmpl-1",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": "OpenAI answer."}}],
    },
    "gemini": {
        "candidates": [{"content": {"parts": [{"text": "Gemini answer."}], "role": "model"}}],
    },
    "anthropic": {
        "id": "msg_1",
        "type": "message",
        "content": [{"type": "text", "text": "Claude answer."}],
    },
    "huggingface": [{"summary_text": "Hugging Face summary."}],
    "google_translate": {
        "data": {"translations": [{"translatedText": "नमस्ते", "detectedSourceLanguage": "en"}]},
    },
    "google_natural_language": {
        "entities": [
            {"name": "Union of India", "type": "ORGANIZATION", "salience": 0.42},
            {"name": "R. Sharma",      "type": "PERSON",       "salience": 0.31},
        ],
        "documentSentiment": {"score": -0.6, "magnitude": 1.2},
    },
    "huggingface_ner": [
        {"entity_group": "ORG", "word": "Union of India", "score": 0.99},
        {"entity_group": "PER", "word": "R. Sharma",      "score": 0.97},
    ],
}


@pytest.fixture
def sample_payloads() -> dict[str, Any]:
    return SAMPLE_PAYLOADS


# ─────────────────────────────────────────────────────────────────────────────
# Fake provider backend (httpx.MockTransport)
# ─────────────────────────────────────────────────────────────────────────────

_HOSTS: dict[str, str] = {
    "api.openai.com":                    "openai",
    "generativelanguage.googleapis.com": "gemini",
    "api.anthropic.com":                 "anthropic",
    "translation.googleapis.com":        "google_translate",
    "language.googleapis.com":           "google_natural_language",
}


def provider_for(request: httpx.Request) -> str:
    host = request.url.host
    if host == "api-inference.huggingface.co":
        return "huggingface_ner" if "NER" in request.url.path else "huggingface"
    return _HOSTS.get(host, host)


class FakeProviders:
    """
    Scriptable stand-in for every external provider.

    Usage:
        fake.succeed("gemini")
        fake.reply("openai", status=503)
        fake.raise_error("anthropic", httpx.ConnectError("refused"))
        client = fake.client()
        ...
        assert fake.called == ["openai", "gemini"]
    """

    def __init__(self) -> None:
        self._responses: dict[str, Any] = {}
        self._clients:   list[httpx.AsyncClient] = []
        self.requests:   list[tuple[str, httpx.Request]] = []

    def succeed(self, provider: str) -> None:
        self.reply(provider, json=SAMPLE_PAYLOADS[provider])

    def reply(self, provider: str, *, status: int = 200, json: Any = None, content: bytes | None = None) -> None:
        self._responses[provider] = (status, json, content)

    def raise_error(self, provider: str, exc: Exception) -> None:
        self._responses[provider] = exc

    @property
    def called(self) -> list[str]:
        return [name for name, _ in self.requests]

    def requests_for(self, provider: str) -> list[httpx.Request]:
        return [req for name, req in self.requests if name == provider]

    def handler(self, request: httpx.Request) -> httpx.Response:
        provider = provider_for(request)
        self.requests.append((provider, request))

        spec = self._responses.get(provider)
        if spec is None:
            return httpx.Response(500, json={"error": f"no scripted response for {provider}"})
        if isinstance(spec, Exception):
            raise spec

        status, body, content = spec
        if content is not None:
            return httpx.Response(status, content=content)
        return httpx.Response(status, json=body if body is not None else {})

    def client(self) -> httpx.AsyncClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        self._clients.append(client)
        return client

    async def aclose(self) -> None:
        for client in self._clients:
            await client.aclose()


@pytest.fixture
async def fake_providers():
    fake = FakeProviders()
    yield fake
    await fake.aclose()


@pytest.fixture
def make_gateway(make_store, fake_providers):
    """
    Factory: DocumentTaskGateway wired to FakeProviders.

    Usage:
        gateway = make_gateway(gemini_api_key="k")
        gateway = make_gateway(**all_keys, enrichment_enabled=False)
    """
    from docgateway.orchestration.gateway import DocumentTaskGateway

    def _build(**overrides: Any) -> DocumentTaskGateway:
        return DocumentTaskGateway(store=make_store(**overrides), client=fake_providers.client())
    return _build
