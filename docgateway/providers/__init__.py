"""
Provider Adapters

One adapter per external service, keyed by the descriptor name the
registry uses:

  openai                   OpenAI Chat Completions
  gemini                   Google Gemini generateContent
  anthropic                Anthropic Messages
  huggingface              Hugging Face Inference (generation / summarization)
  google_translate         Google Cloud Translation v2
  google_natural_language  Google Cloud Natural Language annotateText
  huggingface_ner          Hugging Face Inference (token classification)
"""

from docgateway.providers.anthropic import AnthropicAdapter
from docgateway.providers.base import (
    AdapterError,
    AdapterResult,
    ProviderAdapter,
    ProviderCall,
    RequestSpec,
)
from docgateway.providers.gemini import GeminiAdapter
from docgateway.providers.google import GoogleNaturalLanguageAdapter, GoogleTranslateAdapter
from docgateway.providers.huggingface import HuggingFaceAdapter, HuggingFaceNERAdapter
from docgateway.providers.openai import OpenAIAdapter


def default_adapters() -> dict[str, ProviderAdapter]:
    adapters: list[ProviderAdapter] = [
        OpenAIAdapter(),
        GeminiAdapter(),
        AnthropicAdapter(),
        HuggingFaceAdapter(),
        GoogleTranslateAdapter(),
        GoogleNaturalLanguageAdapter(),
        HuggingFaceNERAdapter(),
    ]
    return {a.name: a for a in adapters}


__all__ = [
    "AdapterError",
    "AdapterResult",
    "ProviderAdapter",
    "ProviderCall",
    "RequestSpec",
    "default_adapters",
]
