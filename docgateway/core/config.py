"""
Application configuration via environment variables (12-factor).
Pydantic BaseSettings validates and coerces all values at startup.

Every provider is configured independently. A provider whose credential
is empty is simply not available: the registry leaves it out and the
task falls back to the next provider, or to a placeholder result.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DOCGATEWAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Text generation — OpenAI
    # ------------------------------------------------------------------
    openai_api_key:     str   = ""
    openai_base_url:    str   = "https://api.openai.com/v1"
    openai_model:       str   = "gpt-3.5-turbo"
    openai_max_tokens:  int   = 1000
    openai_temperature: float = 0.3

    # ------------------------------------------------------------------
    # Text generation — Google Gemini
    # ------------------------------------------------------------------
    gemini_api_key:     str   = ""
    gemini_base_url:    str   = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model:       str   = "gemini-pro"
    gemini_max_tokens:  int   = 1000
    gemini_temperature: float = 0.3

    # ------------------------------------------------------------------
    # Text generation — Anthropic
    # ------------------------------------------------------------------
    anthropic_api_key:     str   = ""
    anthropic_base_url:    str   = "https://api.anthropic.com/v1"
    anthropic_model:       str   = "claude-3-haiku-20240307"
    anthropic_max_tokens:  int   = 2000
    anthropic_temperature: float = 0.3

    # ------------------------------------------------------------------
    # Text generation + NER — Hugging Face Inference API
    # ------------------------------------------------------------------
    huggingface_api_key:             str   = ""
    huggingface_base_url:            str   = "https://api-inference.huggingface.co/models"
    huggingface_model:               str   = "google/flan-t5-large"
    huggingface_summarization_model: str   = "facebook/bart-large-cnn"
    huggingface_max_tokens:          int   = 500
    huggingface_temperature:         float = 0.3
    huggingface_ner_model:           str   = "dslim/bert-base-NER"

    # ------------------------------------------------------------------
    # Translation — Google Cloud Translation v2
    # ------------------------------------------------------------------
    google_translate_api_key:  str = ""
    google_translate_base_url: str = "https://translation.googleapis.com/language/translate/v2"

    # ------------------------------------------------------------------
    # Entity extraction — Google Cloud Natural Language
    # ------------------------------------------------------------------
    google_nlp_api_key:  str = ""
    google_nlp_base_url: str = "https://language.googleapis.com/v1"

    # ------------------------------------------------------------------
    # Orchestration
    # ------------------------------------------------------------------
    provider_timeout_seconds: float = 30.0

    # task type -> ordered provider names; empty = built-in table
    provider_preferences: dict[str, list[str]] = {}

    enrichment_enabled:      bool = True
    enrichment_min_chars:    int  = 100
    enrichment_sample_chars: int  = 5_000
    enrichment_max_entities: int  = 10

    # ------------------------------------------------------------------
    # Application
    # ------------------------------------------------------------------
    app_env:   str = "development"   # development | staging | production
    debug:     bool = False
    log_level: str = "INFO"
    cors_origins: list[str] = []

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


# Fields a caller may replace at runtime through the credentials endpoint.
CREDENTIAL_FIELDS: frozenset[str] = frozenset(
    {
        "openai_api_key",
        "gemini_api_key",
        "anthropic_api_key",
        "huggingface_api_key",
        "google_translate_api_key",
        "google_nlp_api_key",
    }
)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
