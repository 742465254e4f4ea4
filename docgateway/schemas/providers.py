"""
Provider status schemas for the /api/v1/providers endpoints.

Credential values never appear in any response model: callers only learn
whether a provider is configured, never with what.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docgateway.schemas.tasks import Capability


class ConnectionState(str, Enum):
    CONNECTED      = "connected"
    FAILED         = "failed"
    NOT_CONFIGURED = "not_configured"


class ProviderStatus(BaseModel):
    name:       str
    capability: Capability
    model:      str | None = None
    base_url:   str
    available:  bool


class ProviderCheck(BaseModel):
    name:   str
    state:  ConnectionState
    detail: str | None = None


class CredentialUpdate(BaseModel):
    """
    Replacement credentials. Omitted fields keep their current value; an
    empty string clears the credential and disables the provider.
    """
    model_config = ConfigDict(extra="forbid")

    openai_api_key:           str | None = Field(None, repr=False)
    gemini_api_key:           str | None = Field(None, repr=False)
    anthropic_api_key:        str | None = Field(None, repr=False)
    huggingface_api_key:      str | None = Field(None, repr=False)
    google_translate_api_key: str | None = Field(None, repr=False)
    google_nlp_api_key:       str | None = Field(None, repr=False)

    @field_validator("*")
    @classmethod
    def ascii_only(cls, v: str | None) -> str | None:
        # keys travel in HTTP headers, which httpx encodes as ASCII
        if v is not None and not v.isascii():
            raise ValueError("API keys must contain only ASCII characters")
        return v

    def changes(self) -> dict[str, str]:
        return {k: v.strip() for k, v in self.model_dump(exclude_none=True).items()}
