"""
Capability Registry — which providers are usable right now

The registry answers one question:
  "Which providers can perform capability X with the current configuration?"

A provider is available iff every credential it needs is non-empty. That is
a pure function of the settings snapshot the registry was built from: the
registry never touches the network and is never mutated after construction.

Configuration changes (a user pasting a new API key) build a brand-new
ConfigSnapshot (settings, registry and router together) and swap a single
reference in ConfigStore. A task that grabbed the old snapshot finishes on
the old snapshot; the next task sees the new one. No locks on the read path.

Registry order (also the fall-through order used by the router):

  text-generation    openai, gemini, anthropic, huggingface
  translation        google_translate
  entity-extraction  google_natural_language, huggingface_ner

Adding a new provider:
  Add a descriptor in _build_descriptors(), an adapter in
  docgateway/providers/ and a normalizer entry. The router picks it up in
  registry order even before it appears in a preference table.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from docgateway.core.config import CREDENTIAL_FIELDS, Settings, get_settings
from docgateway.orchestration.router import TaskRouter
from docgateway.schemas.tasks import Capability

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ProviderDescriptor — static metadata for one adapter
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProviderDescriptor:
    """
    Identifies one concrete adapter.

    credentials:  (field, value) pairs the provider needs; all must be set
    base_url:     endpoint root the adapter appends its path to
    model:        model / processor identifier (None if not applicable)
    max_tokens:   output budget for generation providers
    temperature:  sampling temperature for generation providers
    extra:        adapter-specific parameters as (key, value) pairs
    timeout:      per-call transport timeout in seconds
    """
    name:        str
    capability:  Capability
    base_url:    str
    credentials: tuple[tuple[str, str], ...] = field(default=(), repr=False)
    model:       str | None                  = None
    max_tokens:  int | None                  = None
    temperature: float | None                = None
    extra:       tuple[tuple[str, str], ...] = ()
    timeout:     float                       = 30.0

    @property
    def is_available(self) -> bool:
        """Credential-presence predicate."""
        return bool(self.credentials) and all(value.strip() for _, value in self.credentials)

    def credential(self, name: str) -> str:
        for key, value in self.credentials:
            if key == name:
                return value
        raise KeyError(name)

    def option(self, key: str, default: str | None = None) -> str | None:
        return dict(self.extra).get(key, default)


def _build_descriptors(settings: Settings) -> list[ProviderDescriptor]:
    timeout = settings.provider_timeout_seconds
    return [
        # --- text generation ---
        ProviderDescriptor(
            name        = "openai",
            capability  = Capability.TEXT_GENERATION,
            base_url    = settings.openai_base_url,
            credentials = (("api_key", settings.openai_api_key),),
            model       = settings.openai_model,
            max_tokens  = settings.openai_max_tokens,
            temperature = settings.openai_temperature,
            timeout     = timeout,
        ),
        ProviderDescriptor(
            name        = "gemini",
            capability  = Capability.TEXT_GENERATION,
            base_url    = settings.gemini_base_url,
            credentials = (("api_key", settings.gemini_api_key),),
            model       = settings.gemini_model,
            max_tokens  = settings.gemini_max_tokens,
            temperature = settings.gemini_temperature,
            timeout     = timeout,
        ),
        ProviderDescriptor(
            name        = "anthropic",
            capability  = Capability.TEXT_GENERATION,
            base_url    = settings.anthropic_base_url,
            credentials = (("api_key", settings.anthropic_api_key),),
            model       = settings.anthropic_model,
            max_tokens  = settings.anthropic_max_tokens,
            temperature = settings.anthropic_temperature,
            timeout     = timeout,
        ),
        ProviderDescriptor(
            name        = "huggingface",
            capability  = Capability.TEXT_GENERATION,
            base_url    = settings.huggingface_base_url,
            credentials = (("api_key", settings.huggingface_api_key),),
            model       = settings.huggingface_model,
            max_tokens  = settings.huggingface_max_tokens,
            temperature = settings.huggingface_temperature,
            extra       = (("summarization_model", settings.huggingface_summarization_model),),
            timeout     = timeout,
        ),
        # --- translation ---
        ProviderDescriptor(
            name        = "google_translate",
            capability  = Capability.TRANSLATION,
            base_url    = settings.google_translate_base_url,
            credentials = (("api_key", settings.google_translate_api_key),),
            timeout     = timeout,
        ),
        # --- entity extraction ---
        ProviderDescriptor(
            name        = "google_natural_language",
            capability  = Capability.ENTITY_EXTRACTION,
            base_url    = settings.google_nlp_base_url,
            credentials = (("api_key", settings.google_nlp_api_key),),
            timeout     = timeout,
        ),
        ProviderDescriptor(
            name        = "huggingface_ner",
            capability  = Capability.ENTITY_EXTRACTION,
            base_url    = settings.huggingface_base_url,
            credentials = (("api_key", settings.huggingface_api_key),),
            model       = settings.huggingface_ner_model,
            timeout     = timeout,
        ),
    ]


# ---------------------------------------------------------------------------
# ProviderRegistry
# ---------------------------------------------------------------------------

class ProviderRegistry:
    """
    Immutable view over the provider descriptors of one settings snapshot.

    Usage::

        registry  = ProviderRegistry.from_settings(settings)
        providers = registry.available_providers(Capability.TEXT_GENERATION)
    """

    def __init__(self, descriptors: Iterable[ProviderDescriptor]) -> None:
        self._descriptors = tuple(descriptors)
        self._by_name     = {d.name: d for d in self._descriptors}

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProviderRegistry":
        return cls(_build_descriptors(settings))

    def available_providers(self, capability: Capability) -> tuple[ProviderDescriptor, ...]:
        """Available descriptors for a capability, in registry order."""
        return tuple(
            d for d in self._descriptors
            if d.capability == capability and d.is_available
        )

    def descriptor(self, name: str) -> ProviderDescriptor | None:
        return self._by_name.get(name)

    def descriptors(self) -> tuple[ProviderDescriptor, ...]:
        return self._descriptors

    def summary(self) -> dict[str, list[str]]:
        """Capability -> available provider names. Safe to log."""
        return {
            cap.value: [d.name for d in self.available_providers(cap)]
            for cap in Capability
        }


# ---------------------------------------------------------------------------
# ConfigSnapshot / ConfigStore
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConfigSnapshot:
    """Settings plus the registry and router derived from them, always swapped together."""
    settings: Settings
    registry: ProviderRegistry
    router:   TaskRouter

    @classmethod
    def build(cls, settings: Settings) -> "ConfigSnapshot":
        return cls(
            settings=settings,
            registry=ProviderRegistry.from_settings(settings),
            router=TaskRouter.from_overrides(settings.provider_preferences),
        )


class ConfigStore:
    """
    Process-wide holder of the live ConfigSnapshot.

    Readers call snapshot() once per task and keep the returned object for
    the whole task. Writers build a complete new snapshot before assigning
    it, so a reader sees either the old or the new configuration in full.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._snapshot = ConfigSnapshot.build(settings or get_settings())
        logger.info("ConfigStore | providers=%s", self._snapshot.registry.summary())

    def snapshot(self) -> ConfigSnapshot:
        return self._snapshot

    def replace(self, settings: Settings) -> ConfigSnapshot:
        snapshot       = ConfigSnapshot.build(settings)
        self._snapshot = snapshot
        logger.info("ConfigStore | configuration replaced providers=%s", snapshot.registry.summary())
        return snapshot

    def update_credentials(self, changes: Mapping[str, str]) -> ConfigSnapshot:
        """
        Replace some credentials and keep everything else.

        Raises:
            ValueError: If a key is not a known credential field.
        """
        unknown = set(changes) - CREDENTIAL_FIELDS
        if unknown:
            raise ValueError(f"Unknown credential field(s): {', '.join(sorted(unknown))}")

        current  = self._snapshot.settings
        settings = current.model_copy(update=dict(changes))
        logger.info("ConfigStore | credentials updated fields=%s", sorted(changes))
        return self.replace(settings)
