"""
Task Router — Capability and Provider Order per Task Type

The router is the decision engine that answers:
  "Which providers should serve this task, and in which order?"

Two static tables drive it:

  1. Task → Capability
       summarize, answer-question, search,
       compare, assess-risk            → text-generation
       translate                       → translation
       extract-entities                → entity-extraction

  2. Task → preference order over provider names (tie-break rule whenever
     more than one provider satisfies the capability)

Ordering rule:
  preferred providers that are available, in table order
  + any other available provider of the capability, in registry order

An empty result means "no provider available" — the gateway degrades.

Design principles:
  - The router is pure Python: no I/O, no network.
  - The preference table is policy, not code: it can be overridden from
    settings (DOCGATEWAY_PROVIDER_PREFERENCES) per task type.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Mapping, Sequence

from docgateway.schemas.tasks import Capability, TaskType

if TYPE_CHECKING:
    from docgateway.orchestration.registry import ProviderDescriptor, ProviderRegistry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Static tables
# ---------------------------------------------------------------------------

TASK_CAPABILITIES: dict[TaskType, Capability] = {
    TaskType.SUMMARIZE:        Capability.TEXT_GENERATION,
    TaskType.ANSWER_QUESTION:  Capability.TEXT_GENERATION,
    TaskType.SEARCH:           Capability.TEXT_GENERATION,
    TaskType.COMPARE:          Capability.TEXT_GENERATION,
    TaskType.ASSESS_RISK:      Capability.TEXT_GENERATION,
    TaskType.TRANSLATE:        Capability.TRANSLATION,
    TaskType.EXTRACT_ENTITIES: Capability.ENTITY_EXTRACTION,
}

DEFAULT_PREFERENCES: dict[TaskType, tuple[str, ...]] = {
    TaskType.ANSWER_QUESTION:  ("gemini", "openai", "anthropic", "huggingface"),
    TaskType.SUMMARIZE:        ("openai", "gemini", "anthropic", "huggingface"),
    TaskType.SEARCH:           ("gemini", "openai", "anthropic"),
    TaskType.COMPARE:          ("openai", "gemini", "anthropic"),
    TaskType.ASSESS_RISK:      ("gemini", "openai", "anthropic"),
    TaskType.TRANSLATE:        ("google_translate",),
    TaskType.EXTRACT_ENTITIES: ("google_natural_language", "huggingface_ner"),
}


# ---------------------------------------------------------------------------
# TaskRouter
# ---------------------------------------------------------------------------

class TaskRouter:
    """
    Usage::

        router    = TaskRouter()
        capability = router.route(TaskType.SUMMARIZE)
        providers  = router.providers_for(TaskType.SUMMARIZE, snapshot.registry)
    """

    def __init__(
        self,
        preferences: Mapping[TaskType, Sequence[str]] | None = None,
    ) -> None:
        table = dict(DEFAULT_PREFERENCES)
        for task, names in (preferences or {}).items():
            table[task] = tuple(names)
        self._preferences = table

    @classmethod
    def from_overrides(cls, overrides: Mapping[str, Sequence[str]]) -> "TaskRouter":
        """
        Build a router from settings.provider_preferences (task value → names).

        Unknown task keys are ignored with a warning rather than failing
        startup over a stale config entry.
        """
        parsed: dict[TaskType, Sequence[str]] = {}
        for key, names in overrides.items():
            try:
                parsed[TaskType(key)] = names
            except ValueError:
                logger.warning("TaskRouter | ignoring preference override for unknown task=%s", key)
        return cls(parsed)

    def route(self, task: TaskType) -> Capability:
        return TASK_CAPABILITIES[task]

    def preference(self, task: TaskType) -> tuple[str, ...]:
        return tuple(self._preferences.get(task, ()))

    def providers_for(
        self,
        task:     TaskType,
        registry: ProviderRegistry,
    ) -> tuple[ProviderDescriptor, ...]:
        """
        Ordered, available descriptors for a task.

        Deterministic for a fixed registry and task: no randomness and no
        runtime health state feeds into the order.
        """
        capability = self.route(task)
        available  = registry.available_providers(capability)
        by_name    = {d.name: d for d in available}

        ordered: list[ProviderDescriptor] = []
        for name in self.preference(task):
            descriptor = by_name.pop(name, None)
            if descriptor is not None:
                ordered.append(descriptor)
            elif registry.descriptor(name) is None:
                logger.warning("TaskRouter | unknown provider=%s in preference for task=%s", name, task.value)

        # fall through to anything else that can serve the capability
        ordered.extend(d for d in available if d.name in by_name)

        logger.debug(
            "TaskRouter | task=%s capability=%s order=%s",
            task.value, capability.value, [d.name for d in ordered],
        )
        return tuple(ordered)
