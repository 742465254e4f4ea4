"""
Degradation Provider — Labelled Placeholder Results

When no provider is configured for a task, or every configured provider
failed, the caller still gets a well-formed TaskResult of the usual shape:

  provider            "placeholder"
  degraded            True
  degradation_reason  configuration_missing | all_providers_exhausted
  text                static, task-specific template
  entities / sentiment empty

Templates say plainly that no analysis happened. They never contain
content that could pass for a genuine answer: the translation placeholder
says no translation occurred and echoes the untranslated input, the
summary placeholder says nothing about the document, and so on.
"""

from __future__ import annotations

import logging
from typing import Final, Sequence

from docgateway.orchestration.requests import TaskRequest
from docgateway.schemas.tasks import (
    PLACEHOLDER_PROVIDER,
    FailureKind,
    ProviderAttempt,
    TaskResult,
    TaskType,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_BANNER: Final[str] = "[PLACEHOLDER — no AI provider produced this result]"

_TEMPLATES: Final[dict[TaskType, str]] = {
    TaskType.SUMMARIZE: (
        "Summary unavailable ({summary_type}, {length}).\n\n"
        "No summary was generated for this document, and nothing in this message "
        "describes its contents."
    ),
    TaskType.ANSWER_QUESTION: (
        'Question: "{text}"\n\n'
        "No answer was generated. For advice on this question, consult a qualified "
        "legal practitioner."
    ),
    TaskType.TRANSLATE: (
        "Translation did not occur ({source} -> {target}). A translation provider "
        "must be configured before text can be translated.\n\n"
        "Original, untranslated text:\n{text}"
    ),
    TaskType.SEARCH: (
        'No semantic search was performed for "{text}". No matching sections, laws '
        "or case references were identified."
    ),
    TaskType.EXTRACT_ENTITIES: (
        "No entity extraction was performed. The entity list is empty because no "
        "provider analysed the document, not because the document has no entities."
    ),
    TaskType.COMPARE: (
        "No comparison was performed. Differences and similarities between the two "
        "documents were not analysed."
    ),
    TaskType.ASSESS_RISK: (
        "No risk assessment was performed. No risk level has been determined for "
        "this document."
    ),
}


def _notice(reason: FailureKind, expected: Sequence[str], attempts: Sequence[ProviderAttempt]) -> str:
    if reason == FailureKind.CONFIGURATION_MISSING:
        names = ", ".join(expected) or "any supported provider"
        return f"No provider is configured for this task. Configure an API key for: {names}."
    tried = ", ".join(a.provider for a in attempts) or "none"
    return f"Every configured provider failed for this task (tried: {tried}). Try again later or check the provider settings."


class DegradationProvider:
    """
    Usage::

        result = DegradationProvider().placeholder_for(
            request, FailureKind.CONFIGURATION_MISSING, expected=("openai", "gemini"),
        )
        assert result.degraded
    """

    def placeholder_for(
        self,
        request:  TaskRequest,
        reason:   FailureKind,
        expected: Sequence[str]             = (),
        attempts: Sequence[ProviderAttempt] = (),
    ) -> TaskResult:
        opts = request.options
        body = _TEMPLATES[request.task].format(
            text=request.text,
            summary_type=opts.summary_type.value,
            length=opts.length.value,
            source=opts.source_language or "auto",
            target=opts.target_language or "?",
        )

        logger.warning(
            "DegradationProvider | task=%s reason=%s attempts=%d",
            request.task.value, reason.value, len(attempts),
        )
        return TaskResult(
            task=request.task,
            provider=PLACEHOLDER_PROVIDER,
            degraded=True,
            text=f"{PLACEHOLDER_BANNER}\n\n{body}",
            entities=[],
            sentiment=None,
            attempts=list(attempts),
            degradation_reason=reason,
            notice=_notice(reason, expected, attempts),
        )
