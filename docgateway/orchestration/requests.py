"""
Task requests — the unit of work passed through the orchestration layer.

TaskRequest is built once per call, validated on construction and never
mutated. Validation failures are programmer errors (unknown task type,
empty text, a translation without a target language) and raise
InvalidTaskRequest immediately: no provider is tried and no placeholder is
returned for them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from pydantic import ValidationError

from docgateway.schemas.tasks import Entity, Sentiment, TaskOptions, TaskType


class InvalidTaskRequest(ValueError):
    """The caller asked for something that can never succeed."""


# tasks whose primary text is a question/query and whose document is the context
_CONTEXT_IS_DOCUMENT = frozenset({TaskType.ANSWER_QUESTION, TaskType.SEARCH})


@dataclass(frozen=True)
class TaskRequest:
    task:    TaskType
    text:    str
    context: str | None  = None
    options: TaskOptions = field(default_factory=TaskOptions)

    @classmethod
    def create(
        cls,
        task:    TaskType | str,
        text:    str,
        context: str | None = None,
        options: TaskOptions | Mapping[str, Any] | None = None,
    ) -> "TaskRequest":
        try:
            task_type = TaskType(task)
        except ValueError:
            raise InvalidTaskRequest(f"Unknown task type: {task!r}") from None

        if not isinstance(text, str) or not text.strip():
            raise InvalidTaskRequest("A non-empty text payload is required.")
        if context is not None and not isinstance(context, str):
            raise InvalidTaskRequest("context must be a string when provided.")

        try:
            parsed = options if isinstance(options, TaskOptions) else TaskOptions.model_validate(options or {})
        except ValidationError as exc:
            raise InvalidTaskRequest(f"Invalid task options: {exc.errors()[0]['msg']}") from exc

        if task_type == TaskType.TRANSLATE and not parsed.target_language:
            raise InvalidTaskRequest("translate requires options.target_language.")
        if task_type == TaskType.COMPARE and not (context or "").strip():
            raise InvalidTaskRequest("compare requires the second document as context.")

        return cls(task=task_type, text=text, context=context or None, options=parsed)

    @property
    def document_text(self) -> str:
        """The document under analysis (what enrichment looks at)."""
        if self.task in _CONTEXT_IS_DOCUMENT and self.context:
            return self.context
        return self.text


@dataclass(frozen=True)
class EnrichmentSignals:
    """Auxiliary analysis attached before the generation call."""
    provider:  str
    entities:  tuple[Entity, ...]
    sentiment: Sentiment | None
    summary:   str


@dataclass(frozen=True)
class EnrichedRequest:
    """
    A TaskRequest plus optional derived signals.

    Owned by the single orchestration call that created it.
    """
    request: TaskRequest
    signals: EnrichmentSignals | None = None

    @property
    def task(self) -> TaskType:
        return self.request.task

    @property
    def generation_context(self) -> str:
        """Request context with the signal summary appended."""
        parts = [self.request.context or ""]
        if self.signals is not None:
            parts.append(self.signals.summary)
        return "\n\n".join(p for p in parts if p)
