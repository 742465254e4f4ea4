"""
Document Tasks — Pydantic Request/Response Schemas

Covers POST /api/v1/tasks and the Python invocation surface
(DocumentTaskGateway.perform_task):
  - Task types and the capability each one needs
  - Task options (summary style/length, languages, search scope)
  - The normalized TaskResult returned for every task, real or degraded
  - The structured error envelope for 4xx/5xx responses

Design decisions:
  - TaskResult has ONE shape. Every field is present whichever provider
    answered, including the placeholder path, so callers never branch on
    the provider.
  - `degraded` is the only flag callers need to tell a real answer from
    a placeholder. `degradation_reason` says why.
  - Options forbid unknown keys: a typo is a caller bug, not a silent no-op.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


PLACEHOLDER_PROVIDER: str = "placeholder"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Capability(str, Enum):
    """Abstract function class a provider can perform."""
    TEXT_GENERATION   = "text-generation"
    TRANSLATION       = "translation"
    ENTITY_EXTRACTION = "entity-extraction"


class TaskType(str, Enum):
    SUMMARIZE        = "summarize"
    ANSWER_QUESTION  = "answer-question"
    TRANSLATE        = "translate"
    SEARCH           = "search"
    EXTRACT_ENTITIES = "extract-entities"
    COMPARE          = "compare"       # text = document 1, context = document 2
    ASSESS_RISK      = "assess-risk"


class SummaryType(str, Enum):
    COMPREHENSIVE = "comprehensive"
    EXECUTIVE     = "executive"
    KEY_POINTS    = "key-points"
    TIMELINE      = "timeline"


class SummaryLength(str, Enum):
    SHORT  = "short"
    MEDIUM = "medium"
    LONG   = "long"


class Polarity(str, Enum):
    POSITIVE = "positive"
    NEUTRAL  = "neutral"
    NEGATIVE = "negative"


class FailureKind(str, Enum):
    """
    Error taxonomy for provider calls.

    TRANSPORT_FAILURE and MALFORMED_RESPONSE are recovered by moving to the
    next provider. CONFIGURATION_MISSING and ALL_PROVIDERS_EXHAUSTED are
    recovered by returning a degraded result. None of them is raised.
    """
    CONFIGURATION_MISSING   = "configuration_missing"
    TRANSPORT_FAILURE       = "transport_failure"
    MALFORMED_RESPONSE      = "malformed_response"
    ALL_PROVIDERS_EXHAUSTED = "all_providers_exhausted"


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

LANGUAGE_PATTERN = r"^[A-Za-z]{2,3}(-[A-Za-z0-9]{2,4})?$"


class TaskOptions(BaseModel):
    """Task-specific knobs. Fields irrelevant to a task are ignored by it."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    summary_type:    SummaryType   = SummaryType.COMPREHENSIVE
    length:          SummaryLength = SummaryLength.MEDIUM
    source_language: str | None    = Field(None, pattern=LANGUAGE_PATTERN, examples=["en"])
    target_language: str | None    = Field(None, pattern=LANGUAGE_PATTERN, examples=["hi"])
    search_scope:    str | None    = Field(
        None,
        max_length=200,
        description="Optional section or clause the search should focus on.",
    )


class TaskRequestBody(BaseModel):
    """Incoming payload for POST /api/v1/tasks."""
    task:    TaskType
    text:    str               = Field(..., min_length=1, description="Primary text payload.")
    context: str | None        = Field(None, description="Document context or second document.")
    options: TaskOptions       = Field(default_factory=TaskOptions)


# ---------------------------------------------------------------------------
# Result side
# ---------------------------------------------------------------------------

class Entity(BaseModel):
    name:     str
    type:     str
    salience: float | None = None


class Sentiment(BaseModel):
    score:    float
    polarity: Polarity


class ProviderAttempt(BaseModel):
    """One adapter invocation made while serving a task, in call order."""
    provider: str
    ok:       bool
    failure:  FailureKind | None = None
    detail:   str | None         = None


class TaskResult(BaseModel):
    """
    Caller-visible output of a task.

    `provider` is the adapter that produced `text`, or PLACEHOLDER_PROVIDER
    when `degraded` is true.
    """
    task:               TaskType
    provider:           str
    degraded:           bool
    text:               str
    entities:           list[Entity]          = Field(default_factory=list)
    sentiment:          Sentiment | None      = None
    attempts:           list[ProviderAttempt] = Field(default_factory=list)
    degradation_reason: FailureKind | None    = None
    notice:             str | None            = None


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------

class ErrorDetail(BaseModel):
    field:   str | None = None
    message: str
    code:    str


class ErrorResponse(BaseModel):
    """
    Uniform error envelope for all 4xx/5xx responses.
    Clients should check `error_code` for programmatic handling.
    """
    error_code: str               = Field(..., description="Stable machine-readable code")
    message:    str               = Field(..., description="Human-readable summary")
    details:    list[ErrorDetail] = Field(default_factory=list)
    request_id: str | None        = Field(None, description="Trace ID for log correlation")
