"""
Prompt templates — TaskRequest → ProviderCall

Hardcoded templates for the generation tasks. Documents are clipped to a
per-task character budget before rendering so one oversized upload cannot
overflow a provider's context window.

Enrichment signals (entities, sentiment) are appended to the document
context for answer-question and search, and appear as an "Analysis
insights" line for the other generation tasks.

Translation and entity extraction carry the raw text only; their
providers take no prompt.
"""

from __future__ import annotations

from typing import Final

from docgateway.orchestration.requests import EnrichedRequest
from docgateway.providers import ProviderCall
from docgateway.schemas.tasks import SummaryLength, SummaryType, TaskType

SYSTEM_PROMPT: Final[str] = (
    "You are an expert legal AI assistant specializing in Indian law and legal "
    "document analysis. Provide accurate, detailed, and practical legal insights."
)

CHAR_LIMITS: Final[dict[TaskType, int]] = {
    TaskType.SUMMARIZE:       4_000,
    TaskType.ANSWER_QUESTION: 6_000,
    TaskType.SEARCH:          3_000,
    TaskType.COMPARE:         2_000,   # per document
    TaskType.ASSESS_RISK:     3_000,
}

_SUMMARY_FOCUS: Final[dict[SummaryType, str]] = {
    SummaryType.COMPREHENSIVE: "Provide a comprehensive summary covering all key aspects.",
    SummaryType.EXECUTIVE:     "Focus on executive-level insights and key decisions.",
    SummaryType.KEY_POINTS:    "Extract and list the most important key points.",
    SummaryType.TIMELINE:      "Present events and decisions in chronological order.",
}

_SUMMARY_LENGTH: Final[dict[SummaryLength, str]] = {
    SummaryLength.SHORT:  "in 2-3 concise paragraphs",
    SummaryLength.MEDIUM: "in 4-6 detailed paragraphs",
    SummaryLength.LONG:   "in a comprehensive analysis with multiple sections",
}


def clip(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _insights(enriched: EnrichedRequest) -> str:
    if enriched.signals is None:
        return ""
    return f"\nAnalysis insights: {enriched.signals.summary}\n"


# ---------------------------------------------------------------------------
# Per-task renderers
# ---------------------------------------------------------------------------

def _summarize(enriched: EnrichedRequest) -> str:
    request = enriched.request
    opts    = request.options
    return (
        f"Analyze the following legal document and provide a {opts.summary_type.value} "
        f"summary {_SUMMARY_LENGTH[opts.length]}.\n\n"
        f"{_SUMMARY_FOCUS[opts.summary_type]}\n"
        f"{_insights(enriched)}\n"
        f"Document to analyze:\n{clip(request.text, CHAR_LIMITS[TaskType.SUMMARIZE])}\n\n"
        "Structure the summary with:\n"
        "1. Document Type and Overview\n"
        "2. Key Legal Issues\n"
        "3. Important Parties Involved\n"
        "4. Critical Dates and Deadlines\n"
        "5. Legal Implications\n"
        "6. Actionable Items (if any)\n\n"
        "Summary:"
    )


def _answer_question(enriched: EnrichedRequest) -> str:
    context = clip(enriched.generation_context, CHAR_LIMITS[TaskType.ANSWER_QUESTION])
    return (
        "Provide a comprehensive answer to this legal question.\n\n"
        f"Question: {enriched.request.text}\n\n"
        f"Context: {context or 'No document context provided.'}\n\n"
        "Include:\n"
        "1. Relevant Indian laws and sections\n"
        "2. Legal precedents if applicable\n"
        "3. Practical implications\n"
        "4. Step-by-step guidance\n"
        "5. Important deadlines or procedures\n\n"
        "Response:"
    )


def _search(enriched: EnrichedRequest) -> str:
    request = enriched.request
    scope   = request.options.search_scope
    context = clip(enriched.generation_context, CHAR_LIMITS[TaskType.SEARCH])
    return (
        f'Based on the following document content, perform a semantic search for: "{request.text}"\n'
        + (f"Restrict the search to: {scope}\n" if scope else "")
        + f"\nDocument content:\n{context or 'No document content provided.'}\n\n"
        "Provide:\n"
        "1. Relevant sections that match the search query\n"
        "2. Legal concepts and terms related to the query\n"
        "3. Any applicable Indian laws or acts mentioned\n"
        "4. Case law references if any\n"
        "5. Practical implications\n\n"
        "Search Results:"
    )


def _compare(enriched: EnrichedRequest) -> str:
    request = enriched.request
    limit   = CHAR_LIMITS[TaskType.COMPARE]
    return (
        "Compare these two legal documents and provide:\n"
        "1. Key differences\n"
        "2. Similar clauses\n"
        "3. Legal implications of differences\n"
        "4. Recommendations\n"
        f"{_insights(enriched)}\n"
        f"Document 1:\n{clip(request.text, limit)}\n\n"
        f"Document 2:\n{clip(request.context or '', limit)}\n\n"
        "Analysis:"
    )


def _assess_risk(enriched: EnrichedRequest) -> str:
    request = enriched.request
    return (
        "As a legal risk analyst, assess the legal risks in this document:\n\n"
        f"{clip(request.text, CHAR_LIMITS[TaskType.ASSESS_RISK])}\n"
        f"{_insights(enriched)}\n"
        "Provide:\n"
        "1. Risk level (Low/Medium/High)\n"
        "2. Specific risk factors\n"
        "3. Legal compliance issues\n"
        "4. Mitigation recommendations\n"
        "5. Relevant Indian laws/acts\n\n"
        "Assessment:"
    )


_RENDERERS = {
    TaskType.SUMMARIZE:       _summarize,
    TaskType.ANSWER_QUESTION: _answer_question,
    TaskType.SEARCH:          _search,
    TaskType.COMPARE:         _compare,
    TaskType.ASSESS_RISK:     _assess_risk,
}


def build_call(enriched: EnrichedRequest) -> ProviderCall:
    """Render the ProviderCall for any task type."""
    request = enriched.request
    task    = request.task

    if task == TaskType.TRANSLATE:
        return ProviderCall(
            task=task,
            text=request.text,
            source_language=request.options.source_language,
            target_language=request.options.target_language,
        )
    if task == TaskType.EXTRACT_ENTITIES:
        return ProviderCall(task=task, text=request.text)

    return ProviderCall(
        task=task,
        prompt=_RENDERERS[task](enriched),
        system=SYSTEM_PROMPT,
        text=request.text,
    )
