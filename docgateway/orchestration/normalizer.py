"""
Response Normalizer — Raw Provider Payload → Canonical Result

Each provider answers in its own envelope:

  openai                   choices[0].message.content
  gemini                   candidates[0].content.parts[0].text
  anthropic                first content[] block with type == "text"
  huggingface              [0].generated_text | [0].summary_text  (list or object)
  google_translate         data.translations[0].translatedText
  google_natural_language  entities[].{name,type,salience}, documentSentiment.score
  huggingface_ner          [].{entity_group|entity, word, score}

normalize() is pure and never raises. A payload missing an expected field,
carrying the wrong type, or yielding empty text is returned as a
Normalized failure with MALFORMED_RESPONSE, which the Fallback Executor
treats exactly like a transport failure.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from docgateway.orchestration.registry import ProviderDescriptor
from docgateway.schemas.tasks import Entity, FailureKind, Polarity, Sentiment

logger = logging.getLogger(__name__)

POSITIVE_THRESHOLD =  0.1
NEGATIVE_THRESHOLD = -0.1


class MalformedPayload(Exception):
    """Internal signal: the payload does not have the expected shape."""


@dataclass(frozen=True)
class Normalized:
    """Tagged success/failure result of normalizing one payload."""
    ok:        bool
    text:      str                = ""
    entities:  tuple[Entity, ...] = ()
    sentiment: Sentiment | None   = None
    failure:   FailureKind | None = None
    detail:    str | None         = None

    @classmethod
    def malformed(cls, detail: str) -> "Normalized":
        return cls(ok=False, failure=FailureKind.MALFORMED_RESPONSE, detail=detail)


# ---------------------------------------------------------------------------
# Checked field access
# ---------------------------------------------------------------------------

def dig(payload: Any, *path: str | int) -> Any:
    """
    Walk dict keys / list indexes, raising MalformedPayload on any miss.

        dig(data, "choices", 0, "message", "content")
    """
    node = payload
    for step in path:
        if isinstance(step, int):
            if not isinstance(node, list) or len(node) <= step:
                raise MalformedPayload(f"missing index [{step}]")
        elif not isinstance(node, dict) or step not in node:
            raise MalformedPayload(f"missing field '{step}'")
        node = node[step]
    return node


def _text(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise MalformedPayload("empty or non-string text")
    return value.strip()


def polarity_for(score: float) -> Polarity:
    if score > POSITIVE_THRESHOLD:
        return Polarity.POSITIVE
    if score < NEGATIVE_THRESHOLD:
        return Polarity.NEGATIVE
    return Polarity.NEUTRAL


# ---------------------------------------------------------------------------
# Per-provider mappings
# ---------------------------------------------------------------------------

def _openai(payload: Any) -> Normalized:
    return Normalized(ok=True, text=_text(dig(payload, "choices", 0, "message", "content")))


def _gemini(payload: Any) -> Normalized:
    return Normalized(ok=True, text=_text(dig(payload, "candidates", 0, "content", "parts", 0, "text")))


def _anthropic(payload: Any) -> Normalized:
    blocks = dig(payload, "content")
    if not isinstance(blocks, list):
        raise MalformedPayload("'content' is not a list")
    for block in blocks:
        if isinstance(block, dict) and block.get("type") == "text":
            return Normalized(ok=True, text=_text(block.get("text")))
    raise MalformedPayload("no text block in 'content'")


def _huggingface(payload: Any) -> Normalized:
    first = dig(payload, 0) if isinstance(payload, list) else payload
    if not isinstance(first, dict):
        raise MalformedPayload("unexpected inference payload")
    value = first.get("generated_text") or first.get("summary_text")
    return Normalized(ok=True, text=_text(value))


def _google_translate(payload: Any) -> Normalized:
    return Normalized(ok=True, text=_text(dig(payload, "data", "translations", 0, "translatedText")))


def _google_natural_language(payload: Any) -> Normalized:
    raw_entities = dig(payload, "entities")
    if not isinstance(raw_entities, list):
        raise MalformedPayload("'entities' is not a list")

    entities: list[Entity] = []
    for item in raw_entities:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            continue
        salience = item.get("salience")
        entities.append(Entity(
            name=item["name"],
            type=str(item.get("type", "OTHER")),
            salience=float(salience) if isinstance(salience, (int, float)) else None,
        ))

    sentiment = None
    score = (payload.get("documentSentiment") or {}).get("score")
    if isinstance(score, (int, float)):
        sentiment = Sentiment(score=float(score), polarity=polarity_for(float(score)))

    return Normalized(ok=True, text=format_entities(entities), entities=tuple(entities), sentiment=sentiment)


def _huggingface_ner(payload: Any) -> Normalized:
    if not isinstance(payload, list):
        raise MalformedPayload("NER payload is not a list")

    entities: list[Entity] = []
    seen: set[tuple[str, str]] = set()
    for item in payload:
        if not isinstance(item, dict):
            continue
        word  = item.get("word")
        label = item.get("entity_group") or item.get("entity")
        if not isinstance(word, str) or not isinstance(label, str):
            continue
        key = (word.strip(), label)
        if not key[0] or key in seen:
            continue
        seen.add(key)
        score = item.get("score")
        entities.append(Entity(
            name=key[0],
            type=label,
            salience=float(score) if isinstance(score, (int, float)) else None,
        ))

    return Normalized(ok=True, text=format_entities(entities), entities=tuple(entities))


def format_entities(entities: list[Entity] | tuple[Entity, ...]) -> str:
    if not entities:
        return "No named entities detected."
    return "\n".join(f"- {e.name} ({e.type})" for e in entities)


_NORMALIZERS: dict[str, Callable[[Any], Normalized]] = {
    "openai":                  _openai,
    "gemini":                  _gemini,
    "anthropic":               _anthropic,
    "huggingface":             _huggingface,
    "google_translate":        _google_translate,
    "google_natural_language": _google_natural_language,
    "huggingface_ner":         _huggingface_ner,
}


# ---------------------------------------------------------------------------
# ResponseNormalizer
# ---------------------------------------------------------------------------

class ResponseNormalizer:
    """
    Usage::

        normalized = ResponseNormalizer().normalize(descriptor, result.payload)
        if not normalized.ok:
            ...   # advance to the next provider
    """

    def __init__(self, mappings: dict[str, Callable[[Any], Normalized]] | None = None) -> None:
        self._mappings = dict(_NORMALIZERS)
        self._mappings.update(mappings or {})

    def normalize(self, descriptor: ProviderDescriptor, payload: Any) -> Normalized:
        mapping = self._mappings.get(descriptor.name)
        if mapping is None:
            return Normalized.malformed(f"no normalizer registered for provider={descriptor.name}")
        try:
            return mapping(payload)
        except MalformedPayload as exc:
            return Normalized.malformed(str(exc))
        except (TypeError, ValueError, AttributeError) as exc:
            logger.debug("ResponseNormalizer | provider=%s unexpected shape", descriptor.name, exc_info=True)
            return Normalized.malformed(f"{type(exc).__name__}: {exc}")
