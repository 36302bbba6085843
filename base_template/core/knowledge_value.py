"""Heuristics deciding whether text is worth keeping as knowledge.

Two graders share the same marker lists:
  - ``assess_knowledge_value`` grades answers from external APIs, and rejects
    hedged answers and near-duplicates of what the store already knows.
  - ``assess_text_chunk_value`` grades chunks of submitted training content,
    which is trusted more and not checked for duplicates.
"""

from __future__ import annotations

from typing import Iterable

from base_template.config import TEMPLATE_CONFIG
from base_template.core.intent import categorize_text, extract_tags
from base_template.models import KnowledgeEntry, ValueAssessment

HEDGING_PHRASES = ("i don't know", "i'm not sure")

BUSINESS_MARKERS = (
    "jay's mobile wash", "mobile detailing", "562-228-9429", "los angeles", "orange county",
)
CHUNK_BUSINESS_MARKERS = ("jay's mobile wash", "562-228-9429", "mobile detailing")
DOMAIN_KEYWORDS = ("detailing", "ceramic coating", "paint correction", "car wash")
PLACEHOLDER_MARKERS = ("lorem ipsum", "placeholder")


def text_similarity(text_a: str, text_b: str) -> float:
    """Jaccard similarity of whitespace-split lowercase word sets."""
    words_a = set(text_a.lower().split())
    words_b = set(text_b.lower().split())
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def has_similar_knowledge(
    content: str, entries: Iterable[KnowledgeEntry], threshold: float | None = None,
) -> bool:
    threshold = TEMPLATE_CONFIG["duplicate_similarity_threshold"] if threshold is None else threshold
    return any(text_similarity(content, e.content) > threshold for e in entries)


def assess_knowledge_value(
    query: str,
    response: str,
    existing: Iterable[KnowledgeEntry] = (),
    config: dict | None = None,
) -> ValueAssessment:
    """Grade an external answer: 0.9 business, 0.7 domain, 0.5 novel long text."""
    cfg = config or TEMPLATE_CONFIG
    lower = response.lower()

    if len(response) < cfg["min_learnable_length"] or any(p in lower for p in HEDGING_PHRASES):
        return ValueAssessment(should_learn=False)

    if any(m in lower for m in BUSINESS_MARKERS):
        confidence = 0.9
    elif any(k in lower for k in DOMAIN_KEYWORDS):
        confidence = 0.7
    elif len(response) > cfg["generic_learnable_length"] and not has_similar_knowledge(
        response, existing, cfg["duplicate_similarity_threshold"],
    ):
        confidence = 0.5
    else:
        return ValueAssessment(should_learn=False)

    return ValueAssessment(
        should_learn=True,
        confidence=confidence,
        category=categorize_text(response),
        tags=extract_tags(response),
    )


def assess_text_chunk_value(text: str, config: dict | None = None) -> ValueAssessment:
    """Grade a training chunk: 0.95 business, 0.8 services, 0.6 generic long text."""
    cfg = config or TEMPLATE_CONFIG
    lower = text.lower()

    if any(m in lower for m in CHUNK_BUSINESS_MARKERS):
        return ValueAssessment(
            should_learn=True, confidence=0.95, category="business_info",
            tags=["business", "jay's"],
        )
    if any(k in lower for k in DOMAIN_KEYWORDS):
        return ValueAssessment(
            should_learn=True, confidence=0.8, category="services",
            tags=["services", "detailing"],
        )
    if len(text) > cfg["generic_learnable_length"] and not any(p in lower for p in PLACEHOLDER_MARKERS):
        return ValueAssessment(
            should_learn=True, confidence=0.6, category="general", tags=["general"],
        )
    return ValueAssessment(should_learn=False, category="low_value")
