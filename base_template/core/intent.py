"""Keyword-pattern intent classification and text tagging.

Intents are checked in a fixed priority order and the first pattern that
matches wins, so "How much to book an appointment?" is a booking query even
though it also mentions price.
"""

from __future__ import annotations

import re

from base_template.models import Intent

# (intent, confidence, keywords) in priority order
INTENT_PATTERNS: list[tuple[str, float, tuple[str, ...]]] = [
    ("booking", 0.9, (
        "book", "schedule", "appointment", "reserve", "availability",
        "when can", "what time", "come out",
    )),
    ("pricing", 0.8, ("price", "cost", "how much", "pricing", "quote", "estimate", "fee")),
    ("services", 0.7, ("service", "detail", "wash", "clean", "ceramic", "paint", "interior", "exterior")),
    ("location", 0.8, ("where", "location", "area", "serve", "come to", "travel to")),
]

GENERAL_INTENT = Intent(type="general", confidence=0.5)

TAG_VOCABULARY = (
    "mobile", "detailing", "wash", "ceramic", "coating", "paint",
    "correction", "interior", "exterior", "luxury", "premium",
)

TOPIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "detailing": ("detail", "wash", "clean"),
    "pricing": ("price", "cost", "quote", "fee"),
    "booking": ("book", "schedule", "appointment"),
    "services": ("service", "package", "treatment"),
    "location": ("location", "area", "serve", "travel"),
    "ceramic_coating": ("ceramic", "coating", "protection"),
    "paint_correction": ("paint", "correction", "swirl"),
}

# Substring checks, first match wins
_CATEGORY_RULES: list[tuple[str, tuple[str, ...]]] = [
    ("pricing", ("price", "cost")),
    ("services", ("service", "detail")),
    ("location", ("location", "area")),
    ("booking", ("book", "schedule")),
]


def _compile(keywords: tuple[str, ...]) -> re.Pattern[str]:
    alternatives = "|".join(r"\s+".join(map(re.escape, kw.split())) for kw in keywords)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


class IntentClassifier:
    """Ordered word-boundary matcher over the intent keyword table."""

    def __init__(
        self, patterns: list[tuple[str, float, tuple[str, ...]]] | None = None,
    ) -> None:
        self._patterns = [
            (name, confidence, _compile(keywords))
            for name, confidence, keywords in (patterns or INTENT_PATTERNS)
        ]

    def classify(self, query: str) -> Intent:
        for name, confidence, pattern in self._patterns:
            if pattern.search(query or ""):
                return Intent(type=name, confidence=confidence)
        return Intent(type=GENERAL_INTENT.type, confidence=GENERAL_INTENT.confidence)


def categorize_text(text: str) -> str:
    """Pick a knowledge category for free text learned from an external answer."""
    lower = text.lower()
    for category, needles in _CATEGORY_RULES:
        if any(n in lower for n in needles):
            return category
    return "general"


def extract_tags(text: str) -> list[str]:
    lower = text.lower()
    return [tag for tag in TAG_VOCABULARY if tag in lower]


def extract_topics(text: str) -> list[str]:
    lower = text.lower()
    return [
        topic for topic, keywords in TOPIC_KEYWORDS.items()
        if any(kw in lower for kw in keywords)
    ]
