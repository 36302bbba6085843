"""Learning from external API answers.

Every answer the caller fetched after a defer decision is recorded as a
learning event, whether or not anything is kept from it. Events queue up and
are analysed in batches for recurring topics once the queue is full.
"""

from __future__ import annotations

import logging
from collections import Counter

from base_template.config import TEMPLATE_CONFIG
from base_template.core.intent import extract_topics
from base_template.core.knowledge_value import assess_knowledge_value
from base_template.models import (
    ConversationTurn,
    KnowledgeEntry,
    LearningEvent,
    LearningPatterns,
    make_entry_id,
    now_ms,
)
from base_template.storage.knowledge_store import KnowledgeStore

logger = logging.getLogger(__name__)


class Learner:
    """Grades external answers and turns the valuable ones into knowledge entries."""

    def __init__(self, store: KnowledgeStore, config: dict | None = None) -> None:
        self.store = store
        self.config = config or TEMPLATE_CONFIG
        self.queue: list[LearningEvent] = []

    def extract_knowledge(self, query: str, response: str, source: str) -> list[KnowledgeEntry]:
        """Return the entries worth learning from ``response`` (at most one)."""
        assessment = assess_knowledge_value(query, response, self.store.entries(), self.config)
        if not assessment.should_learn:
            logger.debug("Not learning from %s response (%d chars)", source, len(response))
            return []

        return [KnowledgeEntry(
            id=make_entry_id("learned"),
            content=response.strip(),
            category=assessment.category,
            confidence=assessment.confidence,
            source=f"{source}_learned",
            tags=assessment.tags,
            learned_at=now_ms(),
            original_query=query,
        )]

    def enqueue(
        self, query: str, response: str, source: str,
        context: list[ConversationTurn] | None = None,
    ) -> LearningPatterns | None:
        """Queue a learning event; flush and return patterns when the queue fills."""
        self.queue.append(LearningEvent(
            query=query,
            response=response,
            source=source,
            conversation_context=list(context or []),
        ))
        if len(self.queue) >= self.config["learning_queue_flush_size"]:
            return self.process_learning_queue()
        return None

    def process_learning_queue(self) -> LearningPatterns | None:
        if not self.queue:
            return None

        logger.info("Processing %d learning events", len(self.queue))
        patterns = analyze_learning_patterns(self.queue, self.config["common_topic_min_count"])
        if patterns.common_topics:
            logger.info("Identified common topics: %s", ", ".join(patterns.common_topics))
        self.queue = []
        return patterns

    def clear(self) -> None:
        self.queue = []


def analyze_learning_patterns(
    events: list[LearningEvent], min_count: int = 3,
) -> LearningPatterns:
    """Count topics and sources across a batch of learning events."""
    topic_counts: Counter[str] = Counter()
    sources: Counter[str] = Counter()
    for event in events:
        topic_counts.update(extract_topics(f"{event.query} {event.response}"))
        sources[event.source] += 1

    return LearningPatterns(
        common_topics=[topic for topic, count in topic_counts.items() if count >= min_count],
        sources=dict(sources),
        total_events=len(events),
    )
