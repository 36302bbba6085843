"""Similarity retrieval with confidence, recency and intent weighting.

Every candidate above the similarity floor is scored as

    similarity * confidence + recency_boost + category_boost

and the top ``top_k`` are returned. Python's sort is stable, so ties keep
store order.
"""

from __future__ import annotations

import logging

from base_template.config import TEMPLATE_CONFIG
from base_template.core.intent import IntentClassifier
from base_template.core.recency import compute_recency_boost
from base_template.models import Candidate, ConversationTurn, Intent, KnowledgeEntry, now_ms
from base_template.storage.knowledge_store import KnowledgeStore

logger = logging.getLogger(__name__)


class Retriever:
    """Ranks knowledge store entries against a query."""

    def __init__(
        self,
        store: KnowledgeStore,
        classifier: IntentClassifier | None = None,
        config: dict | None = None,
    ) -> None:
        self.store = store
        self.classifier = classifier or IntentClassifier()
        self.config = config or TEMPLATE_CONFIG

    def relevance_score(
        self, entry: KnowledgeEntry, similarity: float, intent: Intent, now: int,
    ) -> float:
        score = similarity * entry.confidence
        score += compute_recency_boost(
            entry.learned_at,
            now=now,
            window_days=self.config["recency_window_days"],
            weight=self.config["recency_boost_weight"],
        )
        if entry.category == intent.type:
            score += self.config["category_boost"]
        return score

    def retrieve(
        self,
        query: str,
        conversation_context: list[ConversationTurn] | None = None,
        intent: Intent | None = None,
        top_k: int | None = None,
    ) -> list[Candidate]:
        """Return the best-scoring candidates for ``query``, highest first.

        ``conversation_context`` is accepted for interface parity with the
        chat layer; ranking depends on the query alone.
        """
        top_k = top_k or self.config["top_k"]
        intent = intent or self.classifier.classify(query)

        query_vector = self.store.embedder.embed(query)
        candidates = self.store.search(query_vector, min_similarity=self.config["min_similarity"])

        now = now_ms()
        for cand in candidates:
            cand.relevance_score = self.relevance_score(cand.entry, cand.similarity, intent, now)

        candidates.sort(key=lambda c: c.relevance_score, reverse=True)
        results = candidates[:top_k]

        self.store.touch(c.entry.id for c in results)
        logger.debug(
            "Retrieved %d/%d candidates for %s query", len(results), len(candidates), intent.type,
        )
        return results
