"""Data models for the Trainable Base Template engine."""

from __future__ import annotations

import random
import string
import time
from dataclasses import dataclass, field
from typing import Any


def now_ms() -> int:
    return int(time.time() * 1000)


def make_entry_id(prefix: str, index: int | None = None) -> str:
    """Build a `<prefix>_<ms>[_<index>]_<random>` knowledge entry id."""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    if index is None:
        return f"{prefix}_{now_ms()}_{suffix}"
    return f"{prefix}_{now_ms()}_{index}_{suffix}"


@dataclass
class KnowledgeEntry:
    id: str
    content: str
    category: str = "general"
    confidence: float = 0.5
    source: str = "unknown"
    tags: list[str] = field(default_factory=list)
    embedding: list[float] | None = None

    # Timestamps (epoch ms); learned_at drives the recency boost
    learned_at: int | None = None
    submitted_at: int | None = None

    original_query: str | None = None
    metadata: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the snapshot shape (camelCase optional fields)."""
        data: dict[str, Any] = {
            "id": self.id,
            "content": self.content,
            "category": self.category,
            "confidence": self.confidence,
            "source": self.source,
            "tags": list(self.tags),
            "embedding": list(self.embedding) if self.embedding is not None else None,
        }
        if self.learned_at is not None:
            data["learnedAt"] = self.learned_at
        if self.submitted_at is not None:
            data["submittedAt"] = self.submitted_at
        if self.original_query is not None:
            data["originalQuery"] = self.original_query
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any], entry_id: str | None = None) -> KnowledgeEntry:
        """Build an entry from a snapshot dict. Raises KeyError/TypeError on bad shape."""
        return cls(
            id=entry_id or data["id"],
            content=data["content"],
            category=data.get("category", "general"),
            confidence=float(data.get("confidence", 0.5)),
            source=data.get("source", "unknown"),
            tags=[str(t).lower() for t in data.get("tags") or []],
            embedding=data.get("embedding"),
            learned_at=data.get("learnedAt"),
            submitted_at=data.get("submittedAt"),
            original_query=data.get("originalQuery"),
            metadata=data.get("metadata"),
        )


@dataclass
class ConversationTurn:
    role: str = "user"  # user | assistant
    content: str = ""
    timestamp: int = field(default_factory=now_ms)
    confidence: float | None = None
    source: str | None = None
    learned: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
        }
        for key in ("confidence", "source", "learned"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ConversationTurn:
        return cls(
            role=data.get("role", "user"),
            content=data.get("content", ""),
            timestamp=data.get("timestamp", now_ms()),
            confidence=data.get("confidence"),
            source=data.get("source"),
            learned=data.get("learned"),
        )


_METRIC_KEYS = {
    "total_queries": "totalQueries",
    "base_template_responses": "baseTemplateResponses",
    "external_api_calls": "externalApiCalls",
    "learning_events": "learningEvents",
    "knowledge_entries": "knowledgeEntries",
    "average_confidence": "averageConfidence",
}


@dataclass
class Metrics:
    total_queries: int = 0
    base_template_responses: int = 0
    external_api_calls: int = 0
    learning_events: int = 0
    knowledge_entries: int = 0
    average_confidence: float = 0.0

    def record_confidence(self, confidence: float) -> None:
        """Fold a response confidence into the running mean over total_queries."""
        n = max(self.total_queries, 1)
        self.average_confidence += (confidence - self.average_confidence) / n

    def to_dict(self) -> dict[str, Any]:
        return {camel: getattr(self, attr) for attr, camel in _METRIC_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Metrics:
        metrics = cls()
        for attr, camel in _METRIC_KEYS.items():
            if camel in data:
                setattr(metrics, attr, type(getattr(metrics, attr))(data[camel]))
        return metrics


@dataclass
class Intent:
    type: str = "general"  # booking | pricing | services | location | general
    confidence: float = 0.5


@dataclass
class Candidate:
    """A knowledge entry annotated with its retrieval scores."""
    entry: KnowledgeEntry
    similarity: float = 0.0
    relevance_score: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        data = self.entry.to_dict()
        data.pop("embedding", None)
        data["similarity"] = self.similarity
        data["relevanceScore"] = self.relevance_score
        return data


@dataclass
class SynthesizedResponse:
    content: str | None = None
    confidence: float = 0.0
    used_knowledge: list[Candidate] = field(default_factory=list)
    intent: Intent | None = None


@dataclass
class TemplateResponse:
    response: str | None = None
    confidence: float = 0.0
    source: str = "insufficient_knowledge"  # base_template | insufficient_knowledge
    should_use_external_api: bool = True
    search_results: list[Candidate] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "response": self.response,
            "confidence": self.confidence,
            "source": self.source,
            "shouldUseExternalAPI": self.should_use_external_api,
        }
        if self.should_use_external_api:
            data["searchResults"] = [c.to_dict() for c in self.search_results]
        return data


@dataclass
class ValueAssessment:
    should_learn: bool = False
    confidence: float = 0.0
    category: str = "low_value"
    tags: list[str] = field(default_factory=list)


@dataclass
class TrainingResult:
    success: bool = False
    entries_added: int = 0
    content_type: str | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {
                "success": True,
                "entriesAdded": self.entries_added,
                "contentType": self.content_type,
            }
        return {"success": False, "message": self.message}


@dataclass
class LearningEvent:
    query: str = ""
    response: str = ""
    source: str = ""
    timestamp: int = field(default_factory=now_ms)
    conversation_context: list[ConversationTurn] = field(default_factory=list)


@dataclass
class LearningPatterns:
    common_topics: list[str] = field(default_factory=list)
    sources: dict[str, int] = field(default_factory=dict)
    total_events: int = 0
