"""Trainable Base Template: answers from local knowledge or defers.

This is the primary interface for the chat layer. It owns the knowledge
store, conversation memory and metrics, and wires the retriever,
synthesizer and learner together. Persistence goes through an injected
snapshot storage and is best-effort: a failing backend is logged and the
engine keeps working in memory.
"""

from __future__ import annotations

import logging
from typing import Any

from base_template.config import TEMPLATE_CONFIG
from base_template.core.ingestion import prepare_training_entries
from base_template.core.intent import IntentClassifier
from base_template.core.learner import Learner
from base_template.core.retrieval import Retriever
from base_template.core.synthesis import ResponseSynthesizer
from base_template.embeddings.hashing_embedder import HashingEmbedder
from base_template.exceptions import InvalidDataError
from base_template.models import (
    ConversationTurn,
    KnowledgeEntry,
    Metrics,
    TemplateResponse,
    TrainingResult,
    now_ms,
)
from base_template.storage.knowledge_store import Embedder, KnowledgeStore
from base_template.storage.snapshot_store import MemorySnapshotStorage, SnapshotStorage

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"

CORE_KNOWLEDGE: list[dict[str, Any]] = [
    {
        "id": "business_overview",
        "content": (
            "Jay's Mobile Wash is a premium mobile car detailing service serving Los Angeles "
            "and Orange County. We specialize in luxury and exotic vehicles, offering paint "
            "correction, ceramic coating, interior deep cleaning, and full detailing packages. "
            "Our team comes directly to customers' locations with professional equipment and "
            "premium products like Koch Chemie and BioBomb odor elimination."
        ),
        "category": "business_info",
        "tags": ["business", "services", "luxury", "mobile"],
    },
    {
        "id": "service_areas",
        "content": (
            "We provide mobile detailing services throughout Los Angeles County and Orange "
            "County. This includes Beverly Hills, Santa Monica, Newport Beach, Irvine, Anaheim, "
            "Long Beach, Pasadena, and surrounding areas. We travel to your location whether "
            "it's your home, office, or another convenient spot."
        ),
        "category": "service_areas",
        "tags": ["locations", "service_areas", "mobile"],
    },
    {
        "id": "contact_booking",
        "content": (
            "For scheduling and detailed quotes, customers should call 562-228-9429. This is "
            "the fastest way to check availability, get accurate pricing based on specific "
            "vehicles and locations, and book appointments. We often have same-day or next-day "
            "availability."
        ),
        "category": "booking",
        "tags": ["booking", "contact", "phone", "scheduling"],
    },
    {
        "id": "pricing_services",
        "content": (
            "Our pricing starts around $70 for basic exterior packages, with full detail "
            "packages and ceramic coating services priced based on vehicle size and condition. "
            "We offer Jay's Max Detail packages, paint correction, ceramic coating applications, "
            "interior deep cleaning, and odor elimination services. Exact pricing depends on "
            "vehicle type, condition, and specific services requested."
        ),
        "category": "pricing",
        "tags": ["pricing", "packages", "services"],
    },
]


def make_embedder(config: dict) -> Embedder:
    """Build the embedder named by ``config["embedding_backend"]``."""
    backend = config["embedding_backend"]
    if backend == "hashing":
        return HashingEmbedder(config["embedding_dimensions"])
    if backend == "sentence-transformers":
        from base_template.embeddings.text_embedder import TextEmbedder
        return TextEmbedder(config["text_embedding_model"])
    raise ValueError(f"Unknown embedding backend: {backend}")


class TrainableBaseTemplate:
    """Top-level knowledge engine: retrieve, answer or defer, and learn."""

    def __init__(
        self,
        config: dict | None = None,
        storage: SnapshotStorage | None = None,
        embedder: Embedder | None = None,
    ) -> None:
        self.config = {**TEMPLATE_CONFIG, **(config or {})}
        self.storage: SnapshotStorage = storage or MemorySnapshotStorage()
        self.embedder = embedder or make_embedder(self.config)

        self.store = KnowledgeStore(
            self.embedder,
            max_entries=self.config["max_knowledge_entries"],
            pinned_sources=self.config["pinned_sources"],
        )
        self.classifier = IntentClassifier()
        self.retriever = Retriever(self.store, self.classifier, self.config)
        self.synthesizer = ResponseSynthesizer(self.config)
        self.learner = Learner(self.store, self.config)

        self.metrics = Metrics()
        self._memory: list[ConversationTurn] = []

    async def initialize(self) -> None:
        """Load the persisted snapshot, then seed any missing core knowledge."""
        logger.info("Initializing Trainable Base Template")
        await self._load()

        missing = [k for k in CORE_KNOWLEDGE if k["id"] not in self.store]
        for knowledge in missing:
            fields = dict(knowledge, tags=list(knowledge["tags"]))
            self.store.add(KnowledgeEntry(confidence=1.0, source="core_knowledge", **fields))
        self.metrics.knowledge_entries = len(self.store)
        if missing:
            await self._persist()

        logger.info("Knowledge base contains %d entries", len(self.store))

    async def close(self) -> None:
        close = getattr(self.storage, "close", None)
        if close is not None:
            await close()

    @property
    def conversation_memory(self) -> list[ConversationTurn]:
        return list(self._memory)

    # ── Core operations ──

    async def generate_response(
        self, query: str, context: list[ConversationTurn] | None = None,
    ) -> TemplateResponse:
        """Answer from local knowledge, or signal that an external API is needed."""
        self.metrics.total_queries += 1
        self._remember(ConversationTurn(role="user", content=query))

        intent = self.classifier.classify(query)
        candidates = self.retriever.retrieve(query, context, intent=intent)
        synthesized = self.synthesizer.synthesize(query, candidates, intent)
        self.metrics.record_confidence(synthesized.confidence)

        if synthesized.content and synthesized.confidence >= self.config["confidence_threshold"]:
            self.metrics.base_template_responses += 1
            self._remember(ConversationTurn(
                role="assistant",
                content=synthesized.content,
                confidence=synthesized.confidence,
                source="base_template",
            ))
            logger.debug("Answered %s query locally (confidence %.2f)", intent.type, synthesized.confidence)
            return TemplateResponse(
                response=synthesized.content,
                confidence=synthesized.confidence,
                source="base_template",
                should_use_external_api=False,
            )

        self.metrics.external_api_calls += 1
        logger.debug("Deferring %s query (confidence %.2f)", intent.type, synthesized.confidence)
        return TemplateResponse(
            response=None,
            confidence=synthesized.confidence,
            source="insufficient_knowledge",
            should_use_external_api=True,
            search_results=candidates,
        )

    async def learn_from_external_response(
        self, query: str, external_response: str, api_source: str,
    ) -> list[KnowledgeEntry]:
        """Record a learning event and keep the external answer if it is valuable."""
        self.metrics.learning_events += 1
        self.learner.enqueue(query, external_response, api_source, self._memory)

        learned = self.learner.extract_knowledge(query, external_response, api_source)
        for entry in learned:
            await self.add_knowledge(entry)
        if learned:
            logger.info("Learned %d new knowledge entries from %s", len(learned), api_source)

        self._remember(ConversationTurn(
            role="assistant",
            content=external_response,
            source=api_source,
            learned=len(learned),
        ))
        return learned

    async def submit_training_content(
        self, content: Any, content_type: str, metadata: dict[str, Any] | None = None,
    ) -> TrainingResult:
        """Ingest text, a video transcript, website content or a conversation.

        Raises:
            InvalidInputError: unsupported type or structurally invalid content.
        """
        logger.info("Submitting training content: %s", content_type)
        entries = prepare_training_entries(content, content_type, metadata, self.config)
        if not entries:
            return TrainingResult(
                success=False,
                content_type=content_type,
                message="No valuable knowledge extracted from content",
            )

        for entry in entries:
            await self.add_knowledge(entry, persist=False)
        await self._persist()

        logger.info("Processed %d knowledge entries from %s content", len(entries), content_type)
        return TrainingResult(success=True, entries_added=len(entries), content_type=content_type)

    async def add_knowledge(self, entry: KnowledgeEntry, persist: bool = True) -> None:
        self.store.add(entry)
        self.metrics.knowledge_entries = len(self.store)
        if persist:
            await self._persist()

    # ── Metrics and backup ──

    def get_metrics(self) -> dict[str, Any]:
        m = self.metrics
        total = m.base_template_responses + m.external_api_calls
        success_rate = m.base_template_responses / total * 100 if total else 0.0
        growth = f"{m.knowledge_entries / m.learning_events:.2f}" if m.learning_events else "0"
        return {
            **m.to_dict(),
            "baseTemplateSuccessRate": f"{success_rate:.1f}%",
            "knowledgeGrowthRate": growth,
            "memoryUsage": len(self._memory),
            "lastUpdate": now_ms(),
        }

    def export_knowledge_base(self) -> dict[str, Any]:
        return {
            "knowledge": self.store.snapshot(),
            "metrics": self.metrics.to_dict(),
            "conversationMemory": [t.to_dict() for t in self._memory],
            "exportedAt": now_ms(),
            "version": EXPORT_VERSION,
        }

    async def import_knowledge_base(self, data: Any) -> None:
        """Replace the knowledge base wholesale from an export.

        Raises:
            InvalidDataError: ``data`` has no ``knowledge`` list or holds
                malformed entries. The current state is left untouched.
        """
        if not isinstance(data, dict) or data.get("knowledge") is None:
            raise InvalidDataError("Invalid knowledge base data")

        metrics = self.metrics
        memory = self._memory
        try:
            if data.get("metrics"):
                metrics = Metrics.from_dict({**self.metrics.to_dict(), **data["metrics"]})
            if data.get("conversationMemory"):
                memory = [ConversationTurn.from_dict(t) for t in data["conversationMemory"]]
        except (TypeError, ValueError, AttributeError) as exc:
            raise InvalidDataError(f"Invalid knowledge base data: {exc}") from exc

        self.store.restore(data["knowledge"])
        self.metrics = metrics
        self.metrics.knowledge_entries = len(self.store)
        self._memory = memory[-self.config["memory_window_size"]:]

        await self._persist()
        logger.info("Imported %d knowledge entries", len(self.store))

    async def clear_knowledge_base(self) -> None:
        self.store.clear()
        self.learner.clear()
        self._memory = []
        self.metrics = Metrics()
        try:
            await self.storage.clear()
        except Exception:
            logger.exception("Failed to clear persisted knowledge base")
        logger.info("Knowledge base cleared")

    # ── Internals ──

    def _remember(self, turn: ConversationTurn) -> None:
        self._memory.append(turn)
        window = self.config["memory_window_size"]
        if len(self._memory) > window:
            self._memory = self._memory[-window:]

    async def _persist(self) -> None:
        snapshot = {
            "knowledge": self.store.snapshot(),
            "metrics": self.metrics.to_dict(),
            "lastSaved": now_ms(),
        }
        try:
            await self.storage.save(snapshot)
        except Exception:
            logger.exception("Failed to save knowledge base")

    async def _load(self) -> None:
        try:
            data = await self.storage.load()
        except Exception:
            logger.exception("Failed to load knowledge base")
            return
        if not data:
            return

        try:
            self.store.restore(data.get("knowledge") or [])
            if data.get("metrics"):
                self.metrics = Metrics.from_dict({**self.metrics.to_dict(), **data["metrics"]})
        except (InvalidDataError, TypeError, ValueError, AttributeError):
            logger.exception("Persisted knowledge base is malformed, starting fresh")
            self.store.clear()
            self.metrics = Metrics()
            return

        self.metrics.knowledge_entries = len(self.store)
        logger.info("Loaded %d knowledge entries from storage", len(self.store))
