"""In-memory knowledge store with brute-force cosine search.

Entries are keyed by id and kept in least-recently-used order: inserting an
entry or returning it from retrieval moves it to the back. When the store
grows past ``max_knowledge_entries`` the front is evicted, skipping entries
whose source is pinned (core business knowledge by default).
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Any, Iterable, Protocol

import numpy as np

from base_template.config import TEMPLATE_CONFIG
from base_template.embeddings.hashing_embedder import cosine_similarity
from base_template.exceptions import InvalidDataError
from base_template.models import Candidate, KnowledgeEntry

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    @property
    def dimension(self) -> int: ...

    def embed(self, text: str) -> list[float]: ...


class KnowledgeStore:
    """Id-keyed knowledge entries with precomputed embeddings."""

    def __init__(
        self,
        embedder: Embedder,
        max_entries: int | None = None,
        pinned_sources: Iterable[str] | None = None,
    ) -> None:
        self.embedder = embedder
        self.max_entries = (
            TEMPLATE_CONFIG["max_knowledge_entries"] if max_entries is None else max_entries
        )
        self.pinned_sources = set(
            pinned_sources if pinned_sources is not None else TEMPLATE_CONFIG["pinned_sources"]
        )
        self._entries: OrderedDict[str, KnowledgeEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: str) -> bool:
        return entry_id in self._entries

    def get(self, entry_id: str) -> KnowledgeEntry | None:
        return self._entries.get(entry_id)

    def entries(self) -> list[KnowledgeEntry]:
        return list(self._entries.values())

    def _ensure_embedding(self, entry: KnowledgeEntry) -> None:
        """Keep a finite vector of the embedder's dimension, otherwise re-embed."""
        if entry.embedding is not None:
            try:
                vector = np.asarray(entry.embedding, dtype=np.float64)
            except (TypeError, ValueError):
                vector = None
            if (
                vector is not None
                and vector.shape == (self.embedder.dimension,)
                and np.all(np.isfinite(vector))
            ):
                entry.embedding = vector.tolist()
                return
            logger.debug("Re-embedding %s: stored vector unusable", entry.id)
        entry.embedding = self.embedder.embed(entry.content)

    def add(self, entry: KnowledgeEntry) -> list[str]:
        """Insert or overwrite an entry. Returns the ids evicted to make room."""
        self._ensure_embedding(entry)
        self._entries.pop(entry.id, None)
        self._entries[entry.id] = entry
        logger.debug("Added knowledge: %s (%s)", entry.id, entry.category)
        return self._evict()

    def _evict(self) -> list[str]:
        evicted: list[str] = []
        if len(self._entries) <= self.max_entries:
            return evicted
        for entry_id in list(self._entries):
            if len(self._entries) <= self.max_entries:
                break
            if self._entries[entry_id].source in self.pinned_sources:
                continue
            del self._entries[entry_id]
            evicted.append(entry_id)
        if evicted:
            logger.info("Evicted %d knowledge entries over the %d cap", len(evicted), self.max_entries)
        return evicted

    def touch(self, entry_ids: Iterable[str]) -> None:
        """Mark entries as recently used."""
        for entry_id in entry_ids:
            if entry_id in self._entries:
                self._entries.move_to_end(entry_id)

    def search(
        self, query_embedding: list[float], min_similarity: float | None = None,
    ) -> list[Candidate]:
        """Return every entry scoring strictly above the floor, in store order."""
        floor = TEMPLATE_CONFIG["min_similarity"] if min_similarity is None else min_similarity
        results: list[Candidate] = []
        for entry in self._entries.values():
            similarity = cosine_similarity(query_embedding, entry.embedding)
            if similarity > floor:
                results.append(Candidate(entry=entry, similarity=similarity))
        return results

    def clear(self) -> None:
        self._entries.clear()

    # ── Snapshot ──

    def snapshot(self) -> list[list[Any]]:
        """Export as ``[[id, entry_dict], ...]`` in store order."""
        return [[entry_id, entry.to_dict()] for entry_id, entry in self._entries.items()]

    def restore(self, data: Any) -> None:
        """Replace the whole store from ``snapshot()`` output.

        Nothing is changed if any pair is malformed.
        """
        if not isinstance(data, list):
            raise InvalidDataError("Knowledge snapshot must be a list of [id, entry] pairs")

        restored: OrderedDict[str, KnowledgeEntry] = OrderedDict()
        for item in data:
            if not isinstance(item, (list, tuple)) or len(item) != 2 or not isinstance(item[1], dict):
                raise InvalidDataError(f"Malformed knowledge pair: {item!r:.80}")
            entry_id, payload = item
            try:
                entry = KnowledgeEntry.from_dict(payload, entry_id=str(entry_id))
            except (KeyError, TypeError, ValueError) as exc:
                raise InvalidDataError(f"Invalid knowledge entry {entry_id!r}: {exc}") from exc
            if not isinstance(entry.content, str):
                raise InvalidDataError(f"Knowledge entry {entry_id!r} has non-text content")
            for field_name in ("learned_at", "submitted_at"):
                value = getattr(entry, field_name)
                if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                    raise InvalidDataError(f"Knowledge entry {entry_id!r} has non-numeric {field_name}")
            self._ensure_embedding(entry)
            restored[entry.id] = entry

        self._entries = restored
        self._evict()
