"""Sentence-transformers backend for knowledge embeddings.

Selected with ``embedding_backend = "sentence-transformers"``; needs the
``semantic`` extra. Vectors come back unit-length so the knowledge store's
cosine search behaves the same as with ``HashingEmbedder``.
"""

from __future__ import annotations

import logging

from sentence_transformers import SentenceTransformer

from base_template.config import TEMPLATE_CONFIG

logger = logging.getLogger(__name__)


class TextEmbedder:
    """Semantic embedder; the model is loaded on first use."""

    def __init__(self, model_name: str | None = None) -> None:
        self._model_name = model_name or TEMPLATE_CONFIG["text_embedding_model"]
        self._model: SentenceTransformer | None = None

    @property
    def model(self) -> SentenceTransformer:
        if self._model is None:
            logger.info("Loading text embedding model: %s", self._model_name)
            self._model = SentenceTransformer(self._model_name)
        return self._model

    @property
    def dimension(self) -> int:
        return self.model.get_sentence_embedding_dimension()

    def embed(self, text: str) -> list[float]:
        return self.embed_batch([text])[0]

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed texts in one model call. Blank texts map to the zero vector."""
        results = [[0.0] * self.dimension for _ in texts]
        todo = [i for i, t in enumerate(texts) if t and t.strip()]
        if todo:
            vectors = self.model.encode(
                [texts[i] for i in todo], convert_to_numpy=True, normalize_embeddings=True,
            )
            for i, vector in zip(todo, vectors):
                results[i] = vector.tolist()
        return results
