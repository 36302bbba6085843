"""Hashing-trick bag-of-words embedder.

The default embedder. It needs no model download and is fully deterministic
across processes (bucket indices come from blake2b, not the salted builtin
``hash``). It is a lexical placeholder, not a semantic model: texts are
similar when they share words. Swap in ``TextEmbedder`` for real semantics.
"""

from __future__ import annotations

import hashlib
import logging
import re

import numpy as np

from base_template.config import TEMPLATE_CONFIG

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9]+(?:'[a-z]+)?")

STOPWORDS = frozenset(
    "a an and are as at be but by can do does for from has have i if in is it "
    "its me my of on or our so than that the their them then there these they "
    "this to us was we what which who will with you your".split()
)


def tokenize(text: str) -> list[str]:
    """Lowercase alphanumeric tokens with stopwords removed."""
    return [t for t in _TOKEN_RE.findall(text.lower()) if t not in STOPWORDS]


def cosine_similarity(a: list[float] | np.ndarray, b: list[float] | np.ndarray) -> float:
    """Cosine similarity, clamped to [0, 1]. Mismatched, empty or non-finite vectors score 0."""
    if a is None or b is None:
        return 0.0
    a_arr = np.asarray(a, dtype=np.float64)
    b_arr = np.asarray(b, dtype=np.float64)
    if a_arr.shape != b_arr.shape or a_arr.size == 0:
        return 0.0
    norm = np.linalg.norm(a_arr) * np.linalg.norm(b_arr)
    if norm == 0 or not np.isfinite(norm):
        return 0.0
    similarity = float(np.dot(a_arr, b_arr) / norm)
    if not np.isfinite(similarity):
        return 0.0
    return max(0.0, min(1.0, similarity))


class HashingEmbedder:
    """Projects token counts into a fixed number of hashed buckets."""

    def __init__(self, dimension: int | None = None) -> None:
        self._dimension = TEMPLATE_CONFIG["embedding_dimensions"] if dimension is None else dimension
        if self._dimension <= 0:
            raise ValueError("Embedding dimension must be positive")

    @property
    def dimension(self) -> int:
        return self._dimension

    def _bucket(self, token: str) -> int:
        digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
        return int.from_bytes(digest, "little") % self._dimension

    def embed(self, text: str) -> list[float]:
        """Embed a single text. Empty or stopword-only text gives the zero vector."""
        vector = np.zeros(self._dimension, dtype=np.float64)
        for token in tokenize(text or ""):
            vector[self._bucket(token)] += 1.0

        # Sublinear term frequency, then unit length
        np.log1p(vector, out=vector)
        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector.tolist()

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(t) for t in texts]
