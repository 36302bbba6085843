"""Tests for the sentence-transformers backend, with a stand-in model."""

import numpy as np
import pytest

from base_template.core.template import make_embedder
from base_template.embeddings.text_embedder import TextEmbedder


class FakeModel:
    def __init__(self):
        self.encoded = []

    def get_sentence_embedding_dimension(self):
        return 4

    def encode(self, texts, convert_to_numpy=True, normalize_embeddings=False):
        self.encoded.append(list(texts))
        return np.array([[1.0, 0.0, 0.0, 0.0] for _ in texts])


@pytest.fixture
def embedder():
    e = TextEmbedder("fake-model")
    e._model = FakeModel()
    return e


def test_make_embedder_selects_backend():
    embedder = make_embedder({"embedding_backend": "sentence-transformers", "text_embedding_model": "m"})
    assert isinstance(embedder, TextEmbedder)


def test_embed(embedder):
    assert embedder.dimension == 4
    assert embedder.embed("ceramic coating") == [1.0, 0.0, 0.0, 0.0]


def test_blank_text_skips_model(embedder):
    assert embedder.embed("   ") == [0.0, 0.0, 0.0, 0.0]
    assert embedder.model.encoded == []


def test_batch_is_one_call(embedder):
    vectors = embedder.embed_batch(["wash", "", "wax"])
    assert vectors[1] == [0.0] * 4
    assert vectors[0] == vectors[2] == [1.0, 0.0, 0.0, 0.0]
    assert embedder.model.encoded == [["wash", "wax"]]
