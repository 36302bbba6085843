"""Tests for learning from external responses and the learning queue."""

import pytest

from base_template.core.intent import categorize_text
from base_template.core.learner import Learner, analyze_learning_patterns
from base_template.embeddings.hashing_embedder import HashingEmbedder
from base_template.models import KnowledgeEntry, LearningEvent
from base_template.storage.knowledge_store import KnowledgeStore

BUSINESS_ANSWER = (
    "Jay's Mobile Wash brings ceramic coating and paint correction to your driveway "
    "anywhere in Orange County."
)


@pytest.fixture
def store():
    return KnowledgeStore(HashingEmbedder(384))


@pytest.fixture
def learner(store):
    return Learner(store)


def test_extract_rejects_low_value(learner):
    assert learner.extract_knowledge("q", "I don't know", "api1") == []


def test_extract_builds_learned_entry(learner):
    [entry] = learner.extract_knowledge("Do you come to Irvine?", BUSINESS_ANSWER, "openai")
    assert entry.id.startswith("learned_")
    assert entry.content == BUSINESS_ANSWER
    assert entry.confidence == 0.9
    assert entry.source == "openai_learned"
    assert entry.original_query == "Do you come to Irvine?"
    assert entry.learned_at is not None
    assert "ceramic" in entry.tags
    assert entry.category == categorize_text(BUSINESS_ANSWER)


def test_extract_checks_existing_knowledge(store, learner):
    generic = (
        "The history of the automobile stretches back more than a century, with many "
        "inventors contributing key ideas along the way."
    )
    assert learner.extract_knowledge("q", generic, "api") != []
    store.add(KnowledgeEntry(id="k1", content=generic))
    assert learner.extract_knowledge("q", generic, "api") == []


def test_queue_flushes_at_threshold(learner):
    for i in range(9):
        assert learner.enqueue(f"q{i}", "answer", "api") is None
    assert len(learner.queue) == 9

    patterns = learner.enqueue("q9", "answer", "api")
    assert patterns is not None
    assert patterns.total_events == 10
    assert patterns.sources == {"api": 10}
    assert learner.queue == []


def test_process_empty_queue(learner):
    assert learner.process_learning_queue() is None


def test_clear(learner):
    learner.enqueue("q", "a", "api")
    learner.clear()
    assert learner.queue == []


def test_analyze_learning_patterns():
    events = [
        LearningEvent(query="ceramic coating price?", response="It costs about $500.", source="openai"),
        LearningEvent(query="how much for ceramic?", response="The fee varies by size.", source="openai"),
        LearningEvent(query="ceramic protection cost", response="Call for a quote.", source="deepseek"),
        LearningEvent(query="where do you travel", response="All of LA.", source="deepseek"),
    ]
    patterns = analyze_learning_patterns(events, min_count=3)
    assert set(patterns.common_topics) == {"ceramic_coating", "pricing"}
    assert patterns.sources == {"openai": 2, "deepseek": 2}
    assert patterns.total_events == 4
