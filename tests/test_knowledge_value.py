"""Tests for the knowledge value heuristics."""

from base_template.core.knowledge_value import (
    assess_knowledge_value,
    assess_text_chunk_value,
    has_similar_knowledge,
    text_similarity,
)
from base_template.models import KnowledgeEntry

GENERIC = (
    "The history of the automobile stretches back more than a century, with many "
    "inventors contributing key ideas along the way."
)


def test_rejects_short_answers():
    result = assess_knowledge_value("q", "I don't know")
    assert result.should_learn is False
    assert result.confidence == 0.0


def test_rejects_hedged_answers():
    answer = "I'm not sure about that, but ceramic coating is usually applied in a garage."
    assert assess_knowledge_value("q", answer).should_learn is False


def test_business_answers_score_high():
    answer = "Jay's Mobile Wash serves all of Los Angeles with premium detailing packages."
    result = assess_knowledge_value("q", answer)
    assert result.should_learn is True
    assert result.confidence == 0.9
    assert "detailing" in result.tags


def test_domain_answers_score_medium():
    answer = "Ceramic coating protects your paint from UV damage and makes washing easier."
    result = assess_knowledge_value("q", answer)
    assert result.should_learn is True
    assert result.confidence == 0.7
    assert result.tags == ["wash", "ceramic", "coating", "paint"]


def test_generic_long_answers_score_low():
    result = assess_knowledge_value("q", GENERIC)
    assert result.should_learn is True
    assert result.confidence == 0.5
    assert result.category == "general"


def test_generic_duplicates_rejected():
    existing = [KnowledgeEntry(id="k1", content=GENERIC)]
    assert assess_knowledge_value("q", GENERIC, existing).should_learn is False


def test_generic_medium_length_rejected():
    answer = "Tires should be rotated every five thousand miles or so."
    assert 50 <= len(answer) <= 100
    assert assess_knowledge_value("q", answer).should_learn is False


def test_chunk_business_markers():
    result = assess_text_chunk_value("Jay's Mobile Wash offers ceramic coating in Beverly Hills")
    assert result.should_learn is True
    assert result.confidence == 0.95
    assert result.category == "business_info"


def test_chunk_service_keywords():
    result = assess_text_chunk_value("Paint correction removes swirls.")
    assert result.confidence == 0.8
    assert result.category == "services"


def test_chunk_generic_text():
    result = assess_text_chunk_value(GENERIC)
    assert result.confidence == 0.6
    assert result.category == "general"


def test_chunk_rejects_placeholders_and_short_text():
    assert assess_text_chunk_value("Lorem ipsum " * 20).should_learn is False
    rejected = assess_text_chunk_value("Short note.")
    assert rejected.should_learn is False
    assert rejected.category == "low_value"


def test_text_similarity():
    assert text_similarity("a b c", "a b d") == 0.5
    assert text_similarity("Same Words", "same words") == 1.0
    assert text_similarity("", "") == 0.0


def test_has_similar_knowledge_threshold():
    entries = [KnowledgeEntry(id="k1", content="a b c d e")]
    assert has_similar_knowledge("a b c d e", entries) is True
    assert has_similar_knowledge("a b c d x", entries) is False
    assert has_similar_knowledge("a b c d x", entries, threshold=0.5) is True
