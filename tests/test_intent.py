"""Tests for intent classification and text tagging."""

import pytest

from base_template.core.intent import (
    IntentClassifier,
    categorize_text,
    extract_tags,
    extract_topics,
)


@pytest.fixture
def classifier():
    return IntentClassifier()


@pytest.mark.parametrize("query,expected", [
    ("I want to book an appointment", "booking"),
    ("What time can you come out tomorrow?", "booking"),
    ("How much is a full detail?", "pricing"),
    ("Can I get a quote?", "pricing"),
    ("Do you do interior cleaning?", "services"),
    ("Tell me about ceramic coating", "services"),
    ("Where are you located?", "location"),
    ("Do you serve Irvine?", "location"),
    ("What is quantum physics?", "general"),
    ("", "general"),
])
def test_classify(classifier, query, expected):
    assert classifier.classify(query).type == expected


def test_booking_beats_pricing(classifier):
    """Earlier intents win even when a later one also matches."""
    intent = classifier.classify("How much to book an appointment?")
    assert intent.type == "booking"
    assert intent.confidence == 0.9


def test_pricing_beats_services(classifier):
    assert classifier.classify("What does ceramic coating cost?").type == "pricing"


def test_case_insensitive(classifier):
    assert classifier.classify("BOOK NOW").type == "booking"
    assert classifier.classify("How   Much?").type == "pricing"


def test_word_boundaries(classifier):
    assert classifier.classify("areaXYZ").type == "general"
    assert classifier.classify("bookkeeping tips").type == "general"
    assert classifier.classify("washington weather").type == "general"


def test_general_confidence(classifier):
    intent = classifier.classify("hello there")
    assert intent.type == "general"
    assert intent.confidence == 0.5


def test_custom_patterns():
    classifier = IntentClassifier([("greeting", 0.6, ("hello", "hi there"))])
    assert classifier.classify("Hello!").type == "greeting"
    assert classifier.classify("book it").type == "general"


@pytest.mark.parametrize("text,expected", [
    ("The price depends on size", "pricing"),
    ("Our service covers the whole car", "services"),
    ("We cover every area nearby", "location"),
    ("Call to schedule a visit", "booking"),
    ("Nothing relevant here", "general"),
])
def test_categorize_text(text, expected):
    assert categorize_text(text) == expected


def test_extract_tags():
    tags = extract_tags("Premium ceramic coating for luxury cars, plus interior detailing")
    assert tags == ["detailing", "ceramic", "coating", "interior", "luxury", "premium"]
    assert extract_tags("nothing here") == []


def test_extract_topics():
    topics = extract_topics("How much does ceramic coating cost to book?")
    assert set(topics) == {"pricing", "booking", "ceramic_coating"}
