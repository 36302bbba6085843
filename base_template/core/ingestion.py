"""Turns submitted training content into knowledge entries.

Text, video transcripts and website content are reduced to plain text,
split into sentence-aligned chunks and graded one chunk at a time.
Conversations are paired into ``Q: ... / A: ...`` exchanges instead.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from base_template.config import TEMPLATE_CONFIG
from base_template.core.knowledge_value import assess_text_chunk_value
from base_template.exceptions import InvalidInputError
from base_template.models import KnowledgeEntry, make_entry_id, now_ms

logger = logging.getLogger(__name__)

CONTENT_TYPES = ("text", "video", "website", "conversation")

_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]*")


def _split_long(sentence: str, max_length: int) -> list[str]:
    """Break an over-long sentence on word boundaries, hard-cutting giant words."""
    pieces: list[str] = []
    current = ""
    for word in sentence.split():
        while len(word) > max_length:
            if current:
                pieces.append(current)
                current = ""
            pieces.append(word[:max_length])
            word = word[max_length:]
        if not word:
            continue
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_length:
            current = candidate
        else:
            pieces.append(current)
            current = word
    if current:
        pieces.append(current)
    return pieces


def chunk_text(text: str, max_length: int | None = None) -> list[str]:
    """Split text into chunks of at most ``max_length`` characters.

    Chunks end on sentence terminators (``.``, ``!``, ``?``) wherever a
    sentence fits; whitespace-only input yields no chunks.
    """
    max_length = max_length or TEMPLATE_CONFIG["chunk_max_length"]
    chunks: list[str] = []
    current = ""

    for match in _SENTENCE_RE.finditer(text or ""):
        sentence = match.group(0)
        if not sentence.strip(" \t\r\n.!?"):
            continue
        if len(sentence.strip()) <= max_length:
            pieces = [sentence]
        else:
            pieces = [" " + p for p in _split_long(sentence, max_length)]
        for piece in pieces:
            if len((current + piece).strip()) <= max_length:
                current += piece
            else:
                chunks.append(_squash(current))
                current = piece

    if current.strip():
        chunks.append(_squash(current))
    return chunks


def _squash(text: str) -> str:
    return " ".join(text.split())


def extract_video_transcript(video: Any) -> str:
    if isinstance(video, dict):
        video = video.get("transcript")
    if not isinstance(video, str):
        raise InvalidInputError("Video content must include transcript text")
    return video


def extract_website_text(website: Any) -> str:
    if isinstance(website, str):
        # A bare string is a URL; fetching pages belongs to the caller
        return f"Website content from: {website}. Content processing would be implemented here."
    if isinstance(website, dict) and isinstance(website.get("content"), str):
        return website["content"]
    raise InvalidInputError("Website content must be string URL or object with content property")


def build_text_entries(
    text: str, metadata: dict[str, Any], config: dict | None = None,
) -> list[KnowledgeEntry]:
    cfg = config or TEMPLATE_CONFIG
    entries: list[KnowledgeEntry] = []
    for i, chunk in enumerate(chunk_text(text, cfg["chunk_max_length"])):
        assessment = assess_text_chunk_value(chunk, cfg)
        if not assessment.should_learn:
            logger.debug("Skipping low-value chunk %d (%d chars)", i, len(chunk))
            continue
        entries.append(KnowledgeEntry(
            id=make_entry_id("text", i),
            content=chunk,
            category=assessment.category,
            confidence=assessment.confidence,
            source=metadata.get("source") or "text_training",
            tags=assessment.tags,
            submitted_at=now_ms(),
            metadata=metadata,
        ))
    return entries


def build_conversation_entries(
    conversation: Any, metadata: dict[str, Any], config: dict | None = None,
) -> list[KnowledgeEntry]:
    if not isinstance(conversation, list):
        raise InvalidInputError("Conversation content must be an array of messages")

    entries: list[KnowledgeEntry] = []
    for i in range(len(conversation) - 1):
        user_msg, assistant_msg = conversation[i], conversation[i + 1]
        if not isinstance(user_msg, dict) or not isinstance(assistant_msg, dict):
            continue
        if user_msg.get("role") != "user" or assistant_msg.get("role") != "assistant":
            continue

        exchange = f"Q: {user_msg.get('content', '')}\nA: {assistant_msg.get('content', '')}"
        assessment = assess_text_chunk_value(exchange, config)
        if not assessment.should_learn:
            continue
        entries.append(KnowledgeEntry(
            id=make_entry_id("conv", i),
            content=exchange,
            category="qa_pair",
            confidence=assessment.confidence,
            source=metadata.get("source") or "conversation_training",
            tags=["qa", *assessment.tags],
            submitted_at=now_ms(),
            metadata=metadata,
        ))
    return entries


def prepare_training_entries(
    content: Any,
    content_type: str,
    metadata: dict[str, Any] | None = None,
    config: dict | None = None,
) -> list[KnowledgeEntry]:
    """Normalise ``content`` by type and return the entries worth keeping.

    Raises:
        InvalidInputError: unsupported ``content_type`` or content of the
            wrong shape for its type.
    """
    metadata = dict(metadata or {})

    if content_type == "text":
        if not isinstance(content, str):
            raise InvalidInputError("Text content must be a string")
        return build_text_entries(content, metadata, config)
    if content_type == "video":
        transcript = extract_video_transcript(content)
        video_meta = {**metadata, "contentType": "video", "processedAt": now_ms()}
        return build_text_entries(transcript, video_meta, config)
    if content_type == "website":
        text = extract_website_text(content)
        web_meta = {**metadata, "contentType": "website", "processedAt": now_ms()}
        return build_text_entries(text, web_meta, config)
    if content_type == "conversation":
        return build_conversation_entries(content, metadata, config)

    raise InvalidInputError(f"Unsupported content type: {content_type}")
