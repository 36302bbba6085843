"""Response synthesis from ranked knowledge.

Booking, pricing, services and location queries get canned answers with a
fixed confidence. General queries are answered by stitching together the
closest knowledge entries, and the confidence is the mean of
``confidence * similarity`` over the entries used.
"""

from __future__ import annotations

import logging

from base_template import prompts
from base_template.config import BUSINESS, TEMPLATE_CONFIG
from base_template.models import Candidate, Intent, SynthesizedResponse

logger = logging.getLogger(__name__)

TEMPLATED_INTENTS: dict[str, tuple[str, float]] = {
    "booking": (prompts.BOOKING_RESPONSE, 0.9),
    "pricing": (prompts.PRICING_RESPONSE, 0.8),
    "services": (prompts.SERVICES_RESPONSE, 0.85),
    "location": (prompts.LOCATION_RESPONSE, 0.9),
}


class ResponseSynthesizer:
    def __init__(self, config: dict | None = None) -> None:
        self.config = config or TEMPLATE_CONFIG

    def synthesize(
        self, query: str, candidates: list[Candidate], intent: Intent,
    ) -> SynthesizedResponse:
        if intent.type in TEMPLATED_INTENTS:
            content, confidence = TEMPLATED_INTENTS[intent.type]
            return SynthesizedResponse(content=content, confidence=confidence, intent=intent)

        floor = self.config["general_similarity_floor"]
        used = [
            c for c in candidates[: self.config["general_max_sources"]]
            if c.similarity > floor
        ]
        if not used:
            return SynthesizedResponse(content=None, confidence=0.0, intent=intent)

        confidence = sum(c.entry.confidence * c.similarity for c in used) / len(used)
        return SynthesizedResponse(
            content=combine_knowledge(used),
            confidence=max(0.0, min(confidence, 1.0)),
            used_knowledge=used,
            intent=intent,
        )


def combine_knowledge(candidates: list[Candidate]) -> str:
    """Join unique entry texts and make sure the phone number call to action is present."""
    seen: set[str] = set()
    parts: list[str] = []
    for cand in candidates:
        if cand.entry.content not in seen:
            seen.add(cand.entry.content)
            parts.append(cand.entry.content)

    response = " ".join(parts)
    if response and BUSINESS["phone"] not in response:
        response += " " + prompts.CALL_TO_ACTION
    return response
