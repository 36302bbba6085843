"""Chat assistant: base template first, LLM fallback second.

Wraps a ``TrainableBaseTemplate`` the way a chat widget uses it: answer
locally when the template is confident, otherwise ask an LLM and let the
template learn from that answer. Any failure becomes a fixed apology that
points the customer to the phone line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from base_template import prompts
from base_template.core.template import TrainableBaseTemplate
from base_template.llm.client import llm_complete
from base_template.models import ConversationTurn

logger = logging.getLogger(__name__)


@dataclass
class AssistantReply:
    content: str
    source: str  # base_template | external_api | error
    confidence: float = 0.0
    learned: int = 0


class ChatAssistant:
    def __init__(
        self,
        template: TrainableBaseTemplate,
        api_source: str = "external_adapter",
        model: str | None = None,
    ) -> None:
        self.template = template
        self.api_source = api_source
        self.model = model

    async def respond(
        self, query: str, history: list[ConversationTurn] | None = None,
    ) -> AssistantReply:
        try:
            result = await self.template.generate_response(query, history)
            if not result.should_use_external_api:
                return AssistantReply(
                    content=result.response,
                    source="base_template",
                    confidence=result.confidence,
                )

            answer = await llm_complete(
                query,
                system=prompts.ASSISTANT_SYSTEM,
                history=self._history_messages(history),
                model=self.model,
            )
            if not answer or not answer.strip():
                raise RuntimeError("External API returned an empty answer")

            learned = await self.template.learn_from_external_response(query, answer, self.api_source)
            return AssistantReply(
                content=answer,
                source="external_api",
                confidence=result.confidence,
                learned=len(learned),
            )
        except Exception:
            logger.exception("AI processing failed")
            return AssistantReply(content=prompts.APOLOGY_RESPONSE, source="error")

    def _history_messages(self, history: list[ConversationTurn] | None) -> list[dict[str, str]]:
        limit = self.template.config["llm_history_turns"]
        turns = [t for t in history or [] if t.role in ("user", "assistant") and t.content]
        return [{"role": t.role, "content": t.content} for t in turns[-limit:]]
