"""LiteLLM chat completion used when the base template defers."""

from __future__ import annotations

import asyncio
import logging

import litellm

from base_template.config import TEMPLATE_CONFIG

logger = logging.getLogger(__name__)

litellm.suppress_debug_info = True


def build_messages(
    prompt: str,
    system: str | None = None,
    history: list[dict[str, str]] | None = None,
) -> list[dict[str, str]]:
    """System prompt, then earlier turns oldest first, then the new user prompt."""
    messages = [{"role": "system", "content": system}] if system else []
    messages += [{"role": h["role"], "content": h["content"]} for h in history or []]
    messages.append({"role": "user", "content": prompt})
    return messages


async def llm_complete(
    prompt: str,
    system: str | None = None,
    history: list[dict[str, str]] | None = None,
    model: str | None = None,
    temperature: float | None = None,
    max_retries: int | None = None,
) -> str:
    """Ask the configured chat model for an answer to ``prompt``.

    Failed calls are retried with a doubling backoff; the last failure is
    re-raised to the caller.
    """
    cfg = TEMPLATE_CONFIG
    model = model or cfg["llm_model"]
    temperature = cfg["llm_temperature"] if temperature is None else temperature
    attempts = max_retries or cfg["llm_max_retries"]
    messages = build_messages(prompt, system, history)

    delay = cfg["llm_retry_delay"]
    for attempt in range(1, attempts + 1):
        try:
            response = await litellm.acompletion(
                model=model,
                messages=messages,
                temperature=temperature,
                timeout=cfg["llm_timeout"],
            )
            return response.choices[0].message.content or ""
        except Exception:
            if attempt == attempts:
                raise
            logger.warning("LLM call to %s failed (attempt %d/%d), retrying", model, attempt, attempts)
            await asyncio.sleep(delay)
            delay *= 2
    return ""
