"""Tests for the litellm completion wrapper."""

from types import SimpleNamespace

import litellm
import pytest

from base_template.config import TEMPLATE_CONFIG
from base_template.llm.client import build_messages, llm_complete


def _response(text):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class FakeCompletion:
    def __init__(self, failures=0, text="Ceramic coating lasts for years."):
        self.failures = failures
        self.text = text
        self.calls = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if len(self.calls) <= self.failures:
            raise RuntimeError("upstream error")
        return _response(self.text)


@pytest.fixture(autouse=True)
def no_retry_delay(monkeypatch):
    monkeypatch.setitem(TEMPLATE_CONFIG, "llm_retry_delay", 0)


def test_build_messages_order():
    messages = build_messages("new", system="sys", history=[{"role": "user", "content": "old"}])
    assert messages == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "old"},
        {"role": "user", "content": "new"},
    ]
    assert build_messages("only") == [{"role": "user", "content": "only"}]


@pytest.mark.asyncio
async def test_complete_passes_config(monkeypatch):
    fake = FakeCompletion()
    monkeypatch.setattr(litellm, "acompletion", fake)

    text = await llm_complete("How long does coating last?", system="sys")
    assert text == "Ceramic coating lasts for years."
    [call] = fake.calls
    assert call["model"] == TEMPLATE_CONFIG["llm_model"]
    assert call["temperature"] == TEMPLATE_CONFIG["llm_temperature"]
    assert call["messages"][0]["role"] == "system"


@pytest.mark.asyncio
async def test_complete_retries_then_succeeds(monkeypatch):
    fake = FakeCompletion(failures=2)
    monkeypatch.setattr(litellm, "acompletion", fake)

    assert await llm_complete("q", max_retries=3) == "Ceramic coating lasts for years."
    assert len(fake.calls) == 3


@pytest.mark.asyncio
async def test_complete_raises_after_last_attempt(monkeypatch):
    fake = FakeCompletion(failures=5)
    monkeypatch.setattr(litellm, "acompletion", fake)

    with pytest.raises(RuntimeError):
        await llm_complete("q", max_retries=2)
    assert len(fake.calls) == 2


@pytest.mark.asyncio
async def test_complete_none_content_is_empty(monkeypatch):
    monkeypatch.setattr(litellm, "acompletion", FakeCompletion(text=None))
    assert await llm_complete("q") == ""
