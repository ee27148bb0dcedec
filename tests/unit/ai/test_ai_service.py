"""Tests for AIService with the model call patched out."""

from types import SimpleNamespace

import litellm
import pytest

from clarity.errors import UpstreamError, ValidationError


def make_response(content: str | None):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=12, completion_tokens=30, total_tokens=42),
    )


@pytest.fixture
def llm_calls(monkeypatch):
    """Record litellm.acompletion calls and answer with a fixed text."""
    calls: list[dict] = []

    async def fake_acompletion(**kwargs):
        calls.append(kwargs)
        return make_response("Plants turn light into sugar.")

    monkeypatch.setattr(litellm, "acompletion", fake_acompletion)
    return calls


class TestAsk:
    """Tests for AIService.ask."""

    async def test_prompt_only(self, services, config, llm_calls):
        answer = await services.ai.ask("What is photosynthesis?")
        assert answer == "Plants turn light into sugar."
        assert len(llm_calls) == 1
        assert llm_calls[0]["model"] == config.llm_model
        assert llm_calls[0]["api_key"] == config.llm_api_key
        assert llm_calls[0]["messages"][0]["content"].endswith("What is photosynthesis?")

    async def test_file_only_uses_default_question(self, services, llm_calls):
        await services.ai.ask(None, "http://testserver/api/files/public/public/a.pdf")
        text_part, file_part = llm_calls[0]["messages"][0]["content"]
        assert text_part["text"].endswith("Summarize this document:")
        assert file_part["file"]["file_id"] == "http://testserver/api/files/public/public/a.pdf"

    async def test_missing_prompt_and_file(self, services, llm_calls):
        with pytest.raises(ValidationError, match="Prompt or fileUrl is required"):
            await services.ai.ask("   ", "")
        assert llm_calls == []

    async def test_backend_failure(self, services, monkeypatch):
        async def failing_acompletion(**kwargs):
            raise RuntimeError("quota exceeded")

        monkeypatch.setattr(litellm, "acompletion", failing_acompletion)
        with pytest.raises(UpstreamError, match="quota exceeded"):
            await services.ai.ask("Hello")

    async def test_empty_answer(self, services, monkeypatch):
        async def empty_acompletion(**kwargs):
            return make_response("")

        monkeypatch.setattr(litellm, "acompletion", empty_acompletion)
        with pytest.raises(UpstreamError):
            await services.ai.ask("Hello")

    async def test_missing_api_key(self, services, config, llm_calls, monkeypatch):
        monkeypatch.setattr(config, "llm_api_key", "")
        with pytest.raises(UpstreamError):
            await services.ai.ask("Hello")
        assert llm_calls == []
