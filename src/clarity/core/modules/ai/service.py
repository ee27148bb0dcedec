import time
from typing import Protocol

import litellm
import structlog

from clarity.core.core import Service
from clarity.core.modules.ai.prompts import build_messages
from clarity.errors import UpstreamError, ValidationError

logger = structlog.get_logger(__name__)


class LLMUsage(Protocol):
    """Protocol for LLM usage statistics from litellm response."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


class AIService(Service):
    """Stateless proxy from a question (and optional PDF) to the language model."""

    async def ask(self, prompt: str | None = None, file_url: str | None = None) -> str:
        """Answer a question, optionally about a referenced document.

        Every call is independent and attempted once; nothing is stored.

        Args:
            prompt: The user's question
            file_url: URL of a PDF to answer from

        Returns:
            Plain-text answer

        Raises:
            ValidationError: If both prompt and file_url are missing
            UpstreamError: If the model call fails or returns no text
        """
        prompt = (prompt or "").strip() or None
        file_url = (file_url or "").strip() or None
        if prompt is None and file_url is None:
            raise ValidationError("Prompt or fileUrl is required")

        config = self.core.config
        if not config.llm_api_key:
            raise UpstreamError("LLM API key not configured")

        start_time = time.time()
        try:
            response = await litellm.acompletion(
                model=config.llm_model,
                messages=build_messages(prompt, file_url),
                api_key=config.llm_api_key,
            )
        except Exception as e:
            logger.exception("ai_request_failed", model=config.llm_model, has_file=file_url is not None)
            raise UpstreamError(str(e) or "AI request failed") from e

        duration_ms = int((time.time() - start_time) * 1000)
        usage: LLMUsage | None = getattr(response, "usage", None)

        try:
            text = response.choices[0].message.content
        except (AttributeError, IndexError) as e:
            raise UpstreamError("AI backend returned a malformed response") from e
        if not text:
            raise UpstreamError("AI backend returned an empty response")

        logger.info(
            "ai_request",
            model=config.llm_model,
            has_file=file_url is not None,
            duration_ms=duration_ms,
            prompt_tokens=usage.prompt_tokens if usage else None,
            completion_tokens=usage.completion_tokens if usage else None,
            total_tokens=usage.total_tokens if usage else None,
        )
        return str(text)
