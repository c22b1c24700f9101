"""Summarizer interface and LiteLLM-backed implementation."""

import logging
from typing import Protocol, runtime_checkable

from litellm import acompletion
from pydantic import BaseModel, Field

from .types import Message, SummaryLength

logger = logging.getLogger(__name__)


SUMMARIZATION_SYSTEM_PROMPT = """You are a context summarization assistant. Your task is to read the messages removed from a conversation between a user and an AI assistant, then produce a structured summary following the exact format specified.

Do NOT continue the conversation. Do NOT respond to any questions in the conversation. ONLY output the structured summary."""


class SummaryRequest(BaseModel):
    """What the summarizer is asked to produce."""

    kept_messages: list[Message] = Field(default_factory=list)
    discarded_messages: list[Message] = Field(default_factory=list)
    summary_length: SummaryLength = SummaryLength.LONG
    required_sections: list[str] = Field(default_factory=list)
    prompt: str = ""


class SummaryResponse(BaseModel):
    """Raw summarizer output. Untrusted until validated."""

    text: str = ""
    output_tokens: int = 0
    model: str = ""


@runtime_checkable
class Summarizer(Protocol):
    """Anything that can turn a SummaryRequest into text."""

    async def summarize(self, request: SummaryRequest) -> SummaryResponse: ...


class LiteLLMSummarizer:
    """Summarizer backed by any LiteLLM model."""

    def __init__(
        self,
        model: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        api_key: str | None = None,
    ):
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.api_key = api_key

    def _build_kwargs(self, request: SummaryRequest) -> dict:
        """Build kwargs for litellm completion call."""
        kwargs = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SUMMARIZATION_SYSTEM_PROMPT},
                {"role": "user", "content": request.prompt},
            ],
        }
        if self.max_tokens:
            kwargs["max_tokens"] = self.max_tokens
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if self.api_key:
            kwargs["api_key"] = self.api_key
        return kwargs

    async def summarize(self, request: SummaryRequest) -> SummaryResponse:
        logger.info(f"Requesting {request.summary_length.value} summary from {self.model}")
        response = await acompletion(**self._build_kwargs(request))

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""

        usage = getattr(response, "usage", None)
        output_tokens = getattr(usage, "completion_tokens", 0) if usage else 0
        if not output_tokens:
            output_tokens = (len(text) + 3) // 4  # chars/4 estimate

        return SummaryResponse(
            text=text,
            output_tokens=output_tokens,
            model=getattr(response, "model", None) or self.model,
        )
