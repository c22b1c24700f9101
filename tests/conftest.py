"""Pytest configuration."""

import pytest

from pipy_transcript.provider import SummaryRequest, SummaryResponse
from pipy_transcript.truncation.summarize import SUMMARY_HEADER, required_sections
from pipy_transcript.types import SummaryLength


def build_summary_text(summary_length: str = "long", omit: tuple[str, ...] = ()) -> str:
    """Summary text with every section required for the length, minus `omit`."""
    lines = [SUMMARY_HEADER, "*From earlier to later*", ""]
    for section in required_sections(SummaryLength(summary_length)):
        if section in omit:
            continue
        lines.extend([section, "- (none)", ""])
    return "\n".join(lines)


class StubSummarizer:
    """Deterministic summarizer that records its requests."""

    def __init__(
        self,
        text: str | None = None,
        output_tokens: int = 321,
        model: str = "stub/summarizer",
        error: Exception | None = None,
    ):
        self.text = text
        self.output_tokens = output_tokens
        self.model = model
        self.error = error
        self.requests: list[SummaryRequest] = []

    async def summarize(self, request: SummaryRequest) -> SummaryResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        text = self.text if self.text is not None else build_summary_text(request.summary_length.value)
        return SummaryResponse(text=text, output_tokens=self.output_tokens, model=self.model)


@pytest.fixture
def summarizer():
    return StubSummarizer()


@pytest.fixture
def make_summarizer():
    return StubSummarizer


@pytest.fixture
def build_summary():
    return build_summary_text
