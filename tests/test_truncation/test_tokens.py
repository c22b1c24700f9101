"""Tests for token accounting."""

from pipy_transcript.truncation.tokens import total_tokens
from pipy_transcript.types import Message, TextContent, TokenUsage


def make_message(role: str, tokens: int | None = None) -> Message:
    usage = TokenUsage(total_tokens=tokens) if tokens is not None else None
    return Message(role=role, content=[TextContent(text=role)], token_usage=usage)


class TestTotalTokens:
    def test_empty(self):
        """Test that an empty transcript costs nothing."""
        assert total_tokens([]) == 0

    def test_sums_assistant_messages(self):
        """Test summing assistant usage."""
        messages = [
            make_message("user"),
            make_message("assistant", 1200),
            make_message("user"),
            make_message("assistant", 800),
        ]

        assert total_tokens(messages) == 2000

    def test_user_usage_ignored(self):
        """Test that user messages contribute zero even with usage."""
        messages = [
            make_message("user", 5000),
            make_message("assistant", 100),
        ]

        assert total_tokens(messages) == 100

    def test_missing_usage_is_zero(self):
        """Test that assistant messages without usage count as zero."""
        messages = [
            make_message("user"),
            make_message("assistant"),
            make_message("user"),
            make_message("assistant", 42),
        ]

        assert total_tokens(messages) == 42

    def test_accepts_iterables(self):
        """Test that any iterable of messages works."""
        messages = (make_message("assistant", 10) for _ in range(3))

        assert total_tokens(messages) == 30
