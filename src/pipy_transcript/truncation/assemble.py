"""Splice a summary into the kept messages."""

import logging

from ..errors import AssemblyError
from ..types import ConversationStats, Message, RequestSource, TextContent
from .alternation import find_alternation_break, format_role_sequence

logger = logging.getLogger(__name__)


CONTEXT_OPENER_TEXT = (
    "Please incorporate the context from the previous conversation messages "
    "that have been summarized below"
)

CONTINUE_FILLER_TEXT = "Continue with the conversation based on the context above"

USER_REQUEST_NOTE_TEXT = (
    "Note: The conversation has been truncated and summarized by user request. "
    "Please review the new objectives in the subsequent messages to determine "
    "the current focus before proceeding."
)


def _text_message(role: str, text: str, stats: ConversationStats) -> Message:
    return Message(
        role=role,
        content=[TextContent(text=text)],
        stats=stats.model_copy(),
    )


def create_context_messages(summary: str, stats: ConversationStats) -> list[Message]:
    """Create the user opener and assistant summary pair."""
    return [
        _text_message("user", CONTEXT_OPENER_TEXT, stats),
        _text_message("assistant", summary, stats),
    ]


def assemble_transcript(
    summary: str,
    kept_messages: list[Message],
    removed_messages: list[Message],
    request_source: RequestSource,
) -> list[Message]:
    """
    Build the new transcript: summary context followed by the kept messages.

    - A user opener and an assistant summary message go first; both carry
      the counters of the last removed message.
    - For user-requested truncation, a note is appended to the last message
      if it is from the assistant.
    - If the first kept message is from the assistant, a filler user
      message is inserted after the summary.

    The input lists are not modified.

    Raises:
        AssemblyError: if the result still does not alternate
    """
    stats = removed_messages[-1].stats if removed_messages else ConversationStats()

    assembled = create_context_messages(summary, stats) + list(kept_messages)

    # With nothing kept, the summary itself is the last message
    last = assembled[-1]
    if RequestSource(request_source) == RequestSource.USER and last.role == "assistant":
        assembled[-1] = last.model_copy(
            update={"content": [*last.content, TextContent(text=USER_REQUEST_NOTE_TEXT)]}
        )

    if len(assembled) > 2 and assembled[2].role == "assistant":
        logger.debug("First kept message is from assistant, inserting filler user message")
        assembled.insert(2, _text_message("user", CONTINUE_FILLER_TEXT, stats))

    broken_at = find_alternation_break(assembled)
    if broken_at != -1:
        sequence = format_role_sequence(assembled)
        raise AssemblyError(
            f"Failed to maintain correct message alternation pattern. Message sequence:\n{sequence}",
            details={"index": broken_at, "role_sequence": sequence},
        )

    return assembled
