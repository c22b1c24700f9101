"""User/assistant role alternation checks."""

import logging

from ..types import Message

logger = logging.getLogger(__name__)


def find_alternation_break(messages: list[Message]) -> int:
    """
    Find the first message that repeats the previous message's role.

    Returns -1 if roles alternate strictly.
    """
    for i in range(1, len(messages)):
        if messages[i].role == messages[i - 1].role:
            logger.debug(
                f"Broken alternation at index {i}: {messages[i - 1].role} -> {messages[i].role}"
            )
            return i
    return -1


def is_valid_alternation(messages: list[Message]) -> bool:
    """True if no two consecutive messages share a role."""
    return find_alternation_break(messages) == -1


def format_role_sequence(messages: list[Message]) -> str:
    """Render 'index: role' lines for error reports."""
    return "\n".join(f"{i}: {msg.role}" for i, msg in enumerate(messages))
