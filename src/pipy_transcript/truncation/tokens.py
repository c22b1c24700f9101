"""Token accounting for truncation."""

from collections.abc import Iterable

from ..types import Message


def total_tokens(messages: Iterable[Message]) -> int:
    """
    Sum the reported token usage of a transcript.

    Only assistant messages carry usage from the provider; user messages
    have not been processed by the model yet and contribute zero. Missing
    usage counts as zero.
    """
    return sum(msg.token_cost for msg in messages)
