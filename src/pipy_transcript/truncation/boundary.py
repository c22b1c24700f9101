"""Split point detection and repair for truncation."""

import logging
from dataclasses import dataclass, field

from ..errors import StructuralError
from ..types import Message
from .pairing import check_pairing, remove_interrupted_pairs

logger = logging.getLogger(__name__)


@dataclass
class SplitPoint:
    """Result from finding a split point."""

    split_index: int
    """Index of the first message to keep."""

    pair_start_index: int
    """Start of the trailing role pair that is always kept."""

    kept_tokens: int
    """Assistant tokens in messages[split_index:]."""


@dataclass
class RepairedSplit:
    """Split point after pairing repair."""

    split_index: int
    """Index of the first message to keep (never greater than requested)."""

    kept_messages: list[Message] = field(default_factory=list)
    """messages[split_index:] with interrupted pairs removed."""

    attempts: int = 1
    """Number of slices checked before one was accepted."""


def find_last_pair_start(messages: list[Message]) -> int:
    """
    Find the start of the last complete role pair.

    Walks back over the trailing run of same-role messages, then includes
    the message before that run. Returns 0 for a transcript with fewer
    than two role changes.
    """
    if not messages:
        return 0

    index = len(messages) - 1
    while index > 0 and messages[index].role == messages[index - 1].role:
        index -= 1
    if index > 0:
        index -= 1  # Include the complete pair
    return index


def find_split_index(messages: list[Message], max_tokens: int) -> SplitPoint:
    """
    Find the split index that keeps at most `max_tokens` assistant tokens.

    Algorithm: the last complete role pair is always kept, whatever it
    costs. From there walk backwards accumulating assistant token usage;
    the first message that would push the total over `max_tokens` is the
    boundary and everything after it is kept. A message that brings the
    total to exactly `max_tokens` is kept.

    Args:
        messages: Full transcript
        max_tokens: Token budget for kept messages

    Returns:
        SplitPoint; split_index 0 means keep everything
    """
    pair_start = find_last_pair_start(messages)
    accumulated = 0

    for i in range(len(messages) - 1, -1, -1):
        message_tokens = messages[i].token_cost

        if i >= pair_start:
            logger.debug(
                f"Keeping message {i} (part of last pair): role={messages[i].role}, tokens={message_tokens}"
            )
            accumulated += message_tokens
            continue

        if accumulated + message_tokens > max_tokens:
            logger.debug(
                f"Would exceed token limit at index {i}: {accumulated} + {message_tokens} > {max_tokens}"
            )
            return SplitPoint(
                split_index=i + 1,
                pair_start_index=pair_start,
                kept_tokens=accumulated,
            )

        accumulated += message_tokens

    return SplitPoint(split_index=0, pair_start_index=pair_start, kept_tokens=accumulated)


def repair_split(messages: list[Message], split_index: int) -> RepairedSplit:
    """
    Move the split index back until the kept slice pairs correctly.

    Each candidate slice messages[s:] is cleaned with
    remove_interrupted_pairs() and then checked with check_pairing(). The
    index only ever decreases, so the loop ends at 0 at the latest.

    Raises:
        StructuralError: if even the whole transcript fails pairing
    """
    index = split_index
    attempts = 0

    while True:
        attempts += 1
        kept = remove_interrupted_pairs(messages[index:])
        check = check_pairing(kept)
        if check.valid:
            if index != split_index:
                logger.warning(
                    f"Adjusted split index from {split_index} to {index} to keep action pairs intact"
                )
            return RepairedSplit(split_index=index, kept_messages=kept, attempts=attempts)

        logger.debug(f"Slice from {index} fails pairing: {check.reason}")
        if index == 0:
            raise StructuralError(
                f"Transcript has unrecoverable action pairing: {check.reason}",
                operation="validate-pairing",
                details={"index": check.index, "reason": check.reason},
            )
        index -= 1
