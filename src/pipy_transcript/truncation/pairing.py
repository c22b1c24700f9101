"""Action request/result pairing: validation and cleanup."""

import logging
from dataclasses import dataclass

from ..types import Message

logger = logging.getLogger(__name__)


@dataclass
class PairingCheck:
    """Outcome of validating request/result pairing."""

    valid: bool
    """Whether the sequence is acceptable."""

    index: int = -1
    """Index of the offending message, or -1 when valid."""

    reason: str = ""
    """Why the sequence was rejected."""

    def __bool__(self) -> bool:
        return self.valid


def check_pairing(messages: list[Message]) -> PairingCheck:
    """
    Validate that action requests and results are properly paired.

    Walks the messages with two states: idle, or awaiting the result of one
    request. A request while awaiting, a result while idle, a result for a
    different request, and an error result are all rejected. An unanswered
    request is accepted only when it is the last message (its result is
    still being produced).

    Args:
        messages: Messages to check, in transcript order

    Returns:
        PairingCheck describing the first violation, if any
    """
    awaiting_id: str | None = None
    awaiting_index = -1

    for i, msg in enumerate(messages):
        request = msg.action_request
        result = msg.action_result

        if request is not None:
            if awaiting_id is not None:
                return PairingCheck(
                    valid=False,
                    index=i,
                    reason=f"action request {request.id!r} issued before result of {awaiting_id!r}",
                )
            logger.debug(f"Message {i}: awaiting result for {request.id!r}")
            awaiting_id = request.id
            awaiting_index = i

        elif result is not None:
            if awaiting_id is None:
                return PairingCheck(
                    valid=False,
                    index=i,
                    reason=f"action result for {result.request_id!r} has no pending request",
                )
            if result.request_id != awaiting_id:
                return PairingCheck(
                    valid=False,
                    index=i,
                    reason=f"action result for {result.request_id!r} does not match pending request {awaiting_id!r}",
                )
            if result.is_error:
                return PairingCheck(
                    valid=False,
                    index=i,
                    reason=f"action result for {result.request_id!r} is an error",
                )
            logger.debug(f"Message {i}: result for {awaiting_id!r} received")
            awaiting_id = None
            awaiting_index = -1

    if awaiting_id is not None and awaiting_index != len(messages) - 1:
        return PairingCheck(
            valid=False,
            index=awaiting_index,
            reason=f"action request {awaiting_id!r} is never answered",
        )

    return PairingCheck(valid=True)


def is_valid_pairing(messages: list[Message]) -> bool:
    """Convenience: True if check_pairing() accepts the messages."""
    return check_pairing(messages).valid


def remove_interrupted_pairs(messages: list[Message]) -> list[Message]:
    """
    Drop request/result pairs that cannot be kept.

    - A request whose result is an error is dropped with its result.
    - A request without a result is kept only if it is the last message.
    - A result whose request is not in the slice is dropped.
    - Messages without requests or results are always kept.

    Returns a new list preserving the relative order of retained messages.
    """
    # First pass: index requests by id
    requests: dict[str, int] = {}
    for i, msg in enumerate(messages):
        request = msg.action_request
        if request is not None:
            requests[request.id] = i

    # Second pass: index results by the request they answer
    results: dict[str, tuple[int, bool]] = {}
    for i, msg in enumerate(messages):
        result = msg.action_result
        if result is not None and result.request_id:
            results[result.request_id] = (i, result.is_error)

    last_index = len(messages) - 1
    keep: set[int] = set()

    for i, msg in enumerate(messages):
        request = msg.action_request
        result = msg.action_result

        if request is None and result is None:
            keep.add(i)
            continue

        if request is None:
            if result.request_id not in requests:
                logger.debug(f"Dropping orphan result at index {i}: {result.request_id!r}")
            continue

        match = results.get(request.id)
        if match is None:
            if i == last_index:
                keep.add(i)
            else:
                logger.debug(f"Dropping unanswered request at index {i}: {request.id!r}")
            continue

        result_index, is_error = match
        if is_error:
            logger.debug(f"Dropping error sequence: {request.id!r}")
            continue

        keep.add(i)
        keep.add(result_index)

    return [msg for i, msg in enumerate(messages) if i in keep]
