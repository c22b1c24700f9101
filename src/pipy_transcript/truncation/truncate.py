"""Main truncation function."""

import logging
from typing import Any

from ..errors import PersistenceError, StructuralError, TruncationError
from ..provider import Summarizer
from ..storage import TranscriptStore
from ..types import (
    Message,
    MessagePosition,
    MessageRange,
    SummaryMetadata,
    TruncationReport,
    TruncationRequest,
    TruncationResult,
)
from .alternation import find_alternation_break, format_role_sequence
from .assemble import assemble_transcript
from .boundary import find_split_index, repair_split
from .summarize import generate_summary
from .tokens import total_tokens

logger = logging.getLogger(__name__)


def _message_range(messages: list[Message]) -> MessageRange:
    if not messages:
        return MessageRange()
    first, last = messages[0], messages[-1]
    return MessageRange(
        start=MessagePosition(id=first.id, timestamp=first.timestamp),
        end=MessagePosition(id=last.id, timestamp=last.timestamp),
    )


def needs_truncation(messages: list[Message], max_tokens_to_keep: int) -> bool:
    """True if the transcript's assistant tokens exceed the budget."""
    return total_tokens(messages) > max_tokens_to_keep


def _persist(store: TranscriptStore, transcript_id: str, messages: list[Message], removed_count: int) -> None:
    try:
        store.save_transcript(transcript_id, messages)
    except Exception as e:
        raise PersistenceError(f"Failed to save truncated transcript {transcript_id}: {e}") from e

    try:
        store.append_audit_entry(
            transcript_id,
            f"Conversation truncated to {len(messages)} messages. {removed_count} messages summarized.",
        )
    except Exception as e:
        raise PersistenceError(
            f"Truncated transcript {transcript_id} was saved but the audit entry failed: {e}",
            operation="append-audit",
        ) from e


def _backup(store: TranscriptStore, transcript_id: str) -> str:
    try:
        return store.create_backup(transcript_id)
    except Exception as e:
        raise PersistenceError(
            f"Failed to back up transcript {transcript_id}: {e}",
            operation="create-backup",
        ) from e


async def truncate_transcript(
    transcript_id: str,
    messages: list[Message],
    request: TruncationRequest,
    summarizer: Summarizer,
    store: TranscriptStore,
) -> TruncationResult:
    """
    Summarize a transcript and, if it is over budget, truncate it.

    Under budget, the whole transcript is summarized and left untouched;
    nothing is backed up or saved. Over budget, the transcript is backed
    up, a kept slice is chosen and repaired, the removed messages are
    summarized, and the assembled transcript is saved.

    The input list is never modified. Nothing is saved unless every
    validation step succeeds.

    Args:
        transcript_id: Id passed through to the store
        messages: Current transcript
        request: Validated parameters
        summarizer: Generative collaborator
        store: Persistence collaborator

    Returns:
        TruncationResult describing the run

    Raises:
        TruncationError: on any failure (see errors module)
    """
    original_tokens = total_tokens(messages)
    budget = request.max_tokens_to_keep
    length = request.summary_length
    logger.info(
        f"Truncating transcript {transcript_id}: {len(messages)} messages, "
        f"{original_tokens} tokens, budget {budget}"
    )

    try:
        if original_tokens <= budget:
            summary = await generate_summary(messages, [], length, summarizer)
            kept_messages = list(messages)
            new_tokens = original_tokens
        else:
            broken_at = find_alternation_break(messages)
            if broken_at != -1:
                sequence = format_role_sequence(messages)
                raise StructuralError(
                    f"Failed to maintain correct message alternation pattern. Message sequence:\n{sequence}",
                    details={"index": broken_at, "role_sequence": sequence},
                )

            backup = _backup(store, transcript_id)
            logger.info(f"Created backup {backup}")

            split = find_split_index(messages, budget)
            repaired = repair_split(messages, split.split_index)
            removed = messages[:repaired.split_index]
            logger.info(
                f"Split at {repaired.split_index}: keeping {len(repaired.kept_messages)}, "
                f"summarizing {len(removed)}"
            )

            summary = await generate_summary(repaired.kept_messages, removed, length, summarizer)
            kept_messages = assemble_transcript(
                summary.text,
                repaired.kept_messages,
                removed,
                request.request_source,
            )
            new_tokens = total_tokens(kept_messages)

            _persist(store, transcript_id, kept_messages, len(removed))
    except TruncationError as e:
        logger.error(f"Truncation of {transcript_id} failed: {e}")
        raise

    logger.info(f"Transcript {transcript_id}: {original_tokens} -> {new_tokens} tokens")

    return TruncationResult(
        summary=summary.text,
        kept_messages=kept_messages,
        original_token_count=original_tokens,
        new_token_count=new_tokens,
        original_message_count=len(messages),
        summary_length=length,
        metadata=SummaryMetadata(
            message_range=_message_range(messages),
            original_token_count=original_tokens,
            summary_token_count=summary.output_tokens,
            model=summary.model,
            fallback_used=False,
        ),
    )


async def run_truncation(
    transcript_id: str,
    params: dict[str, Any],
    summarizer: Summarizer,
    store: TranscriptStore,
) -> TruncationReport:
    """
    Validate raw parameters, load the transcript and truncate it.

    Parameters are validated before the store is touched.
    """
    request = TruncationRequest.parse(params)
    messages = store.load_transcript(transcript_id)
    result = await truncate_transcript(transcript_id, messages, request, summarizer, store)
    return TruncationReport.from_result(result, request)


def format_tool_results(report: TruncationReport) -> str:
    """Human-readable summary of a truncation run."""
    original = report.original_token_count
    reduction = (original - report.new_token_count) / original * 100 if original else 0.0

    return f"""Conversation Summary Results:

Original Token Count: {original}
New Token Count: {report.new_token_count}
Token Reduction: {reduction:.1f}%

Messages:
- Kept: {report.kept_message_count}
- Removed: {report.removed_message_count}

Summary Type: {report.summary_length.value}
Model Used: {report.metadata.model}

A summary of the removed messages has been added to the start of the conversation."""


def format_tool_response(report: TruncationReport) -> str:
    """One-line confirmation of a truncation run."""
    return (
        "Conversation truncated and summarized successfully. Unless specifically asked "
        "to continue with other tasks, no further action is needed. Reduced token count "
        f"from {report.original_token_count} to {report.new_token_count}."
    )
