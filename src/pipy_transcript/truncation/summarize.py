"""Summary generation and validation for truncation."""

import json
import logging
from dataclasses import dataclass

from ..errors import GenerationError
from ..provider import Summarizer, SummaryRequest, SummaryResponse
from ..types import Message, SummaryLength

logger = logging.getLogger(__name__)


SUMMARY_HEADER = "## Removed Conversation Context"

SHORT_SECTIONS = [
    "### Files Referenced",
    "### Tools Used",
    "### Key Decisions",
]

MEDIUM_SECTIONS = SHORT_SECTIONS + [
    "### Requirements Established",
    "### Code Changes",
    "### Project Context",
]

LONG_SECTIONS = MEDIUM_SECTIONS + [
    "### External References",
]

_SECTIONS_BY_LENGTH = {
    SummaryLength.SHORT: SHORT_SECTIONS,
    SummaryLength.MEDIUM: MEDIUM_SECTIONS,
    SummaryLength.LONG: LONG_SECTIONS,
}


VERBOSITY_GUIDES = {
    SummaryLength.SHORT: (
        "Create a concise summary focusing on the most critical information. "
        "Prioritize key decisions, file changes, and essential context."
    ),
    SummaryLength.MEDIUM: (
        "Create a balanced summary that captures important details while maintaining clarity. "
        "Include context about decisions and their rationale."
    ),
    SummaryLength.LONG: (
        "Create a detailed summary that thoroughly documents the conversation. "
        "Include comprehensive context, decision rationales, and relationships between different aspects."
    ),
}


# Guidance per section, indexed short/medium/long
_SECTION_GUIDANCE = {
    "### Statement Objectives": (
        "[List key objectives that guided the conversation, showing task progression]",
        "[List objectives chronologically, showing how tasks and goals evolved]",
        "[Provide detailed progression of objectives, including relationships between tasks and their outcomes]",
    ),
    "### Files Referenced": (
        "[List key files that were modified or significantly discussed. Ignore file mentions in general discussion.]",
        "[List files that were referenced, with their revisions and how they were used (modified, reviewed, discussed). Include only files that were actually accessed.]",
        "[List all files referenced, including their revisions, how they were used, and their relationships to other files and changes. Track file states across the conversation but only for files that were actually accessed.]",
    ),
    "### Tools Used": (
        "[List main tools used and their key results, focusing on project modifications]",
        "[List tools used, number of uses, and key results. Distinguish between tools that modified the project and query tools]",
        "[Provide detailed analysis of tool usage, including all results, relationships between tool uses, and their impact on the project]",
    ),
    "### Key Decisions": (
        "[List key decisions that significantly impacted the project]",
        "[List important decisions made during this part of the conversation]",
        "[Document all decisions, including their context, rationale, and implications for the project]",
    ),
    "### Requirements Established": (
        "",
        "[List any requirements or constraints that were established]",
        "[Document all requirements and constraints, including their context and implications]",
    ),
    "### Code Changes": (
        "",
        "[Summarize code changes discussed or implemented]",
        "[Provide detailed analysis of all code changes, including implementation details and their impact]",
    ),
    "### Project Context": (
        "",
        "[List any project-specific terminology or concepts that were introduced or discussed]",
        "[Document all project terminology and concepts, including their relationships and significance]",
    ),
    "### External References": (
        "",
        "",
        "[Document all external references with detailed context and their relevance to the project]",
    ),
}

_TIER_INDEX = {
    SummaryLength.SHORT: 0,
    SummaryLength.MEDIUM: 1,
    SummaryLength.LONG: 2,
}


NOTE_TO_ASSISTANT = """>> NOTE TO ASSISTANT <<
The objectives listed above are historical context only. Before proceeding:
1. Review subsequent messages carefully for new objectives
2. Pay special attention to action request/result pairs and their associated objectives
3. If this truncation was user-requested, the last objective in the conversation may be completed
4. Look for the most recent objective in the remaining conversation to determine current focus"""


@dataclass
class GeneratedSummary:
    """A summary that passed section validation."""

    text: str
    output_tokens: int
    model: str


def required_sections(summary_length: SummaryLength) -> list[str]:
    """
    Section headers a summary of the given length must contain.

    Each tier contains every header of the shorter tiers.
    """
    return list(_SECTIONS_BY_LENGTH[SummaryLength(summary_length)])


def find_missing_sections(text: str, summary_length: SummaryLength) -> list[str]:
    """Return required headers (including the summary header) absent from text."""
    expected = [SUMMARY_HEADER] + required_sections(summary_length)
    return [section for section in expected if section not in text]


def get_summary_sections(summary_length: SummaryLength) -> str:
    """Render the section template for the requested length."""
    summary_length = SummaryLength(summary_length)
    tier = _TIER_INDEX[summary_length]
    headers = ["### Statement Objectives"] + required_sections(summary_length)

    blocks = [f"{header}\n{_SECTION_GUIDANCE[header][tier]}" for header in headers]
    blocks.append(NOTE_TO_ASSISTANT)
    return "\n\n".join(blocks)


def format_message(message: Message) -> str:
    """Serialize one message for the summary prompt."""
    content = [part.model_dump(mode="json") for part in message.content]
    return f"""=== Message ===
Role: {message.role}
Timestamp: {message.timestamp}
Content:
{json.dumps(content, indent=2)}"""


def _time_range(messages: list[Message]) -> tuple[str, str]:
    if not messages:
        return "", ""
    return messages[0].timestamp, messages[-1].timestamp


def build_summary_prompt(
    kept_messages: list[Message],
    removed_messages: list[Message],
    summary_length: SummaryLength,
) -> str:
    """
    Build the prompt asking for a summary of the removed messages.

    The kept messages are included so the summary can focus on what is
    still relevant to them.

    Args:
        kept_messages: Messages that stay in the transcript
        removed_messages: Messages to be summarized and discarded
        summary_length: Verbosity tier

    Returns:
        Prompt text
    """
    summary_length = SummaryLength(summary_length)
    kept_start, kept_end = _time_range(kept_messages)
    removed_start, removed_end = _time_range(removed_messages)
    length = summary_length.value

    kept_text = "\n\n".join(format_message(m) for m in kept_messages)
    removed_text = "\n\n".join(format_message(m) for m in removed_messages)

    return f"""You are helping to maintain conversation context while reducing token usage. You need to create a {length} summary of removed messages while being aware of the kept messages for context.

{VERBOSITY_GUIDES[summary_length]}

Kept Messages ({kept_start} to {kept_end}):
{kept_text}

Removed Messages ({removed_start} to {removed_end}):
{removed_text}

Please provide a {length} summary of the removed messages in this format:

{SUMMARY_HEADER}
*From {removed_start} to {removed_end}*

{get_summary_sections(summary_length)}

Ensure your summary accurately captures all important context from the removed messages while considering the kept messages for relevance."""


def validate_summary(response: SummaryResponse, summary_length: SummaryLength) -> GeneratedSummary:
    """
    Check a summarizer response for every required section header.

    Raises:
        GenerationError: listing the missing headers
    """
    missing = find_missing_sections(response.text, summary_length)
    if missing:
        length = SummaryLength(summary_length).value
        raise GenerationError(
            f"Generated {length} summary is missing required sections: {', '.join(missing)}",
            operation="validate-summary",
            details={"summary_length": length},
            missing_sections=missing,
        )
    return GeneratedSummary(
        text=response.text,
        output_tokens=response.output_tokens,
        model=response.model,
    )


async def generate_summary(
    kept_messages: list[Message],
    removed_messages: list[Message],
    summary_length: SummaryLength,
    summarizer: Summarizer,
) -> GeneratedSummary:
    """
    Generate and validate a summary of the removed messages.

    The summarizer is called exactly once. Any failure it raises, and any
    response missing required sections, ends the run.

    Args:
        kept_messages: Messages that stay in the transcript
        removed_messages: Messages to summarize (may be empty)
        summary_length: Verbosity tier
        summarizer: Generative collaborator

    Returns:
        GeneratedSummary with text, output tokens and model
    """
    summary_length = SummaryLength(summary_length)
    request = SummaryRequest(
        kept_messages=kept_messages,
        discarded_messages=removed_messages,
        summary_length=summary_length,
        required_sections=required_sections(summary_length),
        prompt=build_summary_prompt(kept_messages, removed_messages, summary_length),
    )

    try:
        response = await summarizer.summarize(request)
    except Exception as e:
        raise GenerationError(f"Summarization failed: {e}") from e

    summary = validate_summary(response, summary_length)
    logger.info(
        f"Generated {summary_length.value} summary: {summary.output_tokens} tokens from {summary.model or 'unknown model'}"
    )
    return summary
