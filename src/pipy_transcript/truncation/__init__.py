"""Transcript truncation and summarization."""

from .tokens import total_tokens
from .pairing import (
    PairingCheck,
    check_pairing,
    is_valid_pairing,
    remove_interrupted_pairs,
)
from .alternation import (
    find_alternation_break,
    format_role_sequence,
    is_valid_alternation,
)
from .boundary import (
    RepairedSplit,
    SplitPoint,
    find_last_pair_start,
    find_split_index,
    repair_split,
)
from .summarize import (
    SUMMARY_HEADER,
    GeneratedSummary,
    build_summary_prompt,
    find_missing_sections,
    generate_summary,
    required_sections,
    validate_summary,
)
from .assemble import (
    CONTEXT_OPENER_TEXT,
    CONTINUE_FILLER_TEXT,
    USER_REQUEST_NOTE_TEXT,
    assemble_transcript,
)
from .truncate import (
    format_tool_response,
    format_tool_results,
    needs_truncation,
    run_truncation,
    truncate_transcript,
)

__all__ = [
    # Tokens
    "total_tokens",
    # Pairing
    "PairingCheck",
    "check_pairing",
    "is_valid_pairing",
    "remove_interrupted_pairs",
    # Alternation
    "find_alternation_break",
    "format_role_sequence",
    "is_valid_alternation",
    # Boundary
    "SplitPoint",
    "RepairedSplit",
    "find_last_pair_start",
    "find_split_index",
    "repair_split",
    # Summarize
    "SUMMARY_HEADER",
    "GeneratedSummary",
    "build_summary_prompt",
    "find_missing_sections",
    "generate_summary",
    "required_sections",
    "validate_summary",
    # Assemble
    "CONTEXT_OPENER_TEXT",
    "CONTINUE_FILLER_TEXT",
    "USER_REQUEST_NOTE_TEXT",
    "assemble_transcript",
    # Truncate
    "truncate_transcript",
    "run_truncation",
    "needs_truncation",
    "format_tool_results",
    "format_tool_response",
]
