"""
pipy-transcript - Transcript truncation and summarization.

Keeps the most recent part of a long conversation under a token budget,
summarizes the removed part with an LLM, and splices the summary back in
without splitting action request/result pairs or breaking role alternation.

Quick start:
    from pipy_transcript import (
        JsonlTranscriptStore, LiteLLMSummarizer, run_truncation,
    )

    report = await run_truncation(
        "my-transcript",
        {"maxTokensToKeep": 32000, "summaryLength": "medium"},
        LiteLLMSummarizer("anthropic/claude-sonnet-4-5"),
        JsonlTranscriptStore(),
    )
    print(report.new_token_count)
"""

__version__ = "0.1.0"

from .errors import (
    AssemblyError,
    GenerationError,
    ParameterError,
    PersistenceError,
    StructuralError,
    TruncationError,
)
from .provider import (
    LiteLLMSummarizer,
    Summarizer,
    SummaryRequest,
    SummaryResponse,
)
from .storage import (
    InMemoryTranscriptStore,
    JsonlTranscriptStore,
    TranscriptStore,
)
from .truncation import (
    format_tool_response,
    format_tool_results,
    run_truncation,
    total_tokens,
    truncate_transcript,
)
from .types import (
    ActionRequest,
    ActionResult,
    ContentPart,
    ConversationStats,
    Message,
    MessagePosition,
    MessageRange,
    RequestSource,
    SummaryLength,
    SummaryMetadata,
    TextContent,
    TokenUsage,
    Transcript,
    TruncationReport,
    TruncationRequest,
    TruncationResult,
)

__all__ = [
    # Version
    "__version__",
    # Enums
    "SummaryLength",
    "RequestSource",
    # Content
    "TextContent",
    "ActionRequest",
    "ActionResult",
    "ContentPart",
    # Messages
    "Message",
    "Transcript",
    "TokenUsage",
    "ConversationStats",
    # Requests / results
    "TruncationRequest",
    "TruncationResult",
    "TruncationReport",
    "SummaryMetadata",
    "MessageRange",
    "MessagePosition",
    # Errors
    "TruncationError",
    "ParameterError",
    "StructuralError",
    "GenerationError",
    "AssemblyError",
    "PersistenceError",
    # Summarizer
    "Summarizer",
    "SummaryRequest",
    "SummaryResponse",
    "LiteLLMSummarizer",
    # Storage
    "TranscriptStore",
    "JsonlTranscriptStore",
    "InMemoryTranscriptStore",
    # Engine
    "truncate_transcript",
    "run_truncation",
    "total_tokens",
    "format_tool_results",
    "format_tool_response",
]
