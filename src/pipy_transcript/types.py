"""Transcript data model with Pydantic validation."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field, ValidationError

from .errors import ParameterError

# === Enums ===


class SummaryLength(str, Enum):
    """Verbosity tier of a generated summary."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


class RequestSource(str, Enum):
    """Who asked for the truncation."""

    USER = "user"
    TOOL = "tool"


# === Content Types ===


class TextContent(BaseModel):
    """Text content block."""

    type: Literal["text"] = "text"
    text: str = ""


class ActionRequest(BaseModel):
    """Action request (tool use) issued by the assistant."""

    type: Literal["action_request"] = "action_request"
    id: str = ""
    name: str = ""
    arguments: dict[str, Any] = Field(default_factory=dict)


class ActionResult(BaseModel):
    """Result of an action request."""

    type: Literal["action_result"] = "action_result"
    request_id: str = ""
    content: list[TextContent] = Field(default_factory=list)
    is_error: bool = False


ContentPart = Annotated[
    Union[TextContent, ActionRequest, ActionResult],
    Field(discriminator="type"),
]


# === Messages ===


class TokenUsage(BaseModel):
    """Token usage reported for an assistant turn."""

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class ConversationStats(BaseModel):
    """Per-turn counters. Carried through truncation unchanged."""

    statement_count: int = 0
    statement_turn_count: int = 0
    conversation_turn_count: int = 0


def generate_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Message(BaseModel):
    """A role-tagged transcript message."""

    role: Literal["user", "assistant"]
    content: list[ContentPart] = Field(default_factory=list)
    id: str = Field(default_factory=generate_id)
    timestamp: str = Field(default_factory=now_iso)
    token_usage: TokenUsage | None = None
    stats: ConversationStats = Field(default_factory=ConversationStats)

    @property
    def text(self) -> str:
        """Convenience: concatenated text content."""
        return "\n".join(c.text for c in self.content if isinstance(c, TextContent))

    @property
    def action_request(self) -> ActionRequest | None:
        """First action request part, if any."""
        return next((c for c in self.content if isinstance(c, ActionRequest)), None)

    @property
    def action_result(self) -> ActionResult | None:
        """First action result part, if any."""
        return next((c for c in self.content if isinstance(c, ActionResult)), None)

    @property
    def has_action_request(self) -> bool:
        return self.action_request is not None

    @property
    def has_action_result(self) -> bool:
        return self.action_result is not None

    @property
    def token_cost(self) -> int:
        """Budget cost of this message. User messages never count."""
        if self.role != "assistant" or self.token_usage is None:
            return 0
        return self.token_usage.total_tokens


Transcript = list[Message]


# === Requests ===


MIN_TOKENS_TO_KEEP = 1000
MAX_TOKENS_TO_KEEP = 128000
DEFAULT_TOKENS_TO_KEEP = 64000


class TruncationRequest(BaseModel):
    """Validated truncation parameters."""

    max_tokens_to_keep: int = Field(
        default=DEFAULT_TOKENS_TO_KEEP,
        ge=MIN_TOKENS_TO_KEEP,
        le=MAX_TOKENS_TO_KEEP,
    )
    summary_length: SummaryLength = SummaryLength.LONG
    request_source: RequestSource = RequestSource.TOOL

    @classmethod
    def parse(cls, raw: dict[str, Any]) -> "TruncationRequest":
        """
        Build a request from caller-supplied parameters.

        Accepts both snake_case and the camelCase wire names
        (maxTokensToKeep, summaryLength, requestSource). Missing values
        take their defaults.

        Raises:
            ParameterError: if any value is out of range or not an allowed enum value
        """
        aliases = {
            "maxTokensToKeep": "max_tokens_to_keep",
            "summaryLength": "summary_length",
            "requestSource": "request_source",
        }
        data = {aliases.get(k, k): v for k, v in raw.items() if v is not None}

        try:
            return cls(**data)
        except ValidationError as e:
            error = e.errors()[0]
            field_name = ".".join(str(p) for p in error["loc"]) or "request"
            raise ParameterError(
                f"{field_name}: {error['msg']}",
                details={"field": field_name, "value": data.get(field_name)},
            ) from None


# === Results ===


class MessagePosition(BaseModel):
    """Identity of a message at one end of a range."""

    id: str = ""
    timestamp: str = ""


class MessageRange(BaseModel):
    start: MessagePosition = Field(default_factory=MessagePosition)
    end: MessagePosition = Field(default_factory=MessagePosition)


class SummaryMetadata(BaseModel):
    """Provenance of a generated summary."""

    message_range: MessageRange = Field(default_factory=MessageRange)
    original_token_count: int = 0
    summary_token_count: int = 0
    model: str = ""
    fallback_used: bool = False


class TruncationResult(BaseModel):
    """Outcome of one truncation run."""

    summary: str
    kept_messages: list[Message]
    original_token_count: int
    new_token_count: int
    original_message_count: int
    summary_length: SummaryLength
    metadata: SummaryMetadata


class TruncationReport(BaseModel):
    """Result reported back to the caller."""

    summary: str
    original_token_count: int
    new_token_count: int
    original_message_count: int
    kept_message_count: int
    removed_message_count: int
    summary_length: SummaryLength
    request_source: RequestSource
    max_tokens_to_keep: int
    metadata: SummaryMetadata

    @classmethod
    def from_result(
        cls,
        result: TruncationResult,
        request: TruncationRequest,
    ) -> "TruncationReport":
        kept = len(result.kept_messages)
        return cls(
            summary=result.summary,
            original_token_count=result.original_token_count,
            new_token_count=result.new_token_count,
            original_message_count=result.original_message_count,
            kept_message_count=kept,
            removed_message_count=result.original_message_count - kept,
            summary_length=result.summary_length,
            request_source=request.request_source,
            max_tokens_to_keep=request.max_tokens_to_keep,
            metadata=result.metadata,
        )
