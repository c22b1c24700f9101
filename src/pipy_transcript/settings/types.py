"""Settings dataclasses and their defaults."""

from dataclasses import dataclass, field
from typing import Literal

SummaryLengthName = Literal["short", "medium", "long"]
RequestSourceName = Literal["user", "tool"]


@dataclass
class TruncationSettings:
    """Defaults for truncation requests."""

    max_tokens_to_keep: int = 64000  # Assistant tokens kept after truncation
    summary_length: SummaryLengthName = "long"
    request_source: RequestSourceName = "tool"


@dataclass
class SummarizerSettings:
    """Settings for the summarization model."""

    model: str = "anthropic/claude-sonnet-4-5"
    max_tokens: int = 8192
    temperature: float | None = None
    api_key: str | None = None  # Falls back to the provider's env var


@dataclass
class StorageSettings:
    """Settings for transcript storage."""

    root: str | None = None  # Default: ~/.pipy/transcripts


@dataclass
class Settings:
    """All transcript settings."""

    truncation: TruncationSettings = field(default_factory=TruncationSettings)
    summarizer: SummarizerSettings = field(default_factory=SummarizerSettings)
    storage: StorageSettings = field(default_factory=StorageSettings)


DEFAULT_SETTINGS = Settings()
