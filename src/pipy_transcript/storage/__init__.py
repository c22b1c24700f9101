"""Transcript persistence."""

from .base import TranscriptStore
from .jsonl import (
    AUDIT_FILE,
    BACKUP_DIR,
    MESSAGES_FILE,
    JsonlTranscriptStore,
    get_default_transcript_root,
    load_messages_from_file,
)
from .memory import InMemoryTranscriptStore

__all__ = [
    "TranscriptStore",
    "JsonlTranscriptStore",
    "InMemoryTranscriptStore",
    "get_default_transcript_root",
    "load_messages_from_file",
    "MESSAGES_FILE",
    "AUDIT_FILE",
    "BACKUP_DIR",
]
