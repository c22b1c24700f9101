"""Persistence interface used by the truncation engine."""

from typing import Protocol, runtime_checkable

from ..types import Message


@runtime_checkable
class TranscriptStore(Protocol):
    """
    Storage for transcripts.

    create_backup() must complete before save_transcript() is called for
    the same transcript. append_audit_entry() is only called after a
    successful save.
    """

    def load_transcript(self, transcript_id: str) -> list[Message]: ...

    def create_backup(self, transcript_id: str) -> str: ...

    def save_transcript(self, transcript_id: str, messages: list[Message]) -> None: ...

    def append_audit_entry(self, transcript_id: str, text: str) -> None: ...
