"""Tests for in-memory transcript storage."""

import pytest

from pipy_transcript.storage import InMemoryTranscriptStore, TranscriptStore
from pipy_transcript.types import Message, TextContent


def make_message(text: str) -> Message:
    return Message(role="user", content=[TextContent(text=text)], id=text)


class TestInMemoryTranscriptStore:
    def test_satisfies_protocol(self):
        assert isinstance(InMemoryTranscriptStore(), TranscriptStore)

    def test_load_returns_copy(self):
        """Test that callers cannot mutate stored transcripts through a loaded list."""
        store = InMemoryTranscriptStore({"t": [make_message("a")]})

        loaded = store.load_transcript("t")
        loaded.append(make_message("b"))

        assert len(store.transcripts["t"]) == 1

    def test_load_missing(self):
        with pytest.raises(FileNotFoundError):
            InMemoryTranscriptStore().load_transcript("t")

    def test_backup_snapshots(self):
        """Test that each backup keeps the transcript at that moment."""
        store = InMemoryTranscriptStore({"t": [make_message("a")]})

        first = store.create_backup("t")
        store.save_transcript("t", [make_message("b")])
        second = store.create_backup("t")

        assert first != second
        assert [[m.id for m in snap] for snap in store.backups["t"]] == [["a"], ["b"]]

    def test_records_calls(self):
        store = InMemoryTranscriptStore()

        store.save_transcript("t", [])
        store.append_audit_entry("t", "saved")

        assert store.calls == [("save_transcript", "t"), ("append_audit_entry", "t")]
        assert store.audit == {"t": ["saved"]}
