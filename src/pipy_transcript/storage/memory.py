"""In-memory transcript storage."""

from ..types import Message


class InMemoryTranscriptStore:
    """
    TranscriptStore that keeps everything in memory.

    Every call is recorded in `calls` as (method, transcript_id), so the
    order of backup, save and audit can be checked.
    """

    def __init__(self, transcripts: dict[str, list[Message]] | None = None):
        self.transcripts: dict[str, list[Message]] = {
            k: list(v) for k, v in (transcripts or {}).items()
        }
        self.backups: dict[str, list[list[Message]]] = {}
        self.audit: dict[str, list[str]] = {}
        self.calls: list[tuple[str, str]] = []

    def load_transcript(self, transcript_id: str) -> list[Message]:
        self.calls.append(("load_transcript", transcript_id))
        if transcript_id not in self.transcripts:
            raise FileNotFoundError(f"Transcript not found: {transcript_id}")
        return list(self.transcripts[transcript_id])

    def create_backup(self, transcript_id: str) -> str:
        self.calls.append(("create_backup", transcript_id))
        snapshots = self.backups.setdefault(transcript_id, [])
        snapshots.append(list(self.transcripts.get(transcript_id, [])))
        return f"memory:{transcript_id}:{len(snapshots)}"

    def save_transcript(self, transcript_id: str, messages: list[Message]) -> None:
        self.calls.append(("save_transcript", transcript_id))
        self.transcripts[transcript_id] = list(messages)

    def append_audit_entry(self, transcript_id: str, text: str) -> None:
        self.calls.append(("append_audit_entry", transcript_id))
        self.audit.setdefault(transcript_id, []).append(text)
