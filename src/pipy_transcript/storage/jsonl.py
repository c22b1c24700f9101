"""Transcript storage as JSONL files on disk.

Each transcript lives in its own directory:

    <root>/<transcript_id>/messages.jsonl   one Message per line
    <root>/<transcript_id>/audit.log        one timestamped line per entry
    <root>/<transcript_id>/backups/         timestamped copies of the above
"""

import json
import logging
import os
import shutil
from datetime import datetime, timezone
from pathlib import Path

from ..types import Message

logger = logging.getLogger(__name__)

MESSAGES_FILE = "messages.jsonl"
AUDIT_FILE = "audit.log"
BACKUP_DIR = "backups"
FILES_TO_BACKUP = (MESSAGES_FILE, AUDIT_FILE)


def get_default_transcript_root() -> Path:
    """Default directory holding transcript directories (~/.pipy/transcripts)."""
    return Path.home() / ".pipy" / "transcripts"


def _file_timestamp() -> str:
    """ISO timestamp safe for use in file names."""
    return datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")


def load_messages_from_file(file_path: str | Path) -> list[Message]:
    """
    Load messages from a JSONL file.

    Blank lines are skipped. A malformed line raises, since silently
    dropping a message would break pairing and alternation.
    """
    file_path = Path(file_path)
    messages: list[Message] = []
    content = file_path.read_text(encoding="utf-8")
    for line_number, line in enumerate(content.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            messages.append(Message.model_validate_json(line))
        except ValueError as e:
            raise ValueError(f"{file_path}:{line_number}: invalid message: {e}") from e
    return messages


class JsonlTranscriptStore:
    """TranscriptStore backed by one directory per transcript."""

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root) if root else get_default_transcript_root()

    @property
    def root(self) -> Path:
        return self._root

    def transcript_dir(self, transcript_id: str) -> Path:
        return self._root / transcript_id

    def messages_path(self, transcript_id: str) -> Path:
        return self.transcript_dir(transcript_id) / MESSAGES_FILE

    def exists(self, transcript_id: str) -> bool:
        return self.messages_path(transcript_id).exists()

    def list_transcripts(self) -> list[str]:
        """Ids of all transcripts under the root, sorted."""
        if not self._root.exists():
            return []
        return sorted(
            d.name for d in self._root.iterdir()
            if d.is_dir() and (d / MESSAGES_FILE).exists()
        )

    def load_transcript(self, transcript_id: str) -> list[Message]:
        path = self.messages_path(transcript_id)
        if not path.exists():
            raise FileNotFoundError(f"Transcript not found: {transcript_id} ({path})")
        return load_messages_from_file(path)

    def create_backup(self, transcript_id: str) -> str:
        """
        Copy the transcript's files into backups/<file>.<timestamp>.

        Returns:
            Handle of the form "<backup dir>@<timestamp>"
        """
        transcript_dir = self.transcript_dir(transcript_id)
        if not transcript_dir.exists():
            raise FileNotFoundError(f"Transcript not found: {transcript_id} ({transcript_dir})")

        backup_dir = transcript_dir / BACKUP_DIR
        backup_dir.mkdir(parents=True, exist_ok=True)
        timestamp = _file_timestamp()

        for name in FILES_TO_BACKUP:
            source = transcript_dir / name
            if source.exists():
                shutil.copy2(source, backup_dir / f"{name}.{timestamp}")

        logger.info(f"Backed up transcript {transcript_id} to {backup_dir} ({timestamp})")
        return f"{backup_dir}@{timestamp}"

    def save_transcript(self, transcript_id: str, messages: list[Message]) -> None:
        """Rewrite messages.jsonl atomically."""
        path = self.messages_path(transcript_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        content = "".join(msg.model_dump_json() + "\n" for msg in messages)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(content, encoding="utf-8")
        os.replace(tmp_path, path)

    def append_audit_entry(self, transcript_id: str, text: str) -> None:
        path = self.transcript_dir(transcript_id) / AUDIT_FILE
        path.parent.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now(timezone.utc).isoformat()
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps({"timestamp": timestamp, "text": text}) + "\n")
