"""Transcript settings loaded from a global file and a project file."""

import json
import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

from ..types import TruncationRequest
from .types import (
    Settings,
    StorageSettings,
    SummarizerSettings,
    TruncationSettings,
)

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".pi"
SETTINGS_FILE_NAME = "transcript-settings.json"

# Legacy camelCase keys, per section
_CAMEL_CASE_KEYS = {
    "truncation": {
        "maxTokensToKeep": "max_tokens_to_keep",
        "summaryLength": "summary_length",
        "requestSource": "request_source",
    },
    "summarizer": {
        "maxTokens": "max_tokens",
        "apiKey": "api_key",
    },
}


def get_default_agent_dir() -> Path:
    """Global configuration directory (~/.pipy)."""
    return Path.home() / ".pipy"


def deep_merge(base: dict, overrides: dict) -> dict:
    """Merge overrides into a copy of base, recursing into nested dicts. None never overrides."""
    merged = dict(base)
    for key, value in overrides.items():
        if value is None:
            continue
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def normalize_keys(data: dict) -> dict:
    """Rename camelCase keys to their snake_case field names, in place."""
    for section, renames in _CAMEL_CASE_KEYS.items():
        values = data.get(section)
        if not isinstance(values, dict):
            continue
        for camel, snake in renames.items():
            if camel in values and snake not in values:
                values[snake] = values.pop(camel)
    return data


def _section(cls: type, data: Any) -> Any:
    if not isinstance(data, dict):
        return cls()
    names = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in names})


def dict_to_settings(data: dict) -> Settings:
    """Build Settings from a merged dict. Unknown keys are ignored."""
    return Settings(
        truncation=_section(TruncationSettings, data.get("truncation")),
        summarizer=_section(SummarizerSettings, data.get("summarizer")),
        storage=_section(StorageSettings, data.get("storage")),
    )


def read_settings_file(path: Path) -> dict:
    """
    Read one settings file.

    A missing file is empty. An unreadable file, or one that does not hold
    a JSON object, is logged and treated as empty so the other layer still
    applies.
    """
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Could not load settings from {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.warning(f"Ignoring settings in {path}: expected a JSON object")
        return {}
    return normalize_keys(data)


class SettingsManager:
    """
    Settings merged from two JSON files, later files winning:

    1. Global: ~/.pipy/transcript-settings.json
    2. Project: <cwd>/.pi/transcript-settings.json
    """

    def __init__(
        self,
        cwd: str | Path | None = None,
        agent_dir: str | Path | None = None,
        load: bool = True,
    ):
        cwd = Path(cwd) if cwd else Path.cwd()
        agent_dir = Path(agent_dir) if agent_dir else get_default_agent_dir()

        self.paths: list[Path] = [
            agent_dir / SETTINGS_FILE_NAME,
            cwd / CONFIG_DIR_NAME / SETTINGS_FILE_NAME,
        ]
        self._layers: dict[Path, dict] = {}
        self._settings = Settings()

        if load:
            self.reload()

    @classmethod
    def in_memory(cls, settings: Settings | None = None) -> "SettingsManager":
        """Settings that never touch the filesystem."""
        manager = cls(load=False)
        manager._settings = settings or Settings()
        return manager

    def reload(self) -> None:
        """Re-read every settings file."""
        merged: dict = {}
        self._layers = {}
        for path in self.paths:
            layer = read_settings_file(path)
            self._layers[path] = layer
            merged = deep_merge(merged, layer)
        self._settings = dict_to_settings(merged)

    @property
    def settings(self) -> Settings:
        return self._settings

    def layer(self, path: str | Path) -> dict:
        """Raw values loaded from one settings file."""
        return dict(self._layers.get(Path(path), {}))

    def get_truncation_settings(self) -> TruncationSettings:
        return self._settings.truncation

    def get_summarizer_settings(self) -> SummarizerSettings:
        return self._settings.summarizer

    def get_storage_root(self) -> str | None:
        return self._settings.storage.root

    def apply_overrides(self, overrides: dict) -> None:
        """Layer overrides (same shape as a settings file) on top."""
        merged = deep_merge(asdict(self._settings), normalize_keys(overrides))
        self._settings = dict_to_settings(merged)

    def build_request(self, overrides: dict[str, Any] | None = None) -> TruncationRequest:
        """
        Validated TruncationRequest from the truncation defaults plus overrides.

        None values in overrides keep the configured default.

        Raises:
            ParameterError: if the resulting values are invalid
        """
        params = asdict(self._settings.truncation)
        params.update({k: v for k, v in (overrides or {}).items() if v is not None})
        return TruncationRequest.parse(params)
