"""Transcript settings: defaults plus global and project JSON files."""

from .manager import (
    CONFIG_DIR_NAME,
    SETTINGS_FILE_NAME,
    SettingsManager,
    deep_merge,
    get_default_agent_dir,
    read_settings_file,
)
from .types import (
    DEFAULT_SETTINGS,
    Settings,
    StorageSettings,
    SummarizerSettings,
    TruncationSettings,
)

__all__ = [
    # Manager
    "SettingsManager",
    "read_settings_file",
    "deep_merge",
    "get_default_agent_dir",
    "CONFIG_DIR_NAME",
    "SETTINGS_FILE_NAME",
    # Settings
    "Settings",
    "DEFAULT_SETTINGS",
    "TruncationSettings",
    "SummarizerSettings",
    "StorageSettings",
]
