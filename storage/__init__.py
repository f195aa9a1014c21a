"""Storage package — key-value store, project history, and preferences."""

from storage.kv_store import KeyValueStore
from storage.project_store import ProjectStore, HISTORY_KEY
from storage.preferences import PreferenceStore, THEME_KEY

__all__ = [
    "KeyValueStore",
    "ProjectStore",
    "HISTORY_KEY",
    "PreferenceStore",
    "THEME_KEY",
]
