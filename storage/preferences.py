"""Persisted UI preferences."""

import logging

from config.exceptions import StorageError
from models.enums import ThemePreference
from storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

THEME_KEY = "dreamlines_theme"


class PreferenceStore:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def get_theme(self) -> ThemePreference:
        """Stored dark/light choice; dark unless light was saved."""
        try:
            raw = self.kv.get(THEME_KEY)
        except StorageError as e:
            logger.warning("Theme preference unreadable: %s", e)
            return ThemePreference.DARK
        return ThemePreference.LIGHT if raw == ThemePreference.LIGHT.value else ThemePreference.DARK

    def set_theme(self, theme: ThemePreference) -> None:
        try:
            self.kv.set(THEME_KEY, theme.value)
        except StorageError as e:
            logger.warning("Theme preference not saved: %s", e)
