"""Bounded, most-recent-first history of finished projects."""

import json
import logging
from typing import Optional

from config.exceptions import StorageError
from models.project import SavedProject
from storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

HISTORY_KEY = "dreamlines_history"
DEFAULT_HISTORY_LIMIT = 3


class ProjectStore:
    """Keeps the ``limit`` newest projects; older ones are dropped on append.

    Appends always land in memory. If the durable write fails the store keeps
    working in memory only and ``degraded`` is set.
    """

    def __init__(self, kv: KeyValueStore, limit: int = DEFAULT_HISTORY_LIMIT):
        self.kv = kv
        self.limit = limit
        self.degraded = False
        self._projects: list[SavedProject] = []

    def load(self) -> list[SavedProject]:
        """Read the persisted history. Unreadable data is logged and ignored."""
        try:
            raw = self.kv.get(HISTORY_KEY)
        except StorageError as e:
            logger.error("History load failed: %s", e)
            raw = None

        projects: list[SavedProject] = []
        if raw:
            try:
                items = json.loads(raw)
                if not isinstance(items, list):
                    raise TypeError(f"history must be a list, got {type(items).__name__}")
                projects = [SavedProject.from_dict(item) for item in items]
            except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError) as e:
                logger.error("History parse error: %s", e)
                projects = []

        self._projects = projects[: self.limit]
        logger.debug("Loaded %d saved projects", len(self._projects))
        return list(self._projects)

    def append(self, project: SavedProject) -> list[SavedProject]:
        """Put ``project`` first, evict beyond the limit, and persist.

        Returns:
            The updated history, most recent first.
        """
        self._projects = [project, *self._projects][: self.limit]
        try:
            self.kv.set(HISTORY_KEY, json.dumps([p.to_dict() for p in self._projects]))
            self.degraded = False
        except StorageError as e:
            self.degraded = True
            logger.warning("Local storage full. Project %s kept in memory only: %s", project.id, e)
        return list(self._projects)

    def list(self) -> list[SavedProject]:
        return list(self._projects)

    def get(self, project_id: str) -> Optional[SavedProject]:
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def __len__(self) -> int:
        return len(self._projects)
