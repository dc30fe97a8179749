"""JSON project record stored in QSettings under a fixed key."""

from __future__ import annotations

import json
import logging

from PySide6.QtCore import QSettings

from snapthumb.models.project import ProjectState
from snapthumb.utils.config import LOCAL_KEY

logger = logging.getLogger(__name__)

PROJECT_VERSION = 3


def project_to_json(project: ProjectState) -> str:
    """Serialize *project* to the persisted record (live video handle blanked)."""
    data = project.to_dict(persist=True)
    data["version"] = PROJECT_VERSION
    return json.dumps(data, ensure_ascii=False)


def project_from_json(text: str) -> ProjectState:
    """Deserialize a persisted record, merging it over the defaults.

    Raises:
        ValueError: if *text* is not a JSON object.
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("project record is not a JSON object")
    return ProjectState.from_dict(data)


class ProjectStorage:
    """Durable single-record store for the current project."""

    def __init__(self, settings: QSettings | None = None, key: str = LOCAL_KEY):
        self._settings = settings if settings is not None else QSettings()
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> ProjectState | None:
        """Return the stored project, or None if absent or unreadable."""
        try:
            raw = self._settings.value(self._key, "", str)
            if not raw:
                return None
            return project_from_json(raw)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning(f"Discarding unreadable project record: {e}")
            return None

    def save(self, project: ProjectState) -> bool:
        """Write *project*; failures are logged and reported as False."""
        try:
            self._settings.setValue(self._key, project_to_json(project))
            self._settings.sync()
        except (TypeError, ValueError, RuntimeError) as e:
            logger.warning(f"Project autosave failed: {e}")
            return False
        if self._settings.status() != QSettings.Status.NoError:
            logger.warning(f"Project autosave failed: QSettings status {self._settings.status()}")
            return False
        return True

    def clear(self) -> None:
        self._settings.remove(self._key)
        self._settings.sync()
