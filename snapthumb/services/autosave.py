"""Debounced persistence of the current project."""

from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from snapthumb.models.project import ProjectState
from snapthumb.services.project_io import ProjectStorage
from snapthumb.utils.config import AUTOSAVE_DEBOUNCE_MS

logger = logging.getLogger(__name__)


class AutoSaveManager(QObject):
    """Writes the latest scheduled project once edits settle.

    Every ``schedule()`` restarts a single-shot timer, so a burst of commits
    produces one write of the newest value (last writer wins). ``flush()``
    performs the pending write synchronously.
    """

    save_completed = Signal()
    save_failed = Signal()

    def __init__(self, storage: ProjectStorage, debounce_ms: int = AUTOSAVE_DEBOUNCE_MS,
                 parent: QObject = None):
        super().__init__(parent)
        self._storage = storage
        self._pending: Optional[ProjectState] = None
        self._stopped = False

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(debounce_ms)
        self._timer.timeout.connect(self._on_timeout)

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    @property
    def debounce_ms(self) -> int:
        return self._timer.interval()

    def set_debounce_ms(self, ms: int) -> None:
        self._timer.setInterval(max(0, ms))

    def schedule(self, project: ProjectState) -> None:
        """Queue *project* for saving, superseding any value still pending."""
        if self._stopped:
            return
        self._pending = project.copy()
        self._timer.start()

    def flush(self) -> bool:
        """Write the pending project now. Returns False if nothing was written."""
        self._timer.stop()
        project, self._pending = self._pending, None
        if project is None:
            return False
        if self._storage.save(project):
            self.save_completed.emit()
            return True
        self.save_failed.emit()
        return False

    def shutdown(self) -> None:
        """Flush and refuse further scheduling."""
        self.flush()
        self._stopped = True
        logger.debug("Autosave stopped")

    @Slot()
    def _on_timeout(self) -> None:
        self.flush()
