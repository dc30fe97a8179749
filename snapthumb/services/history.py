"""Linear undo/redo history over the whole project state.

Every mutation of the project goes through :class:`HistoryStore`. Entries are
independent copies of :class:`ProjectState`, so editing a draft can never
reach into an entry already on the past/future stacks.

Coalescing follows the ``QUndoCommand.id()``/``mergeWith()`` idea: commits
sharing a non-None ``merge_key`` with the run in flight replace the present
entry instead of pushing a new one, and a commit with ``clear_future=True``
closes the run. A drag is N ``commit(next, False, key)`` calls followed by one
``commit(final, True, key)`` and always adds exactly one undo step.
"""

from __future__ import annotations

import logging
from typing import Callable, Hashable, Optional

from PySide6.QtCore import QObject, Signal

from snapthumb.models.project import ProjectState
from snapthumb.services.autosave import AutoSaveManager
from snapthumb.utils.config import MAX_HISTORY

logger = logging.getLogger(__name__)


class HistoryStore(QObject):
    """past / present / future stacks with debounced persistence of present."""

    state_changed = Signal(object)        # new present (ProjectState)
    history_changed = Signal(bool, bool)  # can_undo, can_redo

    def __init__(self, initial: ProjectState | None = None,
                 autosave: Optional[AutoSaveManager] = None,
                 max_entries: int = MAX_HISTORY, parent: QObject = None):
        super().__init__(parent)
        self._max = max_entries
        self._past: list[ProjectState] = []
        self._present: ProjectState = (initial or ProjectState()).normalized()
        self._future: list[ProjectState] = []  # nearest-to-present first
        self._merge_key: Hashable | None = None
        self._autosave = autosave

    # ------------------------------------------------------------------ Queries

    @property
    def present(self) -> ProjectState:
        """The current entry. Treat as read-only; edit through :meth:`mutate`."""
        return self._present

    @property
    def past(self) -> tuple[ProjectState, ...]:
        return tuple(self._past)

    @property
    def future(self) -> tuple[ProjectState, ...]:
        return tuple(self._future)

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def merge_key(self) -> Hashable | None:
        """Key of the coalescing run in flight, or None."""
        return self._merge_key

    # ------------------------------------------------------------------ Mutation

    def commit(self, state: ProjectState, clear_future: bool = True,
               merge_key: Hashable | None = None) -> None:
        """Make *state* the present entry.

        Pushes the previous present onto ``past`` (evicting the oldest entry
        beyond the cap) unless *merge_key* continues the run in flight.
        """
        entry = state.normalized()
        if merge_key is not None and merge_key == self._merge_key:
            self._present = entry
        else:
            self._past.append(self._present)
            if len(self._past) > self._max:
                del self._past[: len(self._past) - self._max]
            self._present = entry
            self._merge_key = merge_key
        if clear_future:
            self._future.clear()
            self._merge_key = None
        self._notify()

    def mutate(self, fn: Callable[[ProjectState], None], clear_future: bool = True,
               merge_key: Hashable | None = None) -> ProjectState:
        """Apply *fn* to a draft copy of present and commit the draft."""
        draft = self._present.copy()
        fn(draft)
        self.commit(draft, clear_future, merge_key)
        return self._present

    def amend(self, fn: Callable[[ProjectState], None], merge_key: Hashable) -> ProjectState:
        """Apply *fn* to present for a background update such as video playback.

        While a run with another key is in flight (a drag), present is replaced
        in place: the stacks and the run are left alone, so the gesture still
        closes as one undo step. Otherwise this is
        ``mutate(fn, clear_future=False, merge_key=merge_key)``.
        """
        if self._merge_key is None or self._merge_key == merge_key:
            return self.mutate(fn, clear_future=False, merge_key=merge_key)
        draft = self._present.copy()
        fn(draft)
        self._present = draft.normalized()
        self._notify()
        return self._present

    def undo(self) -> bool:
        if not self._past:
            return False
        self._future.insert(0, self._present)
        self._present = self._past.pop()
        self._merge_key = None
        self._notify()
        return True

    def redo(self) -> bool:
        if not self._future:
            return False
        self._past.append(self._present)
        if len(self._past) > self._max:
            del self._past[: len(self._past) - self._max]
        self._present = self._future.pop(0)
        self._merge_key = None
        self._notify()
        return True

    def rollback(self, merge_key: Hashable) -> bool:
        """Discard the coalescing run *merge_key*, restoring the entry before it.

        Used by drag cancellation; the stacks end up as they were before the run.
        """
        if merge_key is None or merge_key != self._merge_key or not self._past:
            return False
        self._present = self._past.pop()
        self._merge_key = None
        self._notify()
        return True

    def reset(self, state: ProjectState) -> None:
        """Start a new session at *state* with empty stacks."""
        self._past.clear()
        self._future.clear()
        self._present = state.normalized()
        self._merge_key = None
        self._notify()

    # ------------------------------------------------------------------ Persistence

    def flush(self) -> None:
        """Write any pending autosave immediately."""
        if self._autosave is not None:
            self._autosave.flush()

    def shutdown(self) -> None:
        """Flush pending persistence and stop scheduling further writes."""
        if self._autosave is not None:
            self._autosave.shutdown()

    def _notify(self) -> None:
        if self._autosave is not None:
            self._autosave.schedule(self._present)
        self.state_changed.emit(self._present)
        self.history_changed.emit(self.can_undo, self.can_redo)
