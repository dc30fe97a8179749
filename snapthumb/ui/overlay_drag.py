"""OverlayDragManager: turns pointer drags on the stage into overlay geometry.

One gesture at a time: ``start`` snapshots the overlay and the pointer,
``on_move`` recomputes geometry from that snapshot and commits it as a
coalesced in-flight update, ``on_release`` closes it as a single undo step.
The geometry math lives in plain functions so it can be tested without a
stage.
"""

from __future__ import annotations

import itertools
import logging
import math
from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import TYPE_CHECKING

from snapthumb.models.overlay import OverlayState
from snapthumb.utils.config import MIN_OVERLAY_SIZE, ROTATION_LIMIT, ROTATION_SNAP_DEG
from snapthumb.utils.geometry import bearing, clamp, snap_to

if TYPE_CHECKING:
    from snapthumb.services.history import HistoryStore

logger = logging.getLogger(__name__)


class DragMode(Enum):
    """Gesture kind, chosen by what was under the pointer at press time."""
    NONE = auto()
    MOVE = auto()
    RESIZE_NW = auto()
    RESIZE_NE = auto()
    RESIZE_SW = auto()
    RESIZE_SE = auto()
    ROTATE = auto()


RESIZE_MODES = frozenset({DragMode.RESIZE_NW, DragMode.RESIZE_NE, DragMode.RESIZE_SW, DragMode.RESIZE_SE})


# ---------------------------------------------------------------- geometry


def apply_move(start: OverlayState, dx: float, dy: float, grid: float) -> tuple[float, float]:
    """New top-left for a body drag of (dx, dy) export pixels."""
    x = start.x + dx
    y = start.y + dy
    if start.snap:
        x = snap_to(x, grid)
        y = snap_to(y, grid)
    return x, y


def apply_resize(start: OverlayState, mode: DragMode, dx: float, dy: float,
                 grid: float) -> tuple[float, float, float, float]:
    """New ``(x, y, w, h)`` for a corner drag; the opposite corner stays put.

    With ``keep_aspect`` the height follows the width through the snapshot's
    aspect ratio and vertical pointer motion is ignored.
    """
    x, y, w, h = start.x, start.y, start.w, start.h
    aspect = start.aspect or 1.0

    if mode in (DragMode.RESIZE_SE, DragMode.RESIZE_NE):
        w = start.w + dx
    else:
        w = start.w - dx

    if start.keep_aspect:
        h = w / aspect
    elif mode in (DragMode.RESIZE_SE, DragMode.RESIZE_SW):
        h = start.h + dy
    else:
        h = start.h - dy

    if mode in (DragMode.RESIZE_NW, DragMode.RESIZE_SW):
        x = start.x + (start.w - w)
    if mode in (DragMode.RESIZE_NW, DragMode.RESIZE_NE):
        y = start.y + (start.h - h)

    w = max(MIN_OVERLAY_SIZE, w)
    h = max(MIN_OVERLAY_SIZE, h)
    if start.snap:
        x = snap_to(x, grid)
        y = snap_to(y, grid)
        w = max(MIN_OVERLAY_SIZE, snap_to(w, grid))
        h = max(MIN_OVERLAY_SIZE, snap_to(h, grid))
    return x, y, w, h


def apply_rotate(base_rotation: float, start_bearing: float, now_bearing: float,
                 snap: bool) -> float:
    """Rotation in degrees; snapping to 15 deg happens before the clamp."""
    deg = base_rotation + math.degrees(now_bearing - start_bearing)
    if snap:
        deg = snap_to(deg, ROTATION_SNAP_DEG)
    return clamp(deg, -ROTATION_LIMIT, ROTATION_LIMIT)


# ---------------------------------------------------------------- session


@dataclass(frozen=True, slots=True)
class DragSession:
    """Everything a gesture needs, frozen at pointer-down."""

    mode: DragMode
    start_x: float          # pointer, screen pixels
    start_y: float
    start: OverlayState     # overlay snapshot
    scale: float            # screen pixels per export pixel
    grid: float
    center_x: float         # overlay center, screen pixels
    center_y: float
    start_bearing: float
    merge_key: tuple

    def geometry_at(self, x: float, y: float) -> OverlayState:
        """Overlay for the pointer at (x, y), derived from the snapshot only."""
        s = self.start
        dx = (x - self.start_x) / self.scale
        dy = (y - self.start_y) / self.scale
        if self.mode == DragMode.MOVE:
            nx, ny = apply_move(s, dx, dy, self.grid)
            return replace(s, x=nx, y=ny)
        if self.mode in RESIZE_MODES:
            nx, ny, nw, nh = apply_resize(s, self.mode, dx, dy, self.grid)
            return replace(s, x=nx, y=ny, w=nw, h=nh)
        rotation = apply_rotate(s.rotation, self.start_bearing,
                                bearing(x, y, self.center_x, self.center_y), s.snap)
        return replace(s, rotation=rotation)


class OverlayDragManager:
    """Owns the active :class:`DragSession` and routes results through history."""

    def __init__(self, history: HistoryStore) -> None:
        self._history = history
        self._session: DragSession | None = None
        self._moved = False
        self._ids = itertools.count(1)

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def mode(self) -> DragMode:
        return self._session.mode if self._session else DragMode.NONE

    @property
    def session(self) -> DragSession | None:
        return self._session

    def start(self, mode: DragMode, x: float, y: float, scale: float,
              origin: tuple[float, float] = (0.0, 0.0)) -> bool:
        """Begin a gesture at screen point (x, y).

        *origin* is the stage's top-left in the same screen coordinates.
        Returns False (and changes nothing) for an unrecognized target, a
        missing overlay, or while another gesture is active.
        """
        if self._session is not None:
            logger.debug(f"Ignoring {mode.name} press during active {self._session.mode.name} drag")
            return False
        if mode == DragMode.NONE or scale <= 0:
            return False
        project = self._history.present
        overlay = project.overlay
        if not overlay.has_source:
            return False

        snapshot = overlay.copy()
        cx = origin[0] + (snapshot.x + snapshot.w / 2) * scale
        cy = origin[1] + (snapshot.y + snapshot.h / 2) * scale
        self._session = DragSession(
            mode=mode,
            start_x=x,
            start_y=y,
            start=snapshot,
            scale=scale,
            grid=project.grid_size if snapshot.snap else 0,
            center_x=cx,
            center_y=cy,
            start_bearing=bearing(x, y, cx, cy),
            merge_key=("drag", next(self._ids)),
        )
        self._moved = False
        return True

    def on_move(self, x: float, y: float) -> bool:
        """Apply the pointer position; returns True if a gesture consumed it."""
        session = self._session
        if session is None:
            return False
        geometry = session.geometry_at(x, y)

        def _apply(draft):
            draft.overlay = replace(
                draft.overlay,
                x=geometry.x, y=geometry.y, w=geometry.w, h=geometry.h,
                rotation=geometry.rotation,
            )

        self._history.mutate(_apply, clear_future=False, merge_key=session.merge_key)
        self._moved = True
        return True

    def on_release(self) -> bool:
        """Finish the gesture as one undo step. Safe without a prior move."""
        session, self._session = self._session, None
        if session is None:
            return False
        # Close the run only if it is still the one in flight.
        if self._moved and self._history.merge_key == session.merge_key:
            self._history.commit(self._history.present, clear_future=True,
                                 merge_key=session.merge_key)
        self._moved = False
        return True

    def cancel(self) -> bool:
        """Abort the gesture and restore the overlay as it was at pointer-down."""
        session, self._session = self._session, None
        if session is None:
            return False
        if self._moved and not self._history.rollback(session.merge_key):
            # Another run interleaved; put the snapshot geometry back instead.
            start = session.start
            self._history.mutate(
                lambda d: setattr(d, "overlay", replace(
                    d.overlay, x=start.x, y=start.y, w=start.w, h=start.h,
                    rotation=start.rotation)),
            )
        self._moved = False
        return True
