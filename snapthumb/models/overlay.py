"""Overlay layer data model (pure Python, no Qt dependency)."""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace

from snapthumb.utils.config import MIN_OVERLAY_SIZE, ROTATION_LIMIT, SHADOW_MAX
from snapthumb.utils.geometry import clamp


@dataclass(slots=True)
class OverlayState:
    """The single raster overlay, in export-pixel space (pre-rotation)."""

    src: str | None = None  # data URL; None = no overlay rendered
    x: float = 200.0
    y: float = 200.0
    w: float = 500.0
    h: float = 200.0
    rotation: float = 0.0  # degrees, clamped to [-360, 360], never wrapped
    opacity: float = 1.0
    shadow: float = 12.0  # blur radius 0-60
    keep_aspect: bool = True
    snap: bool = True

    @property
    def has_source(self) -> bool:
        return bool(self.src)

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.w / 2, self.y + self.h / 2

    @property
    def aspect(self) -> float:
        """Width/height ratio; 1.0 for a degenerate height."""
        return (self.w / self.h) if self.h else 1.0

    def copy(self) -> OverlayState:
        return replace(self)

    def normalized(self) -> OverlayState:
        """Return a copy with every bounded field saturated into range."""
        return replace(
            self,
            w=max(MIN_OVERLAY_SIZE, self.w),
            h=max(MIN_OVERLAY_SIZE, self.h),
            rotation=clamp(self.rotation, -ROTATION_LIMIT, ROTATION_LIMIT),
            opacity=clamp(self.opacity, 0.0, 1.0),
            shadow=clamp(self.shadow, 0.0, SHADOW_MAX),
        )

    def to_dict(self) -> dict:
        return {
            "src": self.src,
            "x": self.x,
            "y": self.y,
            "w": self.w,
            "h": self.h,
            "rotation": self.rotation,
            "opacity": self.opacity,
            "shadow": self.shadow,
            "keep_aspect": self.keep_aspect,
            "snap": self.snap,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> OverlayState:
        """Merge *data* over the defaults; unknown or mistyped keys are ignored."""
        base = cls()
        if not isinstance(data, dict):
            return base
        values = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            coerced = coerce_json_value(data[f.name], getattr(base, f.name))
            if coerced is not SKIP:
                values[f.name] = coerced
        return replace(base, **values).normalized()


SKIP = object()


def coerce_json_value(value, default):
    """Coerce a stored JSON value to the type of *default*, or return ``SKIP``."""
    if default is None or isinstance(default, str):
        return value if value is None or isinstance(value, str) else SKIP
    if isinstance(default, bool):
        return value if isinstance(value, bool) else SKIP
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return SKIP
    try:
        if not math.isfinite(value):
            return SKIP
        return type(default)(value)
    except OverflowError:
        return SKIP
