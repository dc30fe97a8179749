"""Project state model."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from enum import Enum

from snapthumb.models.overlay import SKIP, OverlayState, coerce_json_value
from snapthumb.utils.config import (
    DEFAULT_EXPORT_H,
    DEFAULT_EXPORT_W,
    DEFAULT_GRID_SIZE,
    DEFAULT_JPEG_QUALITY,
    EXPORT_MAX_H,
    EXPORT_MAX_W,
    EXPORT_MIN_H,
    EXPORT_MIN_W,
    GRID_MAX,
    GRID_MIN,
    JPEG_QUALITY_MIN,
)
from snapthumb.utils.geometry import clamp


class Mode(str, Enum):
    SCREENSHOT = "screenshot"
    VIDEO = "video"


# Live handles that must never reach durable storage.
TRANSIENT_FIELDS = ("video_url", "video_ready")


@dataclass(slots=True)
class ProjectState:
    """The full editable state of one composition.

    A plain value: every history entry is an independent copy of this class.
    """

    mode: Mode = Mode.SCREENSHOT
    export_w: int = DEFAULT_EXPORT_W
    export_h: int = DEFAULT_EXPORT_H
    grid_on: bool = True
    grid_size: int = DEFAULT_GRID_SIZE
    safe_zones_on: bool = True
    bg_color: str = "#000000"
    transparent_bg: bool = False  # copy/export only, the preview always fills
    jpeg_quality: float = DEFAULT_JPEG_QUALITY

    base_image: str | None = None  # data URL
    base_name: str | None = None

    video_url: str | None = None  # transient
    video_name: str | None = None
    video_duration: float = 0.0
    video_time: float = 0.0
    video_ready: bool = False  # transient

    overlay: OverlayState = field(default_factory=OverlayState)

    @property
    def has_background(self) -> bool:
        return bool(self.base_image)

    @property
    def has_video(self) -> bool:
        return self.video_url is not None

    @property
    def can_capture(self) -> bool:
        return self.mode == Mode.VIDEO and self.video_ready

    def copy(self) -> ProjectState:
        """Deep copy; the only nested mutable value is the overlay."""
        return replace(self, overlay=self.overlay.copy())

    def normalized(self) -> ProjectState:
        """Return a copy with every bounded field saturated into range."""
        return replace(
            self,
            export_w=int(clamp(int(self.export_w), EXPORT_MIN_W, EXPORT_MAX_W)),
            export_h=int(clamp(int(self.export_h), EXPORT_MIN_H, EXPORT_MAX_H)),
            grid_size=int(clamp(int(self.grid_size), GRID_MIN, GRID_MAX)),
            jpeg_quality=clamp(self.jpeg_quality, JPEG_QUALITY_MIN, 1.0),
            video_duration=max(0.0, self.video_duration),
            video_time=clamp(self.video_time, 0.0, max(0.0, self.video_duration)),
            overlay=self.overlay.normalized(),
        )

    def to_dict(self, persist: bool = True) -> dict:
        """JSON-compatible record. *persist* blanks the live video handle."""
        d = {
            "mode": self.mode.value,
            "export_w": self.export_w,
            "export_h": self.export_h,
            "grid_on": self.grid_on,
            "grid_size": self.grid_size,
            "safe_zones_on": self.safe_zones_on,
            "bg_color": self.bg_color,
            "transparent_bg": self.transparent_bg,
            "jpeg_quality": self.jpeg_quality,
            "base_image": self.base_image,
            "base_name": self.base_name,
            "video_url": self.video_url,
            "video_name": self.video_name,
            "video_duration": self.video_duration,
            "video_time": self.video_time,
            "video_ready": self.video_ready,
            "overlay": self.overlay.to_dict(),
        }
        if persist:
            d["video_url"] = None
            d["video_ready"] = False
        return d

    @classmethod
    def from_dict(cls, data: dict | None) -> ProjectState:
        """Merge a stored record over the defaults, field by field.

        Missing or mistyped fields keep their defaults so that records written
        by older versions still load. The live video handle is always reset.
        """
        base = cls()
        if not isinstance(data, dict):
            return base
        values = {}
        for f in fields(cls):
            if f.name in TRANSIENT_FIELDS or f.name in ("mode", "overlay") or f.name not in data:
                continue
            coerced = coerce_json_value(data[f.name], getattr(base, f.name))
            if coerced is not SKIP:
                values[f.name] = coerced
        try:
            values["mode"] = Mode(data.get("mode", base.mode.value))
        except ValueError:
            pass
        values["overlay"] = OverlayState.from_dict(data.get("overlay"))
        return replace(base, **values).normalized()
