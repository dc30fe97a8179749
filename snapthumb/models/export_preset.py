"""Export size presets (pure Python, no Qt dependency)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExportPreset:
    """A named export resolution."""

    name: str
    width: int
    height: int

    @property
    def resolution_label(self) -> str:
        return f"{self.width}x{self.height}"

    @property
    def display_label(self) -> str:
        return f"{self.width}×{self.height} ({self.name})"


DEFAULT_PRESETS: list[ExportPreset] = [
    ExportPreset("HD", 1280, 720),
    ExportPreset("FHD", 1920, 1080),
    ExportPreset("4K", 3840, 2160),
]


def find_preset(width: int, height: int) -> ExportPreset | None:
    """Return the preset matching the given size, or None for a custom size."""
    for preset in DEFAULT_PRESETS:
        if preset.width == width and preset.height == height:
            return preset
    return None
