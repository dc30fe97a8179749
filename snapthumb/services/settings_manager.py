"""Settings manager for application preferences."""

from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from snapthumb.utils.config import AUTOSAVE_DEBOUNCE_MS


class SettingsManager:
    """Wrapper around QSettings for type-safe preference management."""

    def __init__(self, settings: Optional[QSettings] = None):
        self._settings = settings if settings is not None else QSettings()

    @property
    def qsettings(self) -> QSettings:
        return self._settings

    # ---------------------------------------------------- Autosave

    def get_autosave_debounce_ms(self) -> int:
        """Get the delay between the last edit and the project write (default: 500)."""
        return self._settings.value("autosave/debounce_ms", AUTOSAVE_DEBOUNCE_MS, int)

    def set_autosave_debounce_ms(self, ms: int) -> None:
        self._settings.setValue("autosave/debounce_ms", ms)

    # ---------------------------------------------------- Export

    def get_last_export_dir(self) -> Optional[Path]:
        """Get the directory of the last export (None if unset or gone)."""
        path = self._settings.value("export/last_dir", "", str)
        if path and Path(path).is_dir():
            return Path(path)
        return None

    def set_last_export_dir(self, directory: Path) -> None:
        self._settings.setValue("export/last_dir", str(directory))

    # ---------------------------------------------------- Window

    def get_window_geometry(self) -> Optional[bytes]:
        value = self._settings.value("window/geometry")
        return bytes(value) if value else None

    def set_window_geometry(self, geometry: bytes) -> None:
        self._settings.setValue("window/geometry", geometry)
