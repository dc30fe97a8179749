"""ExportController: PNG/JPEG export and clipboard copy of the composite."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from PySide6.QtWidgets import QFileDialog

from snapthumb.services import clipboard_service, compositor
from snapthumb.services.clipboard_service import CopyResult
from snapthumb.services.compositor import ExportArtifact
from snapthumb.utils.config import JPEG_FILTER, PNG_FILTER

if TYPE_CHECKING:
    from snapthumb.ui.controllers.app_context import AppContext

logger = logging.getLogger(__name__)


class ExportController:
    """Rasterizes the present project at export resolution."""

    def __init__(self, ctx: AppContext) -> None:
        self.ctx = ctx

    def _export_dir(self) -> Path:
        settings = self.ctx.settings
        directory = settings.get_last_export_dir() if settings is not None else None
        return directory or Path.home()

    def _ask_path(self, title: str, filename: str, file_filter: str) -> Path | None:
        suggested = self._export_dir() / filename
        path, _ = QFileDialog.getSaveFileName(self.ctx.window, title, str(suggested), file_filter)
        if not path:
            return None
        return Path(path)

    def _write(self, artifact: ExportArtifact, path: Path | None, title: str,
               file_filter: str) -> Path | None:
        if path is None:
            path = self._ask_path(title, artifact.filename, file_filter)
            if path is None:
                return None
        try:
            path = artifact.save(path)
        except OSError as e:
            logger.exception(f"Export failed: {e}")
            self.ctx.show_notice("Export failed", str(e))
            return None
        if self.ctx.settings is not None:
            self.ctx.settings.set_last_export_dir(path.parent)
        self.ctx.show_status(f"Exported {path.name}")
        return path

    def export_png(self, path: Path | None = None) -> Path | None:
        """Export a PNG to *path*, or to the file chosen in a save dialog."""
        return self._write(compositor.export_png(self.ctx.project), path, "Export PNG", PNG_FILTER)

    def export_jpeg(self, path: Path | None = None) -> Path | None:
        return self._write(compositor.export_jpeg(self.ctx.project), path, "Export JPEG", JPEG_FILTER)

    def copy_to_clipboard(self) -> CopyResult:
        image = compositor.render_clipboard_image(self.ctx.project)
        result = clipboard_service.copy_image(image, self.ctx.clipboard)
        if result == CopyResult.IMAGE:
            self.ctx.show_status("Copied PNG to clipboard")
        elif result == CopyResult.TEXT_FALLBACK:
            self.ctx.show_status("Copied PNG data URL (fallback)")
        else:
            self.ctx.show_notice("Clipboard", "Clipboard copy failed.")
        return result
