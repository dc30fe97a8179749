"""AppContext: shared state and widget references for the controllers.

MainWindow builds one after setting up its widgets and injects it into every
controller; controllers reach everything through ``self.ctx``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from PySide6.QtWidgets import QMainWindow, QStatusBar

    from snapthumb.models.project import ProjectState
    from snapthumb.services.history import HistoryStore
    from snapthumb.services.settings_manager import SettingsManager
    from snapthumb.services.video_source import VideoSource
    from snapthumb.ui.overlay_drag import OverlayDragManager
    from snapthumb.ui.stage_widget import StageWidget


class AppContext:
    """Container shared by the controllers.

    All fields are set after MainWindow.__init__.
    """

    def __init__(self) -> None:
        # ---- Core state ----
        self.history: HistoryStore = None  # type: ignore[assignment]
        self.drag: OverlayDragManager = None  # type: ignore[assignment]
        self.window: QMainWindow = None  # type: ignore[assignment]

        # ---- Media ----
        self.video: VideoSource | None = None

        # ---- UI Widgets ----
        self.stage: StageWidget | None = None

        # ---- Services ----
        self.settings: SettingsManager | None = None
        self.clipboard: Any = None  # QClipboard; None = system clipboard

        # ---- Controller references (set by MainWindow) ----
        self.project_ctrl: Any = None
        self.overlay_ctrl: Any = None
        self.export_ctrl: Any = None

        # ---- MainWindow callbacks ----
        self.show_notice: Callable[[str, str], None] = lambda title, text: None

    @property
    def project(self) -> ProjectState:
        """Current history entry (read-only)."""
        return self.history.present

    def status_bar(self) -> QStatusBar:
        """Convenience accessor for the MainWindow status bar."""
        return self.window.statusBar()

    def show_status(self, message: str, timeout_ms: int = 3000) -> None:
        if self.window is not None:
            self.status_bar().showMessage(message, timeout_ms)
