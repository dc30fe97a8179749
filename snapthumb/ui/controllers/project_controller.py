"""ProjectController: sources, canvas settings and video scrubbing."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from snapthumb.models.export_preset import ExportPreset
from snapthumb.models.overlay import OverlayState
from snapthumb.models.project import Mode, ProjectState
from snapthumb.services import media_import
from snapthumb.services.frame_capture import capture_frame
from snapthumb.services.media_import import MediaKind
from snapthumb.utils.geometry import clamp

if TYPE_CHECKING:
    from snapthumb.ui.controllers.app_context import AppContext

# Video lifecycle updates coalesce into one entry and keep the redo stack.
VIDEO_MERGE_KEY = "video"


def place_new_overlay(draft: ProjectState, data_url: str) -> None:
    """Attach an overlay source sized to 40% of the export width, centered."""
    o = draft.overlay
    o.src = data_url
    o.w = round(draft.export_w * 0.4)
    o.h = round(o.w * 0.5)
    o.x = round((draft.export_w - o.w) / 2)
    o.y = round((draft.export_h - o.h) / 2)


class ProjectController:
    """Background/overlay/video ingestion and project-level settings."""

    def __init__(self, ctx: AppContext) -> None:
        self.ctx = ctx

    # ---- Sources ----

    def on_pick_background(self, path: Path | str) -> bool:
        imported = media_import.load_image(path)
        if imported is None:
            return False

        def _apply(d: ProjectState) -> None:
            d.base_image = imported.data_url
            d.base_name = imported.name

        self.ctx.history.mutate(_apply)
        self.ctx.show_status(f"Background loaded: {imported.name}")
        return True

    def on_pick_overlay(self, path: Path | str) -> bool:
        imported = media_import.load_image(path)
        if imported is None:
            return False
        self.ctx.history.mutate(lambda d: place_new_overlay(d, imported.data_url))
        self.ctx.show_status(f"Overlay loaded: {imported.name}")
        return True

    def on_pick_video(self, path: Path | str) -> bool:
        url = media_import.video_url(path)
        if url is None:
            return False
        name = Path(path).name

        def _apply(d: ProjectState) -> None:
            d.mode = Mode.VIDEO
            d.video_url = url
            d.video_name = name
            d.video_time = 0.0
            d.video_duration = 0.0
            d.video_ready = False

        self.ctx.history.mutate(_apply)
        if self.ctx.video is not None:
            self.ctx.video.set_source(url)
        self.ctx.show_status(f"Video loaded: {name}")
        return True

    def on_drop(self, path: Path | str) -> bool:
        """Video -> video source; first image -> background, next -> overlay."""
        kind = media_import.classify(path)
        if kind == MediaKind.VIDEO:
            return self.on_pick_video(path)
        if kind == MediaKind.IMAGE:
            if self.ctx.project.has_background:
                return self.on_pick_overlay(path)
            return self.on_pick_background(path)
        return False

    # ---- Canvas settings ----

    def set_mode(self, mode: Mode) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "mode", Mode(mode)))

    def set_export_width(self, width: int) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "export_w", int(width)))

    def set_export_height(self, height: int) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "export_h", int(height)))

    def apply_preset(self, preset: ExportPreset) -> None:
        """Resize the export and pull the overlay back into +-one canvas."""
        def _apply(d: ProjectState) -> None:
            d.export_w = preset.width
            d.export_h = preset.height
            d.overlay.x = clamp(d.overlay.x, -d.export_w, d.export_w)
            d.overlay.y = clamp(d.overlay.y, -d.export_h, d.export_h)

        self.ctx.history.mutate(_apply)

    def set_grid_on(self, on: bool) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "grid_on", bool(on)))

    def set_grid_size(self, size: int) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "grid_size", int(size)))

    def set_safe_zones_on(self, on: bool) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "safe_zones_on", bool(on)))

    def set_bg_color(self, color: str) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "bg_color", color))

    def set_transparent_bg(self, on: bool) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "transparent_bg", bool(on)))

    def set_jpeg_quality(self, quality: float) -> None:
        self.ctx.history.mutate(lambda d: setattr(d, "jpeg_quality", float(quality)))

    def on_new_project(self) -> None:
        """Clear media; keep background colour, guides and export size."""
        def _apply(d: ProjectState) -> None:
            fresh = ProjectState()
            d.mode = fresh.mode
            d.transparent_bg = fresh.transparent_bg
            d.jpeg_quality = fresh.jpeg_quality
            d.base_image = None
            d.base_name = None
            d.video_url = None
            d.video_name = None
            d.video_duration = 0.0
            d.video_time = 0.0
            d.video_ready = False
            d.overlay = OverlayState()

        self.ctx.history.mutate(_apply)
        if self.ctx.video is not None:
            self.ctx.video.set_source(None)

    # ---- Video ----

    def on_video_metadata(self, duration: float) -> None:
        def _apply(d: ProjectState) -> None:
            d.video_duration = duration or 0.0
            d.video_ready = True

        self.ctx.history.amend(_apply, VIDEO_MERGE_KEY)

    def on_video_time(self, seconds: float) -> None:
        self.ctx.history.amend(lambda d: setattr(d, "video_time", seconds or 0.0),
                               VIDEO_MERGE_KEY)

    def seek(self, seconds: float) -> None:
        video = self.ctx.video
        if video is None:
            return
        video.current_time = clamp(seconds, 0.0, max(0.0, self.ctx.project.video_duration))

    def toggle_playback(self) -> None:
        if self.ctx.video is not None:
            self.ctx.video.toggle_playback()

    def on_capture_frame(self) -> bool:
        """Rasterize the current video frame into the background."""
        video = self.ctx.video
        if video is None:
            return False
        result = capture_frame(self.ctx.project, video.current_frame())
        if result is None:
            return False
        data_url, name = result

        def _apply(d: ProjectState) -> None:
            d.base_image = data_url
            d.base_name = name

        self.ctx.history.mutate(_apply)
        self.ctx.show_status(f"Captured {name}")
        return True
