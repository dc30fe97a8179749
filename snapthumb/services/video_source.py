"""Playable video handle backed by QMediaPlayer + QVideoSink."""

from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QUrl, Signal, Slot
from PySide6.QtGui import QImage
from PySide6.QtMultimedia import QMediaPlayer, QVideoFrame, QVideoSink

from snapthumb.utils.geometry import clamp
from snapthumb.utils.time_utils import ms_to_seconds, seconds_to_ms

logger = logging.getLogger(__name__)


class VideoSource(QObject):
    """Exposes duration, a settable current time, frame size and the latest frame.

    ``metadata_ready`` fires once the media is loaded, ``time_updated`` on
    every position change (both in seconds).
    """

    metadata_ready = Signal(float)
    time_updated = Signal(float)
    frame_changed = Signal()

    def __init__(self, parent: QObject = None):
        super().__init__(parent)
        self._player = QMediaPlayer(self)
        self._sink = QVideoSink(self)
        self._player.setVideoSink(self._sink)
        self._last_frame: QVideoFrame | None = None
        self._url: str | None = None

        self._player.mediaStatusChanged.connect(self._on_media_status)
        self._player.positionChanged.connect(self._on_position)
        self._sink.videoFrameChanged.connect(self._on_frame)

    # ------------------------------------------------------------------ Source

    @property
    def url(self) -> str | None:
        return self._url

    def set_source(self, url: str | None) -> None:
        if url == self._url:
            return
        self._url = url
        self._last_frame = None
        self._player.stop()
        self._player.setSource(QUrl(url) if url else QUrl())
        if url:
            # Decode the first frame without starting playback.
            self._player.pause()

    # ------------------------------------------------------------------ Properties

    @property
    def duration(self) -> float:
        return ms_to_seconds(max(0, self._player.duration()))

    @property
    def current_time(self) -> float:
        return ms_to_seconds(self._player.position())

    @current_time.setter
    def current_time(self, seconds: float) -> None:
        seconds = clamp(seconds, 0.0, self.duration)
        self._player.setPosition(seconds_to_ms(seconds))

    @property
    def video_width(self) -> int:
        return self._sink.videoSize().width()

    @property
    def video_height(self) -> int:
        return self._sink.videoSize().height()

    @property
    def is_playing(self) -> bool:
        return self._player.playbackState() == QMediaPlayer.PlaybackState.PlayingState

    def toggle_playback(self) -> None:
        if not self._url:
            return
        if self.is_playing:
            self._player.pause()
        else:
            self._player.play()

    def current_frame(self) -> QImage | None:
        """The most recently decoded frame as an image, or None."""
        if self._last_frame is None or not self._last_frame.isValid():
            return None
        image = self._last_frame.toImage()
        return None if image.isNull() else image

    # ------------------------------------------------------------------ Slots

    @Slot(QMediaPlayer.MediaStatus)
    def _on_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status == QMediaPlayer.MediaStatus.LoadedMedia:
            logger.info(f"Video loaded: {self._url}, duration={self.duration:.2f}s")
            self.metadata_ready.emit(self.duration)
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            logger.warning(f"Invalid video media: {self._url}")

    @Slot(int)
    def _on_position(self, position_ms: int) -> None:
        self.time_updated.emit(ms_to_seconds(position_ms))

    @Slot(QVideoFrame)
    def _on_frame(self, frame: QVideoFrame) -> None:
        self._last_frame = frame
        self.frame_changed.emit()
