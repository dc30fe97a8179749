"""Application configuration constants."""

from __future__ import annotations

APP_NAME = "Snapthumb"
APP_VERSION = "0.3.0"
ORG_NAME = "Snapthumb"

# Persisted project record (QSettings key)
LOCAL_KEY = "snapthumb.project.v3"
AUTOSAVE_DEBOUNCE_MS = 500

# History
MAX_HISTORY = 40

# Export size bounds (pixels)
EXPORT_MIN_W = 320
EXPORT_MAX_W = 7680
EXPORT_MIN_H = 240
EXPORT_MAX_H = 4320
DEFAULT_EXPORT_W = 1920
DEFAULT_EXPORT_H = 1080

# Grid
GRID_MIN = 5
GRID_MAX = 200
DEFAULT_GRID_SIZE = 20

# Overlay limits
MIN_OVERLAY_SIZE = 20
ROTATION_LIMIT = 360.0
ROTATION_SNAP_DEG = 15.0
SHADOW_MAX = 60.0
SHADOW_COLOR = (0, 0, 0, 204)  # rgba(0,0,0,0.8)

# JPEG
DEFAULT_JPEG_QUALITY = 0.92
JPEG_QUALITY_MIN = 0.01

# Keyboard nudges
NUDGE_STEP = 1
NUDGE_STEP_LARGE = 10
ROTATE_STEP = 1.0
ROTATE_STEP_LARGE = 15.0

# Preview stage
STAGE_MAX_W = 1200
STAGE_MARGIN = 40
SAFE_ZONE_INSET = 0.05
HANDLE_RADIUS_PX = 8
ROTATE_HANDLE_OFFSET_PX = 24

# Default download name when no background is loaded
DEFAULT_EXPORT_BASENAME = "snapthumb"

# Supported image formats
IMAGE_EXTENSIONS = [".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"]
IMAGE_FILTER = "Image Files ({});;All Files (*)".format(
    " ".join(f"*{ext}" for ext in IMAGE_EXTENSIONS)
)

# Supported video formats
VIDEO_EXTENSIONS = [".mp4", ".mkv", ".avi", ".mov", ".webm"]
VIDEO_FILTER = "Video Files ({});;All Files (*)".format(
    " ".join(f"*{ext}" for ext in VIDEO_EXTENSIONS)
)

# Export save-dialog filters
PNG_FILTER = "PNG Images (*.png);;All Files (*)"
JPEG_FILTER = "JPEG Images (*.jpg *.jpeg);;All Files (*)"
