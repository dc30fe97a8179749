"""Time conversion utilities for the video scrubber."""

from functools import lru_cache


@lru_cache(maxsize=4096)
def seconds_to_badge(seconds: float) -> str:
    """Convert seconds to the scrubber badge string 'MM:SS'."""
    if seconds < 0 or seconds != seconds:
        seconds = 0.0
    minutes = int(seconds // 60)
    secs = int(seconds % 60)
    return f"{minutes:02d}:{secs:02d}"


def seconds_to_ms(seconds: float) -> int:
    """Convert seconds (float) to integer milliseconds."""
    return int(round(seconds * 1000))


def ms_to_seconds(ms: int) -> float:
    """Convert integer milliseconds to seconds."""
    return ms / 1000.0
