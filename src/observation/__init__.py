"""
Observation layer for seekable video sources.

Sources are addressed by media position and return FrameData objects; the
PlaybackClock supplies the current position of the looping test video.
"""

from .base import ObservationSource, ObservationConfig
from .playback import PlaybackClock
from .video_source import VideoFileSource, VideoFileSourceConfig

__all__ = [
    "ObservationSource",
    "ObservationConfig",
    "PlaybackClock",
    "VideoFileSource",
    "VideoFileSourceConfig",
]
