"""
ObservationSource interface for seekable video sources.

Frames are addressed by media position in milliseconds, so a sampler can ask
for "whatever is on screen now" instead of consuming frames sequentially.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from models.frame import FrameData


@dataclass
class ObservationConfig:
    """
    Base configuration for observation sources.

    Attributes:
        source_id: Identifier for this source (e.g., "test-video").
        metadata: Additional source-specific configuration.
    """
    source_id: str = "default"
    metadata: Dict[str, Any] = field(default_factory=dict)


class ObservationSource(ABC):
    """
    Abstract base class for seekable frame sources.

    Lifecycle:
        1. Create instance with config
        2. Call open() to initialize the source
        3. Call read_at(position_ms) whenever a frame is needed
        4. Call close() to release resources

    Can also be used as a context manager:
        with VideoFileSource(config) as source:
            frame_data = source.read_at(1500)
    """

    def __init__(self, config: ObservationConfig):
        self._config = config
        self._is_open = False
        self._frame_index = 0

    @property
    def source_id(self) -> str:
        return self._config.source_id

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def frame_index(self) -> int:
        """Number of frames successfully read since open."""
        return self._frame_index

    @property
    @abstractmethod
    def duration_ms(self) -> float:
        """Total media duration in milliseconds (0 if unknown)."""

    @abstractmethod
    def open(self) -> None:
        """
        Open/initialize the source.

        Raises:
            RuntimeError: If the source cannot be opened.
        """

    @abstractmethod
    def read_at(self, position_ms: float) -> Optional[FrameData]:
        """
        Decode the frame at the given media position.

        Returns:
            FrameData, or None if no frame could be decoded there.
        """

    @abstractmethod
    def close(self) -> None:
        """Release resources. Safe to call multiple times."""

    def __enter__(self) -> "ObservationSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
