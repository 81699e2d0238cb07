"""
Scene Cadence
=============

Policies deciding when playback advances to the next scene.

Policies:
    - WallClockCadence: advance once the scene has been on screen for
      `scene_duration` seconds of real (monotonic) time. Default.
    - FrameCountCadence: advance every `frames_per_scene` presented
      frames, regardless of how long those frames took to draw.

Both are owned by a single playback loop and are not thread-safe.
"""

import logging
import time
from typing import Callable, Protocol


logger = logging.getLogger(__name__)


class CadencePolicy(Protocol):
    """Protocol for scene-advance policies."""

    def reset(self) -> None:
        """Start timing a new scene."""
        ...

    def tick(self) -> bool:
        """Record one presented frame; return True when the scene should advance."""
        ...


class FrameCountCadence:
    """
    Advance after a fixed number of presented frames.

    Attributes:
        frames_per_scene: Presentation iterations per scene
    """

    def __init__(self, frames_per_scene: int = 2) -> None:
        if frames_per_scene < 1:
            raise ValueError("frames_per_scene must be >= 1")
        self.frames_per_scene = frames_per_scene
        self._frame_counter = 0

    @property
    def frame_counter(self) -> int:
        return self._frame_counter

    def reset(self) -> None:
        self._frame_counter = 0

    def tick(self) -> bool:
        self._frame_counter += 1
        if self._frame_counter >= self.frames_per_scene:
            self._frame_counter = 0
            return True
        return False


class WallClockCadence:
    """
    Advance when elapsed real time reaches the target scene duration.

    When a frame overruns, the next scene's start is carried forward by
    exactly one duration so playback keeps the source rate on average;
    if the loop falls more than one duration behind, timing restarts from
    now instead of rushing through a burst of scenes.

    Attributes:
        scene_duration: Seconds each scene stays on screen
    """

    def __init__(
        self,
        scene_duration: float,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        if scene_duration <= 0:
            raise ValueError("scene_duration must be > 0")
        self.scene_duration = scene_duration
        self._clock = clock
        self._scene_started = clock()

    @classmethod
    def from_fps(
        cls,
        fps: float,
        clock: Callable[[], float] = time.perf_counter,
    ) -> "WallClockCadence":
        """Cadence matching a source frame rate."""
        if fps <= 0:
            raise ValueError("fps must be > 0")
        return cls(scene_duration=1.0 / fps, clock=clock)

    def reset(self) -> None:
        self._scene_started = self._clock()

    def tick(self) -> bool:
        now = self._clock()
        elapsed = now - self._scene_started
        if elapsed < self.scene_duration:
            return False

        if elapsed < 2 * self.scene_duration:
            self._scene_started += self.scene_duration
        else:
            self._scene_started = now
        return True
