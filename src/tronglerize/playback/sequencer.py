"""
Playback Sequencer
==================

Deterministic playback state machine.

States:
    LOADING   -> reading and decoding artifacts
    READY     -> sequence loaded, surface not yet opened
    ADVANCING -> steady presentation loop
    STOPPED   -> terminal (surface closed, or nothing to play)

Transitions:
    LOADING -> READY      at least one artifact decoded
    LOADING -> STOPPED    any loading error (the surface is never opened)
    READY -> ADVANCING    run() opens the surface
    ADVANCING -> STOPPED  renderer requests shutdown / iteration cap hit

Loop (one iteration = one presented frame):
    1. If the scene changed, upload its vertex buffer
    2. Clear, then set color + draw for every triangle
    3. Swap buffers, poll events
    4. Ask the cadence policy whether to advance:
       current_index = (current_index + 1) % len(sequence)

current_index and the cadence state are owned by this loop only; the
sequence itself is read-only.
"""

import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from tronglerize.errors import EmptySequence
from tronglerize.playback.cadence import CadencePolicy
from tronglerize.playback.renderer import Renderer
from tronglerize.playback.sequence import PlaybackSequence, load_sequence


logger = logging.getLogger(__name__)


class PlaybackState(str, Enum):
    """Playback lifecycle states."""

    LOADING = "LOADING"
    READY = "READY"
    ADVANCING = "ADVANCING"
    STOPPED = "STOPPED"


class PlaybackSequencer:
    """
    Drives a Renderer through a PlaybackSequence.

    Attributes:
        renderer: Presentation surface
        cadence: Scene-advance policy
        state: Current PlaybackState
        current_index: Index of the scene on screen
        frames_presented: Loop iterations completed by the last run
        scene_changes: Vertex uploads performed by the last run

    Example:
        sequencer = PlaybackSequencer(
            renderer=OpenCVRenderer(1920, 1080),
            cadence=WallClockCadence.from_fps(24),
        )
        sequencer.play("out/")
    """

    def __init__(
        self,
        renderer: Renderer,
        cadence: CadencePolicy,
        title: str = "tronglerize",
        artifact_suffix: str = ".bin",
    ) -> None:
        self.renderer = renderer
        self.cadence = cadence
        self.title = title
        self.artifact_suffix = artifact_suffix

        self.state: Optional[PlaybackState] = None
        self.current_index: int = 0
        self.frames_presented: int = 0
        self.scene_changes: int = 0

    def load(self, directory: Union[str, Path]) -> PlaybackSequence:
        """
        Load the artifact directory.

        Raises:
            EmptySequence: No artifact decoded
            NotADirectoryError: Directory does not exist

        Any loading error leaves the sequencer STOPPED.
        """
        self._transition(PlaybackState.LOADING)
        try:
            sequence = load_sequence(directory, suffix=self.artifact_suffix)
        except Exception:
            self._transition(PlaybackState.STOPPED)
            raise
        self._transition(PlaybackState.READY)
        return sequence

    def run(
        self,
        sequence: PlaybackSequence,
        max_iterations: Optional[int] = None,
    ) -> None:
        """
        Present `sequence` until the renderer asks to stop.

        Args:
            sequence: Non-empty PlaybackSequence
            max_iterations: Optional cap on presented frames

        Raises:
            EmptySequence: If the sequence has no frames
        """
        if len(sequence) == 0:
            self._transition(PlaybackState.STOPPED)
            raise EmptySequence("Nothing to play")

        self.current_index = 0
        self.frames_presented = 0
        self.scene_changes = 0

        uploaded_index: Optional[int] = None

        try:
            self.renderer.open(self.title)
            self._transition(PlaybackState.ADVANCING)
            self.cadence.reset()

            while True:
                if max_iterations is not None and self.frames_presented >= max_iterations:
                    break

                mesh = sequence[self.current_index]

                if uploaded_index != self.current_index:
                    self.renderer.upload_vertices(mesh.vertex_array())
                    uploaded_index = self.current_index
                    self.scene_changes += 1

                self.renderer.clear()
                for i in range(mesh.triangle_count):
                    self.renderer.set_triangle_color(mesh.triangle_color(i))
                    self.renderer.draw_triangle(3 * i)

                self.renderer.swap_buffers()
                self.frames_presented += 1

                if self.renderer.poll_events():
                    break

                if self.cadence.tick():
                    self.current_index = (self.current_index + 1) % len(sequence)
        finally:
            self.renderer.close()
            self._transition(PlaybackState.STOPPED)

        logger.info(
            f"Playback finished after {self.frames_presented} frame(s), "
            f"{self.scene_changes} scene change(s)"
        )

    def play(
        self,
        directory: Union[str, Path],
        max_iterations: Optional[int] = None,
    ) -> None:
        """Load `directory` and run it."""
        sequence = self.load(directory)
        self.run(sequence, max_iterations=max_iterations)

    def _transition(self, new_state: PlaybackState) -> None:
        if new_state != self.state:
            logger.debug(
                f"Playback {self.state.value if self.state else 'NEW'} -> {new_state.value}"
            )
        self.state = new_state
