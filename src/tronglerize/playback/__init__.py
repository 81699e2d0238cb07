"""
Playback Module
===============

Reconstructs the triangulated video from a directory of artifacts.

Components:
    - PlaybackSequence / load_sequence: Ordered decoded meshes
    - CadencePolicy: WallClockCadence (default) or FrameCountCadence
    - Renderer: Presentation surface protocol; OpenCVRenderer default
    - PlaybackSequencer: LOADING -> READY -> ADVANCING -> STOPPED
"""

from tronglerize.playback.cadence import CadencePolicy, FrameCountCadence, WallClockCadence
from tronglerize.playback.renderer import OpenCVRenderer, Renderer
from tronglerize.playback.sequence import PlaybackSequence, load_sequence
from tronglerize.playback.sequencer import PlaybackSequencer, PlaybackState


__all__ = [
    "CadencePolicy",
    "FrameCountCadence",
    "WallClockCadence",
    "OpenCVRenderer",
    "Renderer",
    "PlaybackSequence",
    "load_sequence",
    "PlaybackSequencer",
    "PlaybackState",
]
