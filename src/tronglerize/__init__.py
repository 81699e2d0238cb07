"""
Tronglerize
===========

Turns a video into a low-poly, triangulated animation.

The package splits a video into frames, reduces each frame to a triangle
mesh with flat per-triangle colors, stores every mesh as a compact binary
artifact, and plays the artifacts back in sequence.

Components:
    - codec: Binary mesh artifact format
    - frames: ffmpeg extraction, frame scanning, image decoding
    - triangulation: Pluggable image-to-mesh engines
    - pipeline: Per-frame transformer and bounded concurrent runner
    - playback: Sequence loading, cadence policies, rendering, sequencer

Example:
    from tronglerize.frames import scan_frame_jobs
    from tronglerize.pipeline import BoundedFramePipeline, FrameTransformer
    from tronglerize.triangulation import DelaunayTriangulationEngine

    jobs = scan_frame_jobs("frames/", "out/")
    transformer = FrameTransformer(DelaunayTriangulationEngine())
    outcome = BoundedFramePipeline(transformer).run(jobs)
    outcome.raise_for_failures()
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
