"""
Frames Module
=============

Everything between a video file and the pipeline's job list:
    - extractor: ffmpeg frame-rate probe and frame extraction
    - scanner: source images -> ordered FrameJobs
    - image_decoder: image file -> BGR numpy array
"""

from tronglerize.frames.extractor import (
    extract_frames,
    parse_frame_rate,
    prepare_cache_dir,
    probe_frame_rate,
)
from tronglerize.frames.image_decoder import load_image_bgr
from tronglerize.frames.scanner import artifact_name, natural_sort_key, scan_frame_jobs


__all__ = [
    "extract_frames",
    "parse_frame_rate",
    "prepare_cache_dir",
    "probe_frame_rate",
    "load_image_bgr",
    "artifact_name",
    "natural_sort_key",
    "scan_frame_jobs",
]
