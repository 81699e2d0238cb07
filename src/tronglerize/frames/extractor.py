"""
Frame Extractor
===============

Splits a video into still images with ffmpeg.

Steps:
    1. prepare_cache_dir   - per-video scratch directory, emptied
    2. probe_frame_rate    - parse "NN fps" from `ffmpeg -i` output
    3. extract_frames      - `ffmpeg -i VIDEO -vf fps=RATE DIR/frame%06d.jpg`

ffmpeg itself is an external tool; it must be on PATH (or configured via
extraction.ffmpeg_binary).
"""

import logging
import re
import shutil
import subprocess
from pathlib import Path
from typing import Union

from tronglerize.errors import FrameExtractionFailed


logger = logging.getLogger(__name__)


_FPS_PATTERN = re.compile(r", (\d+(?:\.\d+)?) fps")


def prepare_cache_dir(cache_root: Union[str, Path], video: Union[str, Path]) -> Path:
    """
    Create (or empty) the scratch directory for a video's frames.

    Returns:
        ``cache_root / <video stem>``, existing and empty
    """
    cache_dir = Path(cache_root) / Path(video).stem
    cache_dir.mkdir(parents=True, exist_ok=True)

    removed = 0
    for entry in cache_dir.iterdir():
        if entry.is_dir() and not entry.is_symlink():
            shutil.rmtree(entry)
        else:
            entry.unlink()
        removed += 1

    if removed:
        logger.info(f"Cleared {removed} stale entries from {cache_dir}")
    return cache_dir


def parse_frame_rate(ffmpeg_output: str) -> float:
    """
    Extract the frame rate from `ffmpeg -i` diagnostics.

    Raises:
        ValueError: If no ", NN fps" token is present
    """
    match = _FPS_PATTERN.search(ffmpeg_output)
    if match is None:
        raise ValueError("no frame rate in ffmpeg output")
    return float(match.group(1))


def probe_frame_rate(
    video: Union[str, Path],
    ffmpeg_binary: str = "ffmpeg",
    default_fps: float = 24.0,
) -> float:
    """
    Probe the video's frame rate, falling back to `default_fps`.

    `ffmpeg -i` without an output file always exits non-zero; only its
    stderr diagnostics are used.

    Raises:
        FrameExtractionFailed: If ffmpeg cannot be executed at all
    """
    try:
        result = subprocess.run(
            [ffmpeg_binary, "-hide_banner", "-i", str(video)],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise FrameExtractionFailed(f"Cannot run {ffmpeg_binary}: {e}") from e

    try:
        fps = parse_frame_rate(result.stderr + result.stdout)
    except ValueError:
        logger.warning(
            f"Could not detect frame rate of {video}, using default {default_fps}"
        )
        return default_fps

    logger.info(f"Detected frame rate: {fps} fps")
    return fps


def extract_frames(
    video: Union[str, Path],
    cache_dir: Union[str, Path],
    frame_rate: float,
    ffmpeg_binary: str = "ffmpeg",
    frame_pattern: str = "frame%06d.jpg",
) -> int:
    """
    Extract frames from `video` into `cache_dir` at `frame_rate`.

    Returns:
        Number of image files produced

    Raises:
        FrameExtractionFailed: ffmpeg missing, failed, or produced nothing
    """
    video = Path(video)
    cache_dir = Path(cache_dir)

    if not video.is_file():
        raise FrameExtractionFailed(f"Video file not found: {video}")

    cmd = [
        ffmpeg_binary,
        "-hide_banner",
        "-loglevel", "error",
        "-i", str(video),
        "-vf", f"fps={frame_rate:g}",
        str(cache_dir / frame_pattern),
    ]
    logger.info("Running: " + " ".join(cmd))

    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise FrameExtractionFailed(f"ffmpeg not found: {ffmpeg_binary}") from e
    except subprocess.CalledProcessError as e:
        raise FrameExtractionFailed(
            f"ffmpeg exited with {e.returncode}: {(e.stderr or '').strip()}"
        ) from e

    suffix = Path(frame_pattern).suffix
    count = sum(1 for p in cache_dir.iterdir() if p.suffix == suffix)
    if count == 0:
        raise FrameExtractionFailed(f"ffmpeg produced no frames for {video}")

    logger.info(f"Extracted {count} frame(s) to {cache_dir}")
    return count
