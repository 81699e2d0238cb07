"""
Frame Job Scanner
=================

Enumerates source images and pairs each with its artifact path.

Ordering:
    Files are ordered by natural filename order, so ``frame2.jpg`` sorts
    before ``frame10.jpg`` whether or not the extractor zero-pads its
    frame numbers. The same key orders artifacts at playback time.
"""

import logging
import re
from pathlib import Path
from typing import List, Tuple, Union

from tronglerize.models.job import FrameJob


logger = logging.getLogger(__name__)


_DIGITS = re.compile(r"(\d+)")


def natural_sort_key(path: Union[str, Path]) -> Tuple:
    """Sort key that compares digit runs in a filename numerically."""
    name = Path(path).name
    return tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part.lower())
        for part in _DIGITS.split(name)
        if part
    )


def artifact_name(source: Path, suffix: str = ".bin") -> str:
    """Artifact filename for a source image (stem + suffix)."""
    return source.stem + suffix


def scan_frame_jobs(
    source_dir: Union[str, Path],
    output_dir: Union[str, Path],
    pattern: str = "*.jpg",
    artifact_suffix: str = ".bin",
) -> List[FrameJob]:
    """
    Build the ordered list of FrameJobs for a directory of source images.

    Args:
        source_dir: Directory holding extracted frames
        output_dir: Directory artifacts will be written to
        pattern: Glob selecting source images
        artifact_suffix: Extension of artifact files

    Returns:
        FrameJobs in natural filename order, indexed from 0

    Raises:
        NotADirectoryError: If source_dir does not exist
    """
    source_dir = Path(source_dir)
    output_dir = Path(output_dir)

    if not source_dir.is_dir():
        raise NotADirectoryError(f"Source directory not found: {source_dir}")

    sources = sorted(
        (p for p in source_dir.glob(pattern) if p.is_file()),
        key=natural_sort_key,
    )

    jobs = [
        FrameJob(
            source_path=source,
            destination_path=output_dir / artifact_name(source, artifact_suffix),
            sequence_index=index,
        )
        for index, source in enumerate(sources)
    ]

    logger.info(f"Found {len(jobs)} frame(s) matching '{pattern}' in {source_dir}")
    return jobs
