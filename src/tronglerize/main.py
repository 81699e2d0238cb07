"""
Tronglerize Command Line
========================

Entry point for converting a video into triangulated frames and playing
them back.

Commands:
    convert VIDEO OUTPUT   - extract frames, triangulate, then play back
    process FRAMES OUTPUT  - triangulate already-extracted frames
    play ARTIFACTS         - play back a directory of artifacts

Exit Codes:
    0 - success
    1 - invalid config, setup failure, frame failures, or nothing to play

Usage:
    tronglerize convert clip.mp4 out/
    tronglerize process /tmp/tronglerize/clip out/ --concurrency 8
    tronglerize play out/ --fps 30
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import ValidationError

from tronglerize import config
from tronglerize.config import Settings, load_config, setup_logging
from tronglerize.errors import OutputDirectoryNotEmpty, TronglerizeError
from tronglerize.frames import (
    extract_frames,
    prepare_cache_dir,
    probe_frame_rate,
    scan_frame_jobs,
)
from tronglerize.models.job import PipelineOutcome
from tronglerize.pipeline import BoundedFramePipeline, FrameTransformer
from tronglerize.playback import (
    CadencePolicy,
    FrameCountCadence,
    OpenCVRenderer,
    PlaybackSequencer,
    WallClockCadence,
)
from tronglerize.triangulation import DelaunayTriangulationEngine


logger = logging.getLogger(__name__)


# =============================================================================
# Preconditions
# =============================================================================

def ensure_empty_output_dir(output_dir: Path) -> None:
    """
    Create `output_dir` if missing; refuse to run if it already has entries.

    Raises:
        OutputDirectoryNotEmpty: If the directory contains anything
        NotADirectoryError: If the path exists but is not a directory
    """
    if output_dir.exists() and not output_dir.is_dir():
        raise NotADirectoryError(f"Output path is not a directory: {output_dir}")

    output_dir.mkdir(parents=True, exist_ok=True)

    if any(output_dir.iterdir()):
        raise OutputDirectoryNotEmpty(f"Output folder is not empty: {output_dir}")


# =============================================================================
# Stages
# =============================================================================

def process_frames(
    frames_dir: Path,
    output_dir: Path,
    settings: Settings,
    concurrency: Optional[int] = None,
) -> PipelineOutcome:
    """Run the bounded pipeline over every frame in `frames_dir`."""
    jobs = scan_frame_jobs(
        frames_dir,
        output_dir,
        pattern=settings.pipeline.source_glob,
        artifact_suffix=settings.pipeline.artifact_suffix,
    )

    transformer = FrameTransformer(
        engine=DelaunayTriangulationEngine(),
        params=settings.triangulation,
    )
    pipeline = BoundedFramePipeline(
        transformer,
        concurrency_limit=concurrency or settings.pipeline.concurrency_limit,
    )
    return pipeline.run(jobs)


def build_cadence(
    settings: Settings,
    source_fps: Optional[float] = None,
    cadence: Optional[str] = None,
    fps: Optional[float] = None,
    frames_per_scene: Optional[int] = None,
) -> CadencePolicy:
    """
    Create the scene-advance policy.

    Explicit arguments win over settings. For the wall-clock policy the
    rate falls back from `fps` to playback.fps, then the probed source
    rate, then extraction.default_fps.
    """
    kind = cadence or settings.playback.cadence

    if kind == "frame_count":
        return FrameCountCadence(frames_per_scene or settings.playback.frames_per_scene)

    if kind == "wall_clock":
        rate = fps or settings.playback.fps or source_fps or settings.extraction.default_fps
        return WallClockCadence.from_fps(rate)

    raise ValueError(f"Unknown cadence: {kind}")


def play_artifacts(
    artifact_dir: Path,
    settings: Settings,
    cadence: CadencePolicy,
) -> None:
    """Open a window and loop the artifacts until it is closed."""
    renderer = OpenCVRenderer(
        width=settings.playback.width,
        height=settings.playback.height,
    )
    sequencer = PlaybackSequencer(
        renderer=renderer,
        cadence=cadence,
        title=f"{settings.playback.window_title} - {artifact_dir}",
        artifact_suffix=settings.pipeline.artifact_suffix,
    )
    sequencer.play(artifact_dir)


def _report(outcome: PipelineOutcome) -> int:
    if outcome.ok:
        logger.info(f"All {outcome.total} frame(s) processed")
        return 0

    logger.error(f"{outcome.failed} of {outcome.total} frame(s) failed:")
    for failure in sorted(outcome.failures, key=lambda f: f.sequence_index):
        logger.error(f"  {failure.source_path}: {failure.kind.value}: {failure.detail}")
    return 1


# =============================================================================
# Commands
# =============================================================================

def cmd_convert(args: argparse.Namespace, settings: Settings) -> int:
    video = Path(args.video)
    output_dir = Path(args.output)

    ensure_empty_output_dir(output_dir)

    logger.info("Preparing cache folder")
    cache_dir = prepare_cache_dir(settings.extraction.cache_root, video)

    logger.info("Getting frame rate")
    frame_rate = probe_frame_rate(
        video,
        ffmpeg_binary=settings.extraction.ffmpeg_binary,
        default_fps=settings.extraction.default_fps,
    )

    logger.info("Converting video to images")
    extract_frames(
        video,
        cache_dir,
        frame_rate,
        ffmpeg_binary=settings.extraction.ffmpeg_binary,
        frame_pattern=settings.extraction.frame_pattern,
    )

    logger.info("Processing images")
    outcome = process_frames(cache_dir, output_dir, settings, args.concurrency)
    status = _report(outcome)
    if status != 0 or args.no_play:
        return status

    logger.info("Playing video")
    play_artifacts(output_dir, settings, build_cadence(settings, source_fps=frame_rate))
    return 0


def cmd_process(args: argparse.Namespace, settings: Settings) -> int:
    output_dir = Path(args.output)
    ensure_empty_output_dir(output_dir)
    outcome = process_frames(Path(args.frames), output_dir, settings, args.concurrency)
    return _report(outcome)


def cmd_play(args: argparse.Namespace, settings: Settings) -> int:
    cadence = build_cadence(
        settings,
        cadence=args.cadence,
        fps=args.fps,
        frames_per_scene=args.frames_per_scene,
    )
    play_artifacts(Path(args.artifacts), settings, cadence)
    return 0


# =============================================================================
# Main Entry Point
# =============================================================================

def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be >= 1")
    return number


def positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tronglerize",
        description="Turn a video into a low-poly triangulated animation",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a YAML config file",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    convert = subparsers.add_parser("convert", help="Extract, triangulate and play a video")
    convert.add_argument("video", help="Input video file")
    convert.add_argument("output", help="Empty output folder for artifacts")
    convert.add_argument(
        "--concurrency",
        type=positive_int,
        default=None,
        help="Frames processed at once (default: pipeline.concurrency_limit)",
    )
    convert.add_argument(
        "--no-play",
        action="store_true",
        help="Stop after writing artifacts",
    )
    convert.set_defaults(handler=cmd_convert)

    process = subparsers.add_parser("process", help="Triangulate extracted frames")
    process.add_argument("frames", help="Folder of extracted frame images")
    process.add_argument("output", help="Empty output folder for artifacts")
    process.add_argument(
        "--concurrency",
        type=positive_int,
        default=None,
        help="Frames processed at once (default: pipeline.concurrency_limit)",
    )
    process.set_defaults(handler=cmd_process)

    play = subparsers.add_parser("play", help="Play back a folder of artifacts")
    play.add_argument("artifacts", help="Folder of artifacts")
    play.add_argument(
        "--cadence",
        choices=["wall_clock", "frame_count"],
        default=None,
        help="Scene-advance policy (default: playback.cadence)",
    )
    play.add_argument(
        "--fps",
        type=positive_float,
        default=None,
        help="Scenes per second for wall_clock cadence",
    )
    play.add_argument(
        "--frames-per-scene",
        type=positive_int,
        default=None,
        help="Presented frames per scene for frame_count cadence",
    )
    play.set_defaults(handler=cmd_play)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(config.settings)

    try:
        if args.config:
            config.settings = load_config(args.config)
            setup_logging(config.settings)
        return args.handler(args, config.settings)
    except (yaml.YAMLError, ValidationError) as e:
        logger.error(f"Invalid config {args.config}: {e}")
        return 1
    except TronglerizeError as e:
        logger.error(f"{e.kind.value}: {e}")
        return 1
    except (NotADirectoryError, FileNotFoundError) as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 1


if __name__ == "__main__":
    sys.exit(main())
