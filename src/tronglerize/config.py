"""
Tronglerize Configuration
=========================

This module handles configuration loading for tronglerize.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. tronglerize.yaml / config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    TRONGLERIZE_CONCURRENCY       -> pipeline.concurrency_limit
    TRONGLERIZE_SOURCE_GLOB       -> pipeline.source_glob
    TRONGLERIZE_MAX_POINTS        -> triangulation.max_points
    TRONGLERIZE_FFMPEG            -> extraction.ffmpeg_binary
    TRONGLERIZE_CACHE_ROOT        -> extraction.cache_root
    TRONGLERIZE_CADENCE           -> playback.cadence
    TRONGLERIZE_FRAMES_PER_SCENE  -> playback.frames_per_scene
    TRONGLERIZE_PLAYBACK_FPS      -> playback.fps
    TRONGLERIZE_LOG_LEVEL         -> logging.level

Example:
    from tronglerize.config import settings

    print(settings.pipeline.concurrency_limit)
    print(settings.playback.cadence)
"""

import os
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field

from tronglerize.triangulation.engine import TriangulationParams


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class PipelineConfig(BaseModel):
    """Frame-processing pipeline configuration."""

    concurrency_limit: int = Field(
        default=20,
        ge=1,
        description="Maximum frames transformed concurrently",
    )
    source_glob: str = Field(
        default="*.jpg",
        description="Glob selecting extracted frame images",
    )
    artifact_suffix: str = Field(
        default=".bin",
        description="File extension of mesh artifacts",
    )


class ExtractionConfig(BaseModel):
    """ffmpeg frame extraction configuration."""

    ffmpeg_binary: str = Field(default="ffmpeg", description="ffmpeg executable")
    cache_root: str = Field(
        default="/tmp/tronglerize",
        description="Root directory for extracted frames",
    )
    default_fps: float = Field(
        default=24.0,
        gt=0,
        description="Frame rate used when the video's rate cannot be detected",
    )
    frame_pattern: str = Field(
        default="frame%06d.jpg",
        description="ffmpeg output pattern for extracted frames",
    )


class PlaybackConfig(BaseModel):
    """Playback configuration."""

    width: int = Field(default=1920, ge=1, description="Canvas width in pixels")
    height: int = Field(default=1080, ge=1, description="Canvas height in pixels")
    cadence: Literal["wall_clock", "frame_count"] = Field(
        default="wall_clock",
        description="Scene-advance policy",
    )
    frames_per_scene: int = Field(
        default=2,
        ge=1,
        description="Presented frames per scene (frame_count cadence)",
    )
    fps: Optional[float] = Field(
        default=None,
        gt=0,
        description="Scenes per second (wall_clock cadence); None = source rate",
    )
    window_title: str = Field(default="tronglerize", description="Window title")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for tronglerize.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    triangulation: TriangulationParams = Field(default_factory=TriangulationParams)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to a YAML file. If None, searches common locations.

    Returns:
        Settings: Loaded configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
    """
    if config_path is not None and not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    # Find config file
    if config_path is None:
        search_paths = [
            Path("tronglerize.yaml"),
            Path("tronglerize.yml"),
            Path("config.yaml"),
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path:
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    # Build settings object
    settings = Settings.model_validate(config_data)

    return settings


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Pipeline settings
    if env_limit := os.environ.get("TRONGLERIZE_CONCURRENCY"):
        config_data.setdefault("pipeline", {})["concurrency_limit"] = int(env_limit)
    if env_glob := os.environ.get("TRONGLERIZE_SOURCE_GLOB"):
        config_data.setdefault("pipeline", {})["source_glob"] = env_glob

    # Triangulation settings
    if env_points := os.environ.get("TRONGLERIZE_MAX_POINTS"):
        config_data.setdefault("triangulation", {})["max_points"] = int(env_points)

    # Extraction settings
    if env_ffmpeg := os.environ.get("TRONGLERIZE_FFMPEG"):
        config_data.setdefault("extraction", {})["ffmpeg_binary"] = env_ffmpeg
    if env_cache := os.environ.get("TRONGLERIZE_CACHE_ROOT"):
        config_data.setdefault("extraction", {})["cache_root"] = env_cache

    # Playback settings
    if env_cadence := os.environ.get("TRONGLERIZE_CADENCE"):
        config_data.setdefault("playback", {})["cadence"] = env_cadence
    if env_fps_scene := os.environ.get("TRONGLERIZE_FRAMES_PER_SCENE"):
        config_data.setdefault("playback", {})["frames_per_scene"] = int(env_fps_scene)
    if env_fps := os.environ.get("TRONGLERIZE_PLAYBACK_FPS"):
        config_data.setdefault("playback", {})["fps"] = float(env_fps)

    # Logging settings
    if env_log := os.environ.get("TRONGLERIZE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=True,
    )


# =============================================================================
# Global Settings Instance
# =============================================================================

# Global settings instance - loaded on import, replaced by the CLI when
# an explicit --config is given
settings = load_config()
