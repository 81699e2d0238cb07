"""
Triangulation Engine
====================

Clean triangulation abstraction.

This module provides the TriangulationEngine protocol, the fixed parameter
set handed to every engine, and the raw result type. Engines are treated
as black boxes: the pipeline only checks the SHAPE of what comes back.

Design Rules:
    - Takes a decoded BGR image (H, W, 3) uint8
    - Returns flat vertex coordinates and flat RGB colors
    - Parameters are passed through unchanged; an engine may ignore knobs
      it has no use for
"""

import logging
from dataclasses import dataclass
from typing import Protocol

import numpy as np
from pydantic import BaseModel, Field


logger = logging.getLogger(__name__)


class TriangulationParams(BaseModel):
    """
    Tuning knobs for image-to-mesh conversion.

    Defaults reproduce the settings the converter has always shipped with.
    """

    blur_radius: int = Field(default=2, ge=0, description="Pre-blur kernel radius")
    sobel_threshold: int = Field(default=10, ge=0, description="Edge magnitude threshold")
    points_threshold: int = Field(default=10, ge=0, description="Minimum edge points to sample")
    point_rate: float = Field(default=0.075, gt=0, le=1.0, description="Fraction of edge pixels sampled")
    blur_factor: float = Field(default=1.0, ge=0, description="Gaussian sigma multiplier")
    edge_factor: float = Field(default=6.0, ge=0, description="Edge emphasis factor")
    max_points: int = Field(default=5000, ge=0, description="Upper bound on sampled points")
    wireframe: int = Field(default=0, ge=0, description="Wireframe mode (0 = filled)")
    noise: float = Field(default=0.0, ge=0, description="Color noise amplitude")
    stroke_width: float = Field(default=1.0, ge=0, description="Stroke width")
    is_stroke_solid: bool = Field(default=False, description="Solid stroke color")
    grayscale: bool = Field(default=False, description="Triangulate a grayscale image")
    seed: int = Field(default=0, description="Seed for point sampling")


@dataclass(frozen=True)
class TriangulationResult:
    """
    Raw output of a triangulation engine.

    Attributes:
        vertices: Flat (x, y) coordinates, 6 per triangle
        colors: Flat RGB bytes, 3 per triangle
    """

    vertices: np.ndarray
    colors: np.ndarray

    @property
    def triangle_count(self) -> int:
        return len(self.vertices) // 6


class TriangulationEngine(Protocol):
    """
    Protocol for triangulation backends.

    Implemented by:
        - DelaunayTriangulationEngine (OpenCV, default)
        - test doubles
    """

    def triangulate(
        self,
        image: np.ndarray,
        params: TriangulationParams,
    ) -> TriangulationResult:
        """
        Convert a BGR image into a triangle mesh.

        Args:
            image: BGR image (H, W, 3), uint8
            params: Tuning parameters

        Returns:
            TriangulationResult with flat vertex and color arrays
        """
        ...
