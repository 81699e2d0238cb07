"""
Triangulation Module
====================

Image-to-mesh conversion behind a pluggable protocol.

Components:
    - TriangulationEngine: Protocol every backend implements
    - TriangulationParams: Fixed tuning knobs passed through to the engine
    - TriangulationResult: Raw (vertices, colors) arrays
    - DelaunayTriangulationEngine: OpenCV edge-sampled Delaunay (default)

Design Philosophy:
    Triangulation is treated as a pluggable black box. The pipeline
    validates the shape of the output, NOT the quality of the mesh.
"""

from tronglerize.triangulation.engine import (
    TriangulationEngine,
    TriangulationParams,
    TriangulationResult,
)
from tronglerize.triangulation.delaunay import DelaunayTriangulationEngine

__all__ = [
    "TriangulationEngine",
    "TriangulationParams",
    "TriangulationResult",
    "DelaunayTriangulationEngine",
]
