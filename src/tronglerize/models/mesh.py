"""
Mesh Model
==========

Triangulated representation of one video frame.

Layout:
    vertices: flat (x, y) coordinates, 6 per triangle (3 vertices x 2)
    colors:   flat RGB bytes, 3 per triangle

    vertex_count = len(vertices)
    triangle_count = vertex_count // 6
    len(colors) = vertex_count // 2

The Mesh itself is a plain immutable value. Shape invariants are enforced
by the codec (tronglerize.codec.mesh_codec) when the mesh is encoded, and
by FrameTransformer before a mesh is built from triangulation output.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

import numpy as np


COORDS_PER_VERTEX = 2
COORDS_PER_TRIANGLE = 6
CHANNELS_PER_TRIANGLE = 3


@dataclass(frozen=True, slots=True)
class Mesh:
    """
    Immutable triangle mesh for a single frame.

    Attributes:
        vertices: Vertex coordinates as unsigned 16-bit integers
        colors: Per-triangle RGB triples as raw bytes
    """

    vertices: Tuple[int, ...]
    colors: bytes

    @classmethod
    def from_arrays(
        cls,
        vertices: Union[Sequence[int], np.ndarray],
        colors: Union[Sequence[int], bytes, np.ndarray],
    ) -> "Mesh":
        """
        Build a Mesh from raw vertex and color arrays.

        Shape is not validated here; the encoder rejects inconsistent
        meshes.

        Raises:
            ValueError: If a color value does not fit in a byte
        """
        vertex_tuple = tuple(np.asarray(vertices).ravel().tolist())
        if isinstance(colors, (bytes, bytearray)):
            color_bytes = bytes(colors)
        else:
            color_bytes = bytes(np.asarray(colors).ravel().tolist())
        return cls(vertices=vertex_tuple, colors=color_bytes)

    @property
    def vertex_count(self) -> int:
        """Number of vertex coordinates (the artifact header value)."""
        return len(self.vertices)

    @property
    def triangle_count(self) -> int:
        return len(self.vertices) // COORDS_PER_TRIANGLE

    def triangle_color(self, index: int) -> Tuple[int, int, int]:
        """RGB color of triangle `index`."""
        start = index * CHANNELS_PER_TRIANGLE
        r, g, b = self.colors[start:start + CHANNELS_PER_TRIANGLE]
        return r, g, b

    def vertex_array(self) -> np.ndarray:
        """Vertices as an (N, 2) int32 array of (x, y) points."""
        return np.asarray(self.vertices, dtype=np.int32).reshape(-1, COORDS_PER_VERTEX)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump every coordinate."""
        return (
            f"Mesh(vertex_count={self.vertex_count}, "
            f"triangles={self.triangle_count}, "
            f"colors={len(self.colors)}B)"
        )
