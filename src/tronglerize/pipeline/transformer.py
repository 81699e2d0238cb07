"""
Frame Transformer
=================

Per-frame unit of work: source image in, artifact file out.

Steps:
    1. Decode the source image            -> SourceUnreadable
    2. Triangulate with fixed params      -> TriangulationFailed
    3. Validate raw output shape, dtype   -> InvalidTriangulationOutput
    4. Build Mesh, encode, check size law -> EncodingSizeMismatch
                                             (MeshTooLarge / InvalidMeshShape
                                             propagate from the codec)
    5. Write the artifact atomically      -> ArtifactWriteFailed

The first failing step raises; later steps never run, and no artifact is
left behind for a failed frame.
"""

import logging
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from tronglerize.codec.mesh_codec import encode_mesh, expected_artifact_size, write_bytes_atomic
from tronglerize.errors import (
    ArtifactWriteFailed,
    EncodingSizeMismatch,
    InvalidTriangulationOutput,
    SourceUnreadable,
    TriangulationFailed,
    TronglerizeError,
)
from tronglerize.frames.image_decoder import load_image_bgr
from tronglerize.models.job import FrameJob
from tronglerize.models.mesh import COORDS_PER_TRIANGLE, Mesh
from tronglerize.triangulation.engine import TriangulationEngine, TriangulationParams


logger = logging.getLogger(__name__)


ImageLoader = Callable[[Path], np.ndarray]


class FrameTransformer:
    """
    Turns one FrameJob into one artifact.

    Stateless between calls, so a single instance is shared by every
    worker of the pipeline.

    Attributes:
        engine: Triangulation backend
        params: Fixed triangulation parameters (passed through unchanged)
        image_loader: Source image decoder
    """

    def __init__(
        self,
        engine: TriangulationEngine,
        params: Optional[TriangulationParams] = None,
        image_loader: ImageLoader = load_image_bgr,
    ) -> None:
        self.engine = engine
        self.params = params if params is not None else TriangulationParams()
        self.image_loader = image_loader

    def process(self, job: FrameJob) -> Mesh:
        """
        Process a single frame job.

        Args:
            job: FrameJob to run

        Returns:
            The Mesh that was written

        Raises:
            FrameProcessingError / MeshError subclasses describing the
            first step that failed
        """
        logger.debug(f"Processing {job.source_path}")

        image = self._load(job)
        mesh = self._triangulate(job, image)

        payload = encode_mesh(mesh)
        expected = expected_artifact_size(mesh.vertex_count)
        if len(payload) != expected:
            raise EncodingSizeMismatch(
                f"{job.source_path}: encoded {len(payload)} bytes, expected {expected}"
            )

        self._write(job.destination_path, payload)

        logger.debug(
            f"frame: {job.destination_path} has {mesh.triangle_count} triangles"
        )
        return mesh

    def _load(self, job: FrameJob) -> np.ndarray:
        try:
            return self.image_loader(job.source_path)
        except SourceUnreadable:
            raise
        except Exception as e:
            raise SourceUnreadable(f"Cannot decode {job.source_path}: {e}") from e

    def _triangulate(self, job: FrameJob, image: np.ndarray) -> Mesh:
        try:
            result = self.engine.triangulate(image, self.params)
        except TronglerizeError:
            raise
        except Exception as e:
            raise TriangulationFailed(
                f"Triangulation failed for {job.source_path}: {e}"
            ) from e

        vertices = np.asarray(result.vertices).ravel()
        colors = np.asarray(result.colors).ravel()

        if len(vertices) == 0:
            raise InvalidTriangulationOutput(
                f"{job.source_path}: triangulation produced no triangles"
            )
        if len(vertices) % COORDS_PER_TRIANGLE != 0:
            raise InvalidTriangulationOutput(
                f"{job.source_path}: invalid number of nodes: {len(vertices)}"
            )
        if len(colors) != len(vertices) // 2:
            raise InvalidTriangulationOutput(
                f"{job.source_path}: {len(colors)} color bytes for "
                f"{len(vertices)} nodes, expected {len(vertices) // 2}"
            )
        if vertices.dtype.kind not in "iu" or colors.dtype.kind not in "iu":
            raise InvalidTriangulationOutput(
                f"{job.source_path}: non-integer output "
                f"(vertices {vertices.dtype}, colors {colors.dtype})"
            )
        if colors.min() < 0 or colors.max() > 255:
            raise InvalidTriangulationOutput(
                f"{job.source_path}: color values out of byte range"
            )

        return Mesh.from_arrays(vertices, colors)

    def _write(self, destination: Path, payload: bytes) -> None:
        try:
            write_bytes_atomic(destination, payload)
        except OSError as e:
            raise ArtifactWriteFailed(f"Cannot write {destination}: {e}") from e
