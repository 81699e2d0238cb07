"""
Mesh Codec
==========

Binary encoding of a single frame's Mesh.

Artifact Layout (big-endian):
    offset 0          : uint16 vertex_count (N)
    offset 2          : N x uint16 vertex coordinates, in order
    offset 2 + 2N     : N/2 raw color bytes, in order

Size Law:
    len(artifact) == 2 + 2*N + N/2

Design Rules:
    - Encoding validates every mesh invariant before producing bytes
    - Decoding is header-driven: trailing bytes are ignored
    - An artifact declaring zero vertices is an error, never an empty frame
    - Artifacts are written atomically (temp file + rename)

Example:
    from tronglerize.codec import encode_mesh, decode_mesh
    from tronglerize.models import Mesh

    mesh = Mesh(vertices=(0, 0, 100, 0, 0, 100), colors=b"\\xff\\x00\\x00")
    data = encode_mesh(mesh)   # b"\\x00\\x06\\x00\\x00\\x00d..."
    assert decode_mesh(data) == mesh
"""

import logging
import os
import struct
from pathlib import Path
from typing import Union

import numpy as np

from tronglerize.errors import (
    EmptyMesh,
    EncodingSizeMismatch,
    InvalidMeshShape,
    MeshTooLarge,
    TruncatedColors,
    TruncatedHeader,
    TruncatedVertices,
)
from tronglerize.models.mesh import COORDS_PER_TRIANGLE, Mesh


logger = logging.getLogger(__name__)


HEADER = struct.Struct(">H")
HEADER_SIZE = HEADER.size
MAX_VERTEX_COUNT = 0xFFFF
VERTEX_DTYPE = np.dtype(">u2")

PathLike = Union[str, os.PathLike]


def expected_artifact_size(vertex_count: int) -> int:
    """Exact encoded size for a mesh with `vertex_count` coordinates."""
    return HEADER_SIZE + 2 * vertex_count + vertex_count // 2


def validate_mesh(mesh: Mesh) -> None:
    """
    Check every encodable-mesh invariant.

    Raises:
        EmptyMesh: Mesh has no vertices
        InvalidMeshShape: Vertex count not a multiple of 6, color count
            not half the vertex count, a non-integer coordinate,
            or a value out of range
        MeshTooLarge: Vertex count does not fit the 16-bit header
    """
    count = mesh.vertex_count

    if count == 0:
        raise EmptyMesh("mesh has no vertices")

    if count % COORDS_PER_TRIANGLE != 0:
        raise InvalidMeshShape(
            f"vertex count {count} is not a multiple of {COORDS_PER_TRIANGLE}"
        )

    if len(mesh.colors) != count // 2:
        raise InvalidMeshShape(
            f"expected {count // 2} color bytes for {count} vertices, "
            f"got {len(mesh.colors)}"
        )

    if count > MAX_VERTEX_COUNT:
        raise MeshTooLarge(
            f"vertex count {count} exceeds header limit {MAX_VERTEX_COUNT}"
        )

    vertices = np.asarray(mesh.vertices)
    if vertices.dtype.kind not in "iu":
        raise InvalidMeshShape(
            f"vertex coordinates must be integers, got dtype {vertices.dtype}"
        )
    if vertices.min() < 0 or vertices.max() > 0xFFFF:
        raise InvalidMeshShape(
            f"vertex coordinates out of uint16 range: "
            f"[{vertices.min()}, {vertices.max()}]"
        )


def encode_mesh(mesh: Mesh) -> bytes:
    """
    Encode a mesh into artifact bytes.

    Args:
        mesh: Mesh to encode

    Returns:
        Encoded artifact

    Raises:
        InvalidMeshShape / MeshTooLarge / EmptyMesh: Mesh invariants violated
        EncodingSizeMismatch: Output length breaks the size law
    """
    validate_mesh(mesh)

    count = mesh.vertex_count
    payload = b"".join((
        HEADER.pack(count),
        np.asarray(mesh.vertices, dtype=VERTEX_DTYPE).tobytes(),
        mesh.colors,
    ))

    expected = expected_artifact_size(count)
    if len(payload) != expected:
        raise EncodingSizeMismatch(
            f"encoded {len(payload)} bytes, expected {expected} "
            f"for vertex count {count}"
        )

    return payload


def decode_mesh(data: bytes) -> Mesh:
    """
    Decode artifact bytes into a Mesh.

    Args:
        data: Artifact bytes (trailing bytes are ignored)

    Returns:
        Decoded Mesh

    Raises:
        TruncatedHeader: Fewer than 2 bytes
        EmptyMesh: Header declares 0 vertices
        TruncatedVertices: Stream ends inside the vertex block
        TruncatedColors: Stream ends inside the color block
        InvalidMeshShape: Header count is not a multiple of 6
    """
    view = memoryview(data)

    if len(view) < HEADER_SIZE:
        raise TruncatedHeader(
            f"need {HEADER_SIZE} header bytes, got {len(view)}"
        )

    (count,) = HEADER.unpack_from(view, 0)
    if count == 0:
        raise EmptyMesh("artifact declares 0 vertices")

    vertex_start = HEADER_SIZE
    vertex_end = vertex_start + 2 * count
    if len(view) < vertex_end:
        raise TruncatedVertices(
            f"need {2 * count} vertex bytes, got {len(view) - vertex_start}"
        )

    color_end = vertex_end + count // 2
    if len(view) < color_end:
        raise TruncatedColors(
            f"need {count // 2} color bytes, got {len(view) - vertex_end}"
        )

    if count % COORDS_PER_TRIANGLE != 0:
        raise InvalidMeshShape(
            f"artifact vertex count {count} is not a multiple of {COORDS_PER_TRIANGLE}"
        )

    vertices = np.frombuffer(view[vertex_start:vertex_end], dtype=VERTEX_DTYPE)
    colors = bytes(view[vertex_end:color_end])

    return Mesh(vertices=tuple(vertices.tolist()), colors=colors)


def write_bytes_atomic(path: PathLike, payload: bytes) -> None:
    """
    Write `payload` to `path` so readers never see a partial file.

    The bytes go to a sibling ``.part`` file which then replaces the
    destination (created if absent, replaced if present).

    Raises:
        OSError: Filesystem failure (the temporary file is removed)
    """
    destination = Path(path)
    temp_path = destination.with_name(destination.name + ".part")

    try:
        with open(temp_path, "wb") as f:
            f.write(payload)
        os.replace(temp_path, destination)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


def write_artifact(path: PathLike, mesh: Mesh) -> int:
    """
    Encode `mesh` and write it to `path` atomically.

    Returns:
        Number of bytes written

    Raises:
        MeshError subclasses: Mesh cannot be encoded (nothing is written)
        OSError: Filesystem failure
    """
    payload = encode_mesh(mesh)
    write_bytes_atomic(path, payload)
    logger.debug(f"Wrote {path} ({len(payload)} bytes)")
    return len(payload)


def read_artifact(path: PathLike) -> Mesh:
    """Read and decode the artifact at `path`."""
    with open(path, "rb") as f:
        return decode_mesh(f.read())
