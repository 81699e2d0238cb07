"""
Codec Module
============

Binary artifact format for triangulated frames.

    - encode_mesh / decode_mesh: Mesh <-> bytes
    - write_artifact / read_artifact: Mesh <-> artifact file
    - expected_artifact_size: The size law
"""

from tronglerize.codec.mesh_codec import (
    MAX_VERTEX_COUNT,
    decode_mesh,
    encode_mesh,
    expected_artifact_size,
    read_artifact,
    validate_mesh,
    write_artifact,
    write_bytes_atomic,
)

__all__ = [
    "MAX_VERTEX_COUNT",
    "decode_mesh",
    "encode_mesh",
    "expected_artifact_size",
    "read_artifact",
    "validate_mesh",
    "write_artifact",
    "write_bytes_atomic",
]
