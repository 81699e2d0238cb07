"""
Mesh Codec Tests
================

Encoding, decoding, boundary cases and atomic artifact writes.
"""

import os

import numpy as np
import pytest

from conftest import SCENARIO_BYTES, SCENARIO_MESH, make_mesh
from tronglerize.codec import (
    decode_mesh,
    encode_mesh,
    expected_artifact_size,
    read_artifact,
    write_artifact,
    write_bytes_atomic,
)
from tronglerize.codec.mesh_codec import MAX_VERTEX_COUNT
from tronglerize.errors import (
    EmptyMesh,
    InvalidMeshShape,
    MeshDecodeError,
    MeshTooLarge,
    TruncatedColors,
    TruncatedHeader,
    TruncatedVertices,
)
from tronglerize.models import ErrorKind, Mesh


class TestEncode:
    """Tests for encode_mesh."""

    def test_single_triangle_bytes(self):
        """Verify the one-triangle scenario encodes to the expected bytes."""
        assert encode_mesh(SCENARIO_MESH) == SCENARIO_BYTES

    def test_single_triangle_size(self):
        assert len(encode_mesh(SCENARIO_MESH)) == 17 == expected_artifact_size(6)

    @pytest.mark.parametrize("triangles", [1, 2, 7, 100])
    def test_size_law(self, triangles):
        mesh = make_mesh(triangles)
        n = mesh.vertex_count
        assert len(encode_mesh(mesh)) == 2 + 2 * n + n // 2

    def test_big_endian_coordinates(self):
        mesh = Mesh(vertices=(0x0102, 0, 0, 0x0304, 0xFFFF, 1), colors=b"\x01\x02\x03")
        data = encode_mesh(mesh)
        assert data[:2] == b"\x00\x06"
        assert data[2:4] == b"\x01\x02"
        assert data[8:10] == b"\x03\x04"
        assert data[10:12] == b"\xff\xff"
        assert data[-3:] == b"\x01\x02\x03"

    def test_empty_mesh_rejected(self):
        with pytest.raises(EmptyMesh):
            encode_mesh(Mesh(vertices=(), colors=b""))

    def test_vertex_count_not_multiple_of_six(self):
        mesh = Mesh(vertices=(0, 0, 1, 1), colors=b"\x00\x00")
        with pytest.raises(InvalidMeshShape) as exc_info:
            encode_mesh(mesh)
        assert exc_info.value.kind == ErrorKind.INVALID_MESH_SHAPE

    def test_color_count_mismatch(self):
        mesh = Mesh(vertices=(0, 0, 1, 0, 0, 1), colors=b"\x00\x00")
        with pytest.raises(InvalidMeshShape):
            encode_mesh(mesh)

    def test_coordinate_out_of_range(self):
        mesh = Mesh(vertices=(0, 0, 70000, 0, 0, 1), colors=b"\x00\x00\x00")
        with pytest.raises(InvalidMeshShape):
            encode_mesh(mesh)

    def test_negative_coordinate(self):
        mesh = Mesh(vertices=(0, -1, 1, 0, 0, 1), colors=b"\x00\x00\x00")
        with pytest.raises(InvalidMeshShape):
            encode_mesh(mesh)

    def test_fractional_coordinates_rejected(self):
        """Coordinates are never truncated to fit the integer format."""
        mesh = Mesh(vertices=(0.9, 0, 100.7, 0, 0, 100), colors=b"\xff\x00\x00")
        with pytest.raises(InvalidMeshShape):
            encode_mesh(mesh)

    def test_float_coordinates_rejected(self):
        mesh = Mesh(vertices=(0.0, 0.0, 100.0, 0.0, 0.0, 100.0), colors=b"\xff\x00\x00")
        with pytest.raises(InvalidMeshShape):
            encode_mesh(mesh)

    def test_fractional_mesh_writes_nothing(self, tmp_path):
        path = tmp_path / "frame1.bin"
        mesh = Mesh.from_arrays(np.array([0.9, 0, 10.6, 0, 0, 10.99], dtype=np.float32), [1, 2, 3])
        with pytest.raises(InvalidMeshShape):
            write_artifact(path, mesh)
        assert not path.exists()

    def test_too_many_vertices(self):
        """A count above the 16-bit header limit is refused, never truncated."""
        triangles = MAX_VERTEX_COUNT // 6 + 1
        mesh = Mesh(vertices=(0,) * (triangles * 6), colors=b"\x00" * (triangles * 3))
        with pytest.raises(MeshTooLarge) as exc_info:
            encode_mesh(mesh)
        assert exc_info.value.kind == ErrorKind.MESH_TOO_LARGE

    def test_largest_encodable_mesh(self):
        triangles = MAX_VERTEX_COUNT // 6
        mesh = Mesh(vertices=(1,) * (triangles * 6), colors=b"\x02" * (triangles * 3))
        data = encode_mesh(mesh)
        assert len(data) == expected_artifact_size(triangles * 6)


class TestDecode:
    """Tests for decode_mesh."""

    def test_scenario_round_trip(self):
        mesh = decode_mesh(SCENARIO_BYTES)
        assert mesh.vertices == (0, 0, 100, 0, 0, 100)
        assert mesh.colors == b"\xff\x00\x00"
        assert mesh == SCENARIO_MESH

    def test_round_trip_many_triangles(self):
        mesh = make_mesh(50, offset=300)
        assert decode_mesh(encode_mesh(mesh)) == mesh

    def test_zero_bytes_truncated_header(self):
        with pytest.raises(TruncatedHeader) as exc_info:
            decode_mesh(b"")
        assert exc_info.value.kind == ErrorKind.TRUNCATED_HEADER

    def test_one_byte_truncated_header(self):
        with pytest.raises(TruncatedHeader):
            decode_mesh(b"\x00")

    def test_zero_count_is_empty_mesh(self):
        with pytest.raises(EmptyMesh) as exc_info:
            decode_mesh(b"\x00\x00")
        assert exc_info.value.kind == ErrorKind.EMPTY_MESH

    def test_header_only_truncated_vertices(self):
        with pytest.raises(TruncatedVertices):
            decode_mesh(b"\x00\x06")

    def test_partial_vertices(self):
        with pytest.raises(TruncatedVertices):
            decode_mesh(SCENARIO_BYTES[:10])

    def test_missing_colors(self):
        with pytest.raises(TruncatedColors) as exc_info:
            decode_mesh(SCENARIO_BYTES[:14])
        assert exc_info.value.kind == ErrorKind.TRUNCATED_COLORS

    def test_partial_colors(self):
        with pytest.raises(TruncatedColors):
            decode_mesh(SCENARIO_BYTES[:-1])

    def test_trailing_bytes_ignored(self):
        assert decode_mesh(SCENARIO_BYTES + b"\xde\xad\xbe\xef") == SCENARIO_MESH

    def test_count_not_multiple_of_six(self):
        data = b"\x00\x04" + b"\x00" * 8 + b"\x00\x00"
        with pytest.raises(InvalidMeshShape):
            decode_mesh(data)

    def test_decode_errors_share_base_class(self):
        for data in (b"", b"\x00\x00", b"\x00\x06", SCENARIO_BYTES[:14]):
            with pytest.raises(MeshDecodeError):
                decode_mesh(data)


class TestArtifactFiles:
    """Tests for artifact file helpers."""

    def test_write_then_read(self, tmp_path):
        path = tmp_path / "frame1.bin"
        written = write_artifact(path, SCENARIO_MESH)
        assert written == 17
        assert path.read_bytes() == SCENARIO_BYTES
        assert read_artifact(path) == SCENARIO_MESH

    def test_no_temp_file_left(self, tmp_path):
        write_artifact(tmp_path / "frame1.bin", SCENARIO_MESH)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["frame1.bin"]

    def test_invalid_mesh_writes_nothing(self, tmp_path):
        path = tmp_path / "frame1.bin"
        with pytest.raises(EmptyMesh):
            write_artifact(path, Mesh(vertices=(), colors=b""))
        assert not path.exists()

    def test_replaces_existing_file(self, tmp_path):
        path = tmp_path / "frame1.bin"
        path.write_bytes(b"stale")
        write_bytes_atomic(path, b"fresh")
        assert path.read_bytes() == b"fresh"

    def test_failed_write_cleans_up(self, tmp_path, monkeypatch):
        path = tmp_path / "frame1.bin"

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(OSError):
            write_bytes_atomic(path, b"payload")
        assert list(tmp_path.iterdir()) == []
