"""
Error Kinds
===========

Fixed set of machine-readable error kinds.

Every error raised by tronglerize carries exactly ONE kind. Kinds are what
the pipeline records per failed job and what the CLI reports, so they
must stay stable across releases.

Rules:
    - No free-text in the kind itself (details go in the message)
    - One clear cause per kind
"""

from enum import Enum


class ErrorKind(str, Enum):
    """
    Machine-readable failure causes.

    Attributes:
        SOURCE_UNREADABLE: Source image could not be opened or decoded
        TRIANGULATION_FAILED: Triangulation engine raised an error
        INVALID_TRIANGULATION_OUTPUT: Engine output violates mesh shape
        ARTIFACT_WRITE_FAILED: Encoded artifact could not be written
        INVALID_MESH_SHAPE: Vertex/color counts or values are inconsistent
        MESH_TOO_LARGE: Vertex count does not fit the 16-bit header
        ENCODING_SIZE_MISMATCH: Encoded length breaks the size law
        EMPTY_MESH: Artifact declares zero vertices
        TRUNCATED_HEADER: Fewer than 2 bytes available
        TRUNCATED_VERTICES: Stream ended inside the vertex block
        TRUNCATED_COLORS: Stream ended inside the color block
        EMPTY_SEQUENCE: No artifact decoded for playback
        PIPELINE_AGGREGATE_FAILURE: One or more pipeline jobs failed
        OUTPUT_DIRECTORY_NOT_EMPTY: Output directory precondition violated
        FRAME_EXTRACTION_FAILED: ffmpeg could not split the video
        UNEXPECTED: Exception outside the taxonomy
    """

    # Per-frame reasons
    SOURCE_UNREADABLE = "SOURCE_UNREADABLE"
    TRIANGULATION_FAILED = "TRIANGULATION_FAILED"
    INVALID_TRIANGULATION_OUTPUT = "INVALID_TRIANGULATION_OUTPUT"
    ARTIFACT_WRITE_FAILED = "ARTIFACT_WRITE_FAILED"

    # Codec reasons
    INVALID_MESH_SHAPE = "INVALID_MESH_SHAPE"
    MESH_TOO_LARGE = "MESH_TOO_LARGE"
    ENCODING_SIZE_MISMATCH = "ENCODING_SIZE_MISMATCH"
    EMPTY_MESH = "EMPTY_MESH"
    TRUNCATED_HEADER = "TRUNCATED_HEADER"
    TRUNCATED_VERTICES = "TRUNCATED_VERTICES"
    TRUNCATED_COLORS = "TRUNCATED_COLORS"

    # Run-level reasons
    EMPTY_SEQUENCE = "EMPTY_SEQUENCE"
    PIPELINE_AGGREGATE_FAILURE = "PIPELINE_AGGREGATE_FAILURE"
    OUTPUT_DIRECTORY_NOT_EMPTY = "OUTPUT_DIRECTORY_NOT_EMPTY"
    FRAME_EXTRACTION_FAILED = "FRAME_EXTRACTION_FAILED"

    UNEXPECTED = "UNEXPECTED"
