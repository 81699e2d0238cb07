"""
Error Taxonomy
==============

Exception hierarchy for tronglerize.

Every exception derives from TronglerizeError and exposes a class-level
``kind`` (an ErrorKind). Callers that only need to report a failure can
use ``exc.kind`` without matching on exception types.

Propagation:
    - Frame errors are raised by FrameTransformer and captured per job
    - Decode errors during playback loading are logged and the frame skipped
    - Setup errors abort a CLI command before any processing starts
"""

from typing import Iterable

from tronglerize.models.error_kinds import ErrorKind


class TronglerizeError(Exception):
    """Base class for all tronglerize errors."""

    kind: ErrorKind = ErrorKind.UNEXPECTED


# =============================================================================
# Mesh / Codec
# =============================================================================

class MeshError(TronglerizeError):
    """Raised when a mesh cannot be encoded or decoded."""
    pass


class InvalidMeshShape(MeshError):
    kind = ErrorKind.INVALID_MESH_SHAPE


class MeshTooLarge(MeshError):
    kind = ErrorKind.MESH_TOO_LARGE


class EncodingSizeMismatch(MeshError):
    kind = ErrorKind.ENCODING_SIZE_MISMATCH


class MeshDecodeError(MeshError):
    """Raised when an artifact byte stream is structurally invalid."""
    pass


class EmptyMesh(MeshDecodeError):
    kind = ErrorKind.EMPTY_MESH


class TruncatedHeader(MeshDecodeError):
    kind = ErrorKind.TRUNCATED_HEADER


class TruncatedVertices(MeshDecodeError):
    kind = ErrorKind.TRUNCATED_VERTICES


class TruncatedColors(MeshDecodeError):
    kind = ErrorKind.TRUNCATED_COLORS


# =============================================================================
# Frame processing
# =============================================================================

class FrameProcessingError(TronglerizeError):
    """Raised by FrameTransformer when a single frame cannot be processed."""
    pass


class SourceUnreadable(FrameProcessingError):
    kind = ErrorKind.SOURCE_UNREADABLE


class TriangulationFailed(FrameProcessingError):
    kind = ErrorKind.TRIANGULATION_FAILED


class InvalidTriangulationOutput(FrameProcessingError):
    kind = ErrorKind.INVALID_TRIANGULATION_OUTPUT


class ArtifactWriteFailed(FrameProcessingError):
    kind = ErrorKind.ARTIFACT_WRITE_FAILED


# =============================================================================
# Run level
# =============================================================================

class EmptySequence(TronglerizeError):
    """Raised when playback has no decodable artifact to show."""

    kind = ErrorKind.EMPTY_SEQUENCE


class PipelineAggregateFailure(TronglerizeError):
    """
    Raised when one or more jobs of a pipeline run failed.

    Attributes:
        failures: The complete set of JobFailure records for the run
    """

    kind = ErrorKind.PIPELINE_AGGREGATE_FAILURE

    def __init__(self, failures: Iterable) -> None:
        self.failures = frozenset(failures)
        lines = [
            f"{failure.source_path}: {failure.kind.value}: {failure.detail}"
            for failure in sorted(self.failures, key=lambda f: f.sequence_index)
        ]
        super().__init__(
            f"{len(self.failures)} frame(s) failed: " + "; ".join(lines)
        )


class SetupError(TronglerizeError):
    """Raised for fatal preconditions checked before processing starts."""
    pass


class OutputDirectoryNotEmpty(SetupError):
    kind = ErrorKind.OUTPUT_DIRECTORY_NOT_EMPTY


class FrameExtractionFailed(SetupError):
    kind = ErrorKind.FRAME_EXTRACTION_FAILED
