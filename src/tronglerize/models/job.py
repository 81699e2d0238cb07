"""
Job Models
==========

Data models for the frame-processing pipeline.

    FrameJob        -> one source image to one artifact
    JobFailure      -> why a single job failed
    PipelineOutcome -> aggregate of a whole run

A FrameJob is consumed exactly once. No retry state is kept anywhere.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet

from tronglerize.models.error_kinds import ErrorKind


@dataclass(frozen=True, slots=True)
class FrameJob:
    """
    One unit of pipeline work.

    Attributes:
        source_path: Source image to triangulate
        destination_path: Artifact file to write
        sequence_index: Position of the frame in the video (0-based)
    """

    source_path: Path
    destination_path: Path
    sequence_index: int

    def __repr__(self) -> str:
        return (
            f"FrameJob(#{self.sequence_index}, "
            f"{self.source_path.name} -> {self.destination_path.name})"
        )


@dataclass(frozen=True, slots=True)
class JobFailure:
    """
    Record of a failed job.

    Attributes:
        source_path: Source image of the failed job
        sequence_index: Index of the failed job, so two jobs never share a record
        kind: Machine-readable failure cause
        detail: Human-readable error message
    """

    source_path: Path
    sequence_index: int
    kind: ErrorKind
    detail: str

    @classmethod
    def from_exception(cls, job: FrameJob, exc: BaseException) -> "JobFailure":
        """Build a failure record from the exception a job raised."""
        kind = getattr(exc, "kind", None)
        if not isinstance(kind, ErrorKind):
            kind = ErrorKind.UNEXPECTED
        detail = str(exc) or type(exc).__name__
        return cls(
            source_path=job.source_path,
            sequence_index=job.sequence_index,
            kind=kind,
            detail=detail,
        )

    def to_dict(self) -> dict:
        return {
            "source_path": str(self.source_path),
            "sequence_index": self.sequence_index,
            "kind": self.kind.value,
            "detail": self.detail,
        }


@dataclass(frozen=True, slots=True)
class PipelineOutcome:
    """
    Aggregate result of a pipeline run.

    Produced only after every scheduled job finished. The failure set,
    not the order in which failures arrived, is the observable result.

    Attributes:
        total: Number of scheduled jobs
        succeeded: Number of jobs that wrote an artifact
        failures: Set of JobFailure records (empty on success)
    """

    total: int
    succeeded: int
    failures: FrozenSet[JobFailure] = field(default_factory=frozenset)

    @property
    def ok(self) -> bool:
        """True when every job succeeded."""
        return not self.failures

    @property
    def failed(self) -> int:
        return len(self.failures)

    def raise_for_failures(self) -> None:
        """
        Raise PipelineAggregateFailure if any job failed.

        Raises:
            PipelineAggregateFailure: Carrying the full failure set
        """
        if self.failures:
            from tronglerize.errors import PipelineAggregateFailure

            raise PipelineAggregateFailure(self.failures)

    def to_dict(self) -> dict:
        """Export as dictionary for logging/serialization."""
        return {
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failures": [
                f.to_dict()
                for f in sorted(self.failures, key=lambda f: f.sequence_index)
            ],
        }
