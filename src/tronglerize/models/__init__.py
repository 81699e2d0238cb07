"""
Data Models
===========

Value types shared across tronglerize.

Models:
    Mesh:
        - Mesh: Triangle mesh for one frame (vertices + per-triangle colors)

    Pipeline:
        - FrameJob: One source image to one artifact
        - JobFailure: Why a job failed
        - PipelineOutcome: Aggregate of a run

    Errors:
        - ErrorKind: Machine-readable failure causes
"""

from tronglerize.models.error_kinds import ErrorKind
from tronglerize.models.mesh import Mesh
from tronglerize.models.job import FrameJob, JobFailure, PipelineOutcome

__all__ = [
    # Mesh
    "Mesh",
    # Pipeline
    "FrameJob",
    "JobFailure",
    "PipelineOutcome",
    # Errors
    "ErrorKind",
]
