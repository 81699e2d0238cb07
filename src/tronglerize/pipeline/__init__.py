"""
Pipeline Module
===============

Frame-processing pipeline.

Components:
    - FrameTransformer: One source image -> one artifact
    - BoundedFramePipeline: Runs the transformer over every job with a
      bounded worker pool and returns one aggregate PipelineOutcome

Example:
    from tronglerize.pipeline import BoundedFramePipeline, FrameTransformer
    from tronglerize.triangulation import DelaunayTriangulationEngine

    transformer = FrameTransformer(DelaunayTriangulationEngine())
    outcome = BoundedFramePipeline(transformer, concurrency_limit=20).run(jobs)
"""

from tronglerize.pipeline.transformer import FrameTransformer
from tronglerize.pipeline.runner import DEFAULT_CONCURRENCY_LIMIT, BoundedFramePipeline


__all__ = [
    "FrameTransformer",
    "BoundedFramePipeline",
    "DEFAULT_CONCURRENCY_LIMIT",
]
