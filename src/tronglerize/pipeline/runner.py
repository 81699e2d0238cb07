"""
Bounded Frame Pipeline
======================

Runs a FrameTransformer over every FrameJob with a fixed upper bound on
simultaneously active transformations.

Scheduling:
    - An asyncio.Semaphore of size `concurrency_limit` is the admission gate
    - Admitted jobs run in a ThreadPoolExecutor of the same size
    - asyncio.gather is the barrier: run() returns after EVERY job finished

Failure Isolation:
    - Any exception from a job becomes a JobFailure; siblings keep running
    - There is no early stop on first error
    - The failure list is the only shared mutable state, guarded by a lock
    - Every job has its own sequence_index and destination, so each failure
      is one record and succeeded + failed == total

Example:
    pipeline = BoundedFramePipeline(transformer, concurrency_limit=20)
    outcome = pipeline.run(jobs)
    outcome.raise_for_failures()
"""

import asyncio
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from tronglerize.models.job import FrameJob, JobFailure, PipelineOutcome
from tronglerize.pipeline.transformer import FrameTransformer


logger = logging.getLogger(__name__)


DEFAULT_CONCURRENCY_LIMIT = 20


class BoundedFramePipeline:
    """
    Bounded-concurrency batch runner with per-job failure isolation.

    Attributes:
        transformer: Per-frame unit of work, shared by all workers
        concurrency_limit: Maximum number of jobs executing at once
    """

    def __init__(
        self,
        transformer: FrameTransformer,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    ) -> None:
        """
        Initialize the pipeline.

        Args:
            transformer: FrameTransformer to run for each job
            concurrency_limit: Worker pool size. Must be >= 1.
        """
        if isinstance(concurrency_limit, bool) or not isinstance(concurrency_limit, int):
            raise ValueError("concurrency_limit must be an integer")
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be >= 1")

        self.transformer = transformer
        self.concurrency_limit = concurrency_limit

    def run(self, jobs: Sequence[FrameJob]) -> PipelineOutcome:
        """
        Process every job and block until all of them completed.

        Must not be called from inside a running event loop; use
        run_async() there.
        """
        return asyncio.run(self.run_async(jobs))

    async def run_async(self, jobs: Sequence[FrameJob]) -> PipelineOutcome:
        """
        Process every job concurrently and return the aggregate outcome.

        Args:
            jobs: Ordered FrameJobs

        Returns:
            PipelineOutcome with the complete failure set

        Raises:
            ValueError: If two jobs share a sequence_index or destination_path
        """
        jobs = list(jobs)
        _check_unique(jobs)
        started = time.perf_counter()

        logger.info(
            f"Processing {len(jobs)} frame(s) with up to "
            f"{self.concurrency_limit} concurrent worker(s)"
        )

        semaphore = asyncio.Semaphore(self.concurrency_limit)
        failures_lock = asyncio.Lock()
        failures: List[JobFailure] = []
        loop = asyncio.get_running_loop()

        with ThreadPoolExecutor(
            max_workers=self.concurrency_limit,
            thread_name_prefix="frame-worker",
        ) as executor:

            async def run_one(job: FrameJob) -> bool:
                async with semaphore:
                    try:
                        await loop.run_in_executor(
                            executor, self.transformer.process, job
                        )
                    except Exception as e:
                        failure = JobFailure.from_exception(job, e)
                        logger.error(
                            f"Error processing {job.source_path}: "
                            f"{failure.kind.value}: {failure.detail}"
                        )
                        async with failures_lock:
                            failures.append(failure)
                        return False
                    return True

            results = await asyncio.gather(*(run_one(job) for job in jobs))

        outcome = PipelineOutcome(
            total=len(jobs),
            succeeded=sum(results),
            failures=frozenset(failures),
        )

        elapsed = time.perf_counter() - started
        if outcome.ok:
            logger.info(f"Processed {outcome.total} frame(s) in {elapsed:.1f}s")
        else:
            logger.warning(
                f"Processed {outcome.total} frame(s) in {elapsed:.1f}s: "
                f"{outcome.succeeded} succeeded, {outcome.failed} failed"
            )

        return outcome


def _check_unique(jobs: List[FrameJob]) -> None:
    """Each job must have its own index and its own artifact file."""
    indices = {job.sequence_index for job in jobs}
    if len(indices) != len(jobs):
        raise ValueError("FrameJobs must have distinct sequence_index values")

    destinations = {job.destination_path for job in jobs}
    if len(destinations) != len(jobs):
        raise ValueError("FrameJobs must have distinct destination_path values")
