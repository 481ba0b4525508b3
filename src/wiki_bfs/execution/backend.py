from abc import ABC, abstractmethod
from collections import Counter
from pathlib import Path
from typing import Sequence

from .job import JobSpec


class ExecutionBackend(ABC):
    """
    The batch substrate the BFS jobs run on.

    An implementation runs ``job.mapper`` over disjoint partitions of the
    input, regroups every emitted pair by key so that all values of a key
    reach exactly one reducer call, runs ``job.reducer`` and writes the
    result to ``output_dir``. The directory must only become visible as
    complete (``_SUCCESS`` marker) once every reduce task has finished.

    Task retries are the backend's responsibility. Mappers and reducers are
    pure, so re-running any of them is always safe.
    """

    @abstractmethod
    async def run_job(self, job: JobSpec, inputs: Sequence[Path], output_dir: Path) -> Counter:
        """Run a job to completion and return its aggregated counters."""
        pass
