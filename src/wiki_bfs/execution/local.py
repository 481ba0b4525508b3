"""
LocalBackend - runs jobs on a thread or process pool of the current machine.

Map tasks run concurrently over contiguous partitions of the input, their
output is regrouped by ``crc32(key) % num_reduce_tasks`` and sorted by key,
and reduce tasks run concurrently over the resulting groups.
"""

import asyncio
import logging
import time
import zlib
from collections import Counter
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from itertools import groupby
from operator import itemgetter
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from wiki_bfs.exceptions import TaskFailedError
from wiki_bfs.storage.part_files import write_part_files

from .backend import ExecutionBackend
from .job import JobSpec, Pair, TaskOutput

logger = logging.getLogger(__name__)

EXECUTOR_KINDS = ("thread", "process")


def split_partitions(records: Sequence[Any], num_partitions: int) -> List[Sequence[Any]]:
    """Split records into at most ``num_partitions`` contiguous, non-empty slices."""
    if not records:
        return []
    num_partitions = max(1, min(num_partitions, len(records)))
    partitions = []
    for ix in range(num_partitions):
        start = len(records) * ix // num_partitions
        end = len(records) * (ix + 1) // num_partitions
        partitions.append(records[start:end])
    return partitions


def reduce_partition_of(key: str, num_reduce_tasks: int) -> int:
    # crc32 instead of hash(): str hashes differ between worker processes
    return zlib.crc32(key.encode("utf-8")) % num_reduce_tasks


def shuffle(outputs: Iterable[TaskOutput], num_reduce_tasks: int) -> List[List[Tuple[str, List[str]]]]:
    """Regroup map output so every value of a key lands in one reduce partition."""
    buckets: List[List[Pair]] = [[] for _ in range(num_reduce_tasks)]
    for output in outputs:
        for key, value in output.pairs:
            buckets[reduce_partition_of(key, num_reduce_tasks)].append((key, value))

    partitions = []
    for bucket in buckets:
        bucket.sort(key=itemgetter(0))
        partitions.append([(key, [value for _, value in group]) for key, group in groupby(bucket, key=itemgetter(0))])
    return partitions


def run_task(job_name: str, task: str, fn, items: Sequence[Tuple[str, Any]], max_attempts: int) -> TaskOutput:
    """Apply ``fn`` to every item of one partition, retrying the whole task on failure.

    Each attempt starts from a fresh TaskOutput, so a failed attempt leaves no
    pairs or counters behind.
    """
    last_error: Optional[BaseException] = None
    for attempt in range(1, max_attempts + 1):
        output = TaskOutput()
        try:
            for key, value in items:
                output.extend(fn(key, value))
            return output
        except Exception as e:
            last_error = e
            logger.warning(f"{job_name}: {task} attempt {attempt}/{max_attempts} failed: {e}")
    raise TaskFailedError(job_name, task, max_attempts, last_error)


class LocalBackend(ExecutionBackend):
    """Execution backend that keeps the shuffle in memory and writes part files to local disk."""

    def __init__(self, executor: str = "thread", max_workers: Optional[int] = None, max_task_attempts: int = 4):
        if executor not in EXECUTOR_KINDS:
            raise ValueError(f"Unknown executor '{executor}', expected one of {EXECUTOR_KINDS}")
        if max_task_attempts < 1:
            raise ValueError("max_task_attempts must be at least 1")
        self.executor_kind = executor
        self.max_workers = max_workers
        self.max_task_attempts = max_task_attempts

    def _create_executor(self) -> Executor:
        if self.executor_kind == "process":
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers)

    @staticmethod
    def _read_inputs(job: JobSpec, inputs: Sequence[Path]) -> List[Tuple[str, Any]]:
        records = []
        for path in inputs:
            records.extend(job.read_input(path))
        return records

    async def run_job(self, job: JobSpec, inputs: Sequence[Path], output_dir: Path) -> Counter:
        start_time = time.time()
        loop = asyncio.get_running_loop()
        output_dir = Path(output_dir)

        records = await asyncio.to_thread(self._read_inputs, job, inputs)
        map_partitions = split_partitions(records, job.num_map_tasks)
        logger.debug(f"{job.name}: {len(records):,} input records in {len(map_partitions)} map tasks")

        counters: Counter = Counter()
        with self._create_executor() as executor:
            map_outputs = await asyncio.gather(*[
                loop.run_in_executor(
                    executor, run_task, job.name, f"map task {ix}", job.mapper, partition, self.max_task_attempts
                )
                for ix, partition in enumerate(map_partitions)
            ])
            for output in map_outputs:
                counters.update(output.counters)

            reduce_partitions = shuffle(map_outputs, job.num_reduce_tasks)
            del map_outputs

            reduce_outputs = await asyncio.gather(*[
                loop.run_in_executor(
                    executor, run_task, job.name, f"reduce task {ix}", job.reducer, partition, self.max_task_attempts
                )
                for ix, partition in enumerate(reduce_partitions)
            ])

        for output in reduce_outputs:
            counters.update(output.counters)

        await asyncio.to_thread(write_part_files, output_dir, [output.pairs for output in reduce_outputs])

        logger.debug(f"{job.name} finished in {time.time() - start_time:.2f}s")
        return counters
