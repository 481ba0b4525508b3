"""
BFSOrchestrator - drives extraction, the BFS rounds and the final filter pass.

    EXTRACTING -> ITERATING -> CONVERGED | CAPPED -> FILTERING -> DONE
    EXTRACTING -> NO_SOURCE -> DONE

Each round reads generation k-1 and writes generation k through the execution
backend. Rounds never overlap: round k+1 starts only after round k's output is
committed. The round's KEEP_GOING counter is the OR of every vertex's frontier
signal; zero means the traversal reached its fixpoint.
"""

import logging
import time
from collections import Counter
from pathlib import Path
from typing import Optional, Union

from wiki_bfs.config import BFSConfig
from wiki_bfs.execution import ExecutionBackend, LocalBackend
from wiki_bfs.storage import GenerationStore
from wiki_bfs.types import BFSCounter, PipelineResult, PipelineState
from wiki_bfs.wikipedia.dump_reader import list_dump_files

from .jobs import bfs_round_job, distance_filter_job, extraction_job

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    None: {PipelineState.EXTRACTING},
    PipelineState.EXTRACTING: {PipelineState.ITERATING, PipelineState.NO_SOURCE},
    PipelineState.ITERATING: {PipelineState.CONVERGED, PipelineState.CAPPED},
    PipelineState.CONVERGED: {PipelineState.FILTERING},
    PipelineState.CAPPED: {PipelineState.FILTERING},
    PipelineState.FILTERING: {PipelineState.DONE},
    PipelineState.NO_SOURCE: {PipelineState.DONE},
    PipelineState.DONE: set(),
}


class BFSOrchestrator:
    """Runs the whole BFS pipeline for one input collection."""

    def __init__(
            self,
            config: BFSConfig,
            output_base: Union[str, Path],
            backend: Optional[ExecutionBackend] = None
        ):
        self.config = config
        self.store = GenerationStore(output_base)
        if backend is None:
            backend = LocalBackend(
                executor=config.executor,
                max_workers=config.max_workers,
                max_task_attempts=config.max_task_attempts,
            )
        self.backend = backend

        self.state: Optional[PipelineState] = None
        self.rounds = 0
        self.diagnostics: Counter = Counter()
        self.round_frontiers = []

    def _transition(self, new_state: PipelineState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal state transition {self.state} -> {new_state}")
        logger.debug(f"State: {self.state.value if self.state else 'start'} -> {new_state.value}")
        self.state = new_state

    async def run(self, input_path: Union[str, Path]) -> PipelineResult:
        """
        Run the pipeline.

        Returns:
            PipelineResult with state CONVERGED, CAPPED or NO_SOURCE.

        Raises:
            InputNotFoundError: If the input collection does not exist.
            TaskFailedError: If a task keeps failing, e.g. on a corrupt record.
        """
        start_time = time.time()
        inputs = list_dump_files(input_path)

        self.state = None
        self.rounds = 0
        self.diagnostics = Counter()
        self.round_frontiers = []
        # Outputs of an earlier run into the same base must not survive this one
        self.store.clear_previous_run()

        self._transition(PipelineState.EXTRACTING)
        found_source = await self._extract(inputs)

        if not found_source:
            logger.warning(f"Didn't find source node '{self.config.source_id}'")
            self._transition(PipelineState.NO_SOURCE)
            result = self._result(PipelineState.NO_SOURCE, Counter(), start_time)
            self.store.write_summary(result)
            self._transition(PipelineState.DONE)
            return result

        logger.info(f"Found source node '{self.config.source_id}'")
        self._transition(PipelineState.ITERATING)
        final_state = await self._iterate()
        self._transition(final_state)

        if final_state == PipelineState.CAPPED:
            logger.warning(
                f"Stopped after the maximum of {self.config.max_rounds} rounds without converging; "
                f"distances are the best found so far"
            )
        else:
            logger.info(f"BFS converged after {self.rounds} rounds")

        self._transition(PipelineState.FILTERING)
        filter_counters = await self._filter()

        result = self._result(final_state, filter_counters, start_time)
        self.store.write_summary(result)
        self._transition(PipelineState.DONE)

        logger.info(
            f"RUN SUMMARY: state={result.state.value}, rounds={result.rounds}, "
            f"records={result.total_records:,}, buckets={result.bucket_counts}, "
            f"time={result.elapsed_seconds:.1f}s"
        )
        return result

    async def _extract(self, inputs) -> bool:
        output = self.store.generation_path(0)
        self.store.prepare(output)
        logger.info(f"First pass: {len(inputs)} dump file(s) -> {output}")

        counters = await self.backend.run_job(extraction_job(self.config), inputs, output)
        self.diagnostics.update(counters)
        logger.info(
            f"Extraction: {counters[BFSCounter.PAGES_READ.value]:,} pages read, "
            f"{counters[BFSCounter.PAGES_SKIPPED.value]:,} skipped, "
            f"{counters[BFSCounter.ISOLATED_VERTICES.value]:,} isolated"
        )
        return counters[BFSCounter.FOUND_SOURCE.value] > 0

    async def _iterate(self) -> PipelineState:
        job = bfs_round_job(self.config)
        logger.info(f"Running at most {self.config.max_rounds} BFS rounds")

        while self.rounds < self.config.max_rounds:
            self.rounds += 1
            input_path = self.store.generation_path(self.rounds - 1)
            output_path = self.store.generation_path(self.rounds)
            logger.info(f"BFS round {self.rounds}: {input_path} -> {output_path}")

            self.store.prepare(output_path)
            counters = await self.backend.run_job(job, [input_path], output_path)

            keep_going = counters[BFSCounter.KEEP_GOING.value]
            self.round_frontiers.append(keep_going)
            counters.pop(BFSCounter.KEEP_GOING.value, None)
            self.diagnostics.update(counters)
            logger.info(f"Round {self.rounds}: {keep_going:,} vertices on the frontier")

            # Generation k-2 is no longer needed once generation k is committed
            if not self.config.keep_generations and self.rounds >= 2:
                self.store.delete_generation(self.rounds - 2)

            if keep_going == 0:
                return PipelineState.CONVERGED

        return PipelineState.CAPPED

    async def _filter(self) -> Counter:
        input_path = self.store.generation_path(self.rounds)
        output_path = self.store.filter_path
        logger.info(f"BFS range filter: {input_path} -> {output_path}")

        self.store.prepare(output_path)
        counters = await self.backend.run_job(distance_filter_job(self.config), [input_path], output_path)
        malformed = counters.pop(BFSCounter.MALFORMED_RECORDS.value, 0)
        if malformed:
            self.diagnostics[BFSCounter.MALFORMED_RECORDS.value] += malformed
        return counters

    def _result(self, state: PipelineState, counters: Counter, start_time: float) -> PipelineResult:
        return PipelineResult(
            state=state,
            rounds=self.rounds,
            final_generation=self.rounds if state != PipelineState.NO_SOURCE else None,
            counters=dict(counters),
            diagnostics=dict(self.diagnostics),
            round_frontiers=list(self.round_frontiers),
            filter_path=str(self.store.filter_path) if state != PipelineState.NO_SOURCE else None,
            elapsed_seconds=time.time() - start_time,
        )
