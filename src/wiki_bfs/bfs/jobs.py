"""
Map and reduce functions binding the pure BFS logic to the execution backend.

Every function decodes its input, calls the pure core, encodes the output and
reports counters through its own TaskOutput. Malformed records are dropped
and counted; corrupt ones raise RecordCorruptionError out of the task.
"""

from functools import partial
from typing import Iterable, List, Sequence

from wiki_bfs.codec import decode_value, encode_value
from wiki_bfs.config import BFSConfig
from wiki_bfs.execution import JobSpec, TaskOutput, identity_mapper, identity_reducer
from wiki_bfs.storage.part_files import read_pairs
from wiki_bfs.types import BFSCounter, VertexRecord
from wiki_bfs.wikipedia.dump_reader import RawPage, read_dump_pairs
from wiki_bfs.wikipedia.extraction import extract_vertex, is_useful_page

from .distance_filter import filter_distance
from .merge import merge
from .propagate import propagate


def _decode_all(key: str, values: Iterable[str], output: TaskOutput) -> List[VertexRecord]:
    records = []
    for value in values:
        record = decode_value(key, value)
        if record is None:
            output.incr(BFSCounter.MALFORMED_RECORDS)
            continue
        records.append(record)
    return records


def extraction_mapper(title: str, page: RawPage, source_id: str, prefixes: Sequence[str]) -> TaskOutput:
    output = TaskOutput()
    output.incr(BFSCounter.PAGES_READ)
    if not is_useful_page(page, prefixes):
        output.incr(BFSCounter.PAGES_SKIPPED)
        return output

    record = extract_vertex(page, source_id, prefixes)
    if record is None:
        output.incr(BFSCounter.ISOLATED_VERTICES)
        return output

    if record.id == source_id:
        output.incr(BFSCounter.FOUND_SOURCE)
    output.emit(record.id, encode_value(record))
    return output


def bfs_mapper(key: str, value: str) -> TaskOutput:
    output = TaskOutput()
    record = decode_value(key, value)
    if record is None:
        output.incr(BFSCounter.MALFORMED_RECORDS)
        return output

    for emitted in propagate(record):
        output.emit(emitted.id, encode_value(emitted))
    return output


def bfs_reducer(key: str, values: Iterable[str]) -> TaskOutput:
    output = TaskOutput()
    result = merge(_decode_all(key, values, output))
    if result is None:
        return output

    if result.frontier_active:
        output.incr(BFSCounter.KEEP_GOING)
    if result.duplicate_edge_sets:
        output.incr(BFSCounter.DUPLICATE_EDGE_SETS)
    output.emit(key, encode_value(result.record))
    return output


def distance_filter_reducer(key: str, values: Iterable[str]) -> TaskOutput:
    output = TaskOutput()
    result = filter_distance(_decode_all(key, values, output))
    if result is None:
        return output

    output.incr(BFSCounter.NUM_RECORDS)
    output.incr(result.bucket)
    if result.emits_row:
        output.emit(result.id, str(result.distance))
    return output


# --- Job definitions ---

def extraction_job(config: BFSConfig) -> JobSpec:
    return JobSpec(
        name="WikipediaBFS-FirstPass",
        read_input=read_dump_pairs,
        mapper=partial(extraction_mapper, source_id=config.source_id, prefixes=tuple(config.skippable_prefixes)),
        reducer=identity_reducer,
        num_map_tasks=config.num_map_tasks,
        num_reduce_tasks=config.num_reduce_tasks,
    )


def bfs_round_job(config: BFSConfig) -> JobSpec:
    return JobSpec(
        name="WikipediaBFS-BFSIteration",
        read_input=read_pairs,
        mapper=bfs_mapper,
        reducer=bfs_reducer,
        num_map_tasks=config.num_map_tasks,
        num_reduce_tasks=config.num_reduce_tasks,
    )


def distance_filter_job(config: BFSConfig) -> JobSpec:
    return JobSpec(
        name="WikipediaBFS-BFSFilter",
        read_input=read_pairs,
        mapper=identity_mapper,
        reducer=distance_filter_reducer,
        num_map_tasks=config.num_map_tasks,
        num_reduce_tasks=config.num_reduce_tasks,
    )
