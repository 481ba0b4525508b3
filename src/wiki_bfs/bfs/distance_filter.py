"""
Final reporting pass: distance histogram plus the near-distance vertices.
"""

from typing import Iterable, Optional

from wiki_bfs.types import BFSCounter, DISTANCE_BUCKETS, FilterResult, VertexRecord, INFINITE_DISTANCE


def classify_distance(distance: int) -> BFSCounter:
    """Return the bucket counter for a distance (inclusive upper bounds 5/10/20/30/40)."""
    for upper_bound, counter in DISTANCE_BUCKETS:
        if upper_bound is None or distance <= upper_bound:
            return counter
    return BFSCounter.NUM_OVER_40


def filter_distance(records: Iterable[VertexRecord]) -> Optional[FilterResult]:
    """Classify one vertex by the minimum distance among its records. Color is ignored."""
    vertex_id = None
    distance = INFINITE_DISTANCE
    for record in records:
        vertex_id = record.id
        distance = min(distance, record.distance)

    if vertex_id is None:
        return None
    return FilterResult(id=vertex_id, distance=distance, bucket=classify_distance(distance))
