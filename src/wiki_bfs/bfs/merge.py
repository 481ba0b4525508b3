"""
Reduce side of one BFS level.
"""

from typing import FrozenSet, Iterable, Optional, Set

from wiki_bfs.types import Color, INFINITE_DISTANCE, MergeResult, VertexRecord


def merge(records: Iterable[VertexRecord]) -> Optional[MergeResult]:
    """
    Combine every record observed for one vertex id into a single record.

    The merged record keeps the edge set, the minimum distance and the darkest
    color of its inputs. Only one input is expected to carry edges; if more
    than one does, their edge sets are unioned and the result is flagged
    with ``duplicate_edge_sets``, even when the sets are identical. Union,
    min and max make the merged record idempotent, commutative and
    associative, so input order and grouping do not matter.

    Returns None when ``records`` is empty.
    """
    vertex_id = None
    edge_sets: Set[FrozenSet[str]] = set()
    edge_carriers = 0
    distance = INFINITE_DISTANCE
    color = Color.WHITE
    frontier_active = False

    for record in records:
        if vertex_id is None:
            vertex_id = record.id
        elif record.id != vertex_id:
            raise ValueError(f"Cannot merge records of '{vertex_id}' and '{record.id}'")

        if record.neighbors:
            edge_sets.add(record.neighbors)
            edge_carriers += 1
        distance = min(distance, record.distance)
        color = max(color, record.color)
        if record.color == Color.GRAY:
            frontier_active = True

    if vertex_id is None:
        return None

    neighbors = frozenset().union(*edge_sets)
    return MergeResult(
        record=VertexRecord(id=vertex_id, neighbors=neighbors, distance=distance, color=color),
        frontier_active=frontier_active,
        duplicate_edge_sets=edge_carriers > 1,
    )
