"""
Map side of one BFS level.
"""

from typing import List

from wiki_bfs.types import Color, INFINITE_DISTANCE, VertexRecord


def next_distance(distance: int) -> int:
    """Distance of a neighbor one hop further, saturating at INFINITE_DISTANCE."""
    if distance >= INFINITE_DISTANCE - 1:
        return INFINITE_DISTANCE
    return distance + 1


def propagate(record: VertexRecord) -> List[VertexRecord]:
    """
    Expand one vertex.

    A GRAY vertex emits a GRAY discovery record (no edges, distance + 1) for
    each neighbor and then itself as BLACK with its edges intact. WHITE and
    BLACK vertices are passed through unchanged. The input is never modified.
    """
    if record.color != Color.GRAY:
        return [record]

    distance = next_distance(record.distance)
    output = [
        VertexRecord(id=neighbor, distance=distance, color=Color.GRAY)
        for neighbor in sorted(record.neighbors)
        if neighbor
    ]
    output.append(record.model_copy(update={"color": Color.BLACK}))
    return output
