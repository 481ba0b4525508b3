# Pure per-record BFS logic. The orchestrator lives in wiki_bfs.bfs.orchestrator.

from .propagate import propagate
from .merge import merge
from .distance_filter import classify_distance, filter_distance

__all__ = [
    "propagate",
    "merge",
    "classify_distance",
    "filter_distance",
]
