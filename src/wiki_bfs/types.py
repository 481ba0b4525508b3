from typing import Dict, FrozenSet, List, Optional
from enum import Enum, IntEnum
from pydantic import BaseModel, ConfigDict, Field

# Java's Integer.MAX_VALUE, kept as the on-disk "not yet reached" marker.
INFINITE_DISTANCE = 2**31 - 1

# --- Enums ---

class Color(IntEnum):
    """Traversal state of a vertex. Values are the wire codes; 2 is unused."""
    WHITE = 0
    GRAY = 1
    BLACK = 3

class BFSCounter(str, Enum):
    """Named counters reported by the jobs."""
    FOUND_SOURCE = "FOUND_SOURCE"
    KEEP_GOING = "KEEP_GOING"
    NUM_5 = "NUM_5"
    NUM_10 = "NUM_10"
    NUM_20 = "NUM_20"
    NUM_30 = "NUM_30"
    NUM_40 = "NUM_40"
    NUM_OVER_40 = "NUM_OVER_40"
    NUM_RECORDS = "NUM_RECORDS"

    # Diagnostics
    MALFORMED_RECORDS = "MALFORMED_RECORDS"
    DUPLICATE_EDGE_SETS = "DUPLICATE_EDGE_SETS"
    PAGES_READ = "PAGES_READ"
    PAGES_SKIPPED = "PAGES_SKIPPED"
    ISOLATED_VERTICES = "ISOLATED_VERTICES"

# Ordered by inclusive upper bound; None means unbounded.
DISTANCE_BUCKETS = (
    (5, BFSCounter.NUM_5),
    (10, BFSCounter.NUM_10),
    (20, BFSCounter.NUM_20),
    (30, BFSCounter.NUM_30),
    (40, BFSCounter.NUM_40),
    (None, BFSCounter.NUM_OVER_40),
)

class PipelineState(Enum):
    """States of the BFS orchestrator."""
    EXTRACTING = "extracting"
    NO_SOURCE = "no_source"
    ITERATING = "iterating"
    CONVERGED = "converged"
    CAPPED = "capped"
    FILTERING = "filtering"
    DONE = "done"

# --- Data Models ---

class VertexRecord(BaseModel):
    """State of one graph vertex within a generation."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Normalized vertex id")
    neighbors: FrozenSet[str] = Field(default_factory=frozenset, description="Outbound edge targets, empty on discovery records")
    distance: int = Field(INFINITE_DISTANCE, ge=0, description="Hops from the source, INFINITE_DISTANCE if unreached")
    color: Color = Field(Color.WHITE, description="Traversal color")

    @property
    def is_reached(self) -> bool:
        return self.distance < INFINITE_DISTANCE

class MergeResult(BaseModel):
    """Output of merging every record observed for one vertex id."""
    model_config = ConfigDict(frozen=True)

    record: VertexRecord
    frontier_active: bool = Field(..., description="True if any input record was GRAY")
    duplicate_edge_sets: bool = Field(False, description="More than one input carried a non-empty edge set")

class FilterResult(BaseModel):
    """Bucket classification of one converged vertex."""
    model_config = ConfigDict(frozen=True)

    id: str
    distance: int
    bucket: BFSCounter

    @property
    def emits_row(self) -> bool:
        return self.bucket == BFSCounter.NUM_5

class PipelineResult(BaseModel):
    """Summary of a complete orchestrator run."""
    state: PipelineState = Field(..., description="CONVERGED, CAPPED or NO_SOURCE")
    rounds: int = Field(0, description="Number of Propagate+Merge rounds executed")
    final_generation: Optional[int] = Field(None, description="Index of the generation that was filtered")
    counters: Dict[str, int] = Field(default_factory=dict, description="Counters of the filter job")
    diagnostics: Dict[str, int] = Field(default_factory=dict, description="Counters summed over extraction and every round")
    round_frontiers: List[int] = Field(default_factory=list, description="KEEP_GOING count of each round")
    filter_path: Optional[str] = Field(None, description="Directory holding the near-distance rows")
    elapsed_seconds: float = Field(0.0)

    @property
    def found_source(self) -> bool:
        return self.state != PipelineState.NO_SOURCE

    @property
    def total_records(self) -> int:
        return self.counters.get(BFSCounter.NUM_RECORDS.value, 0)

    @property
    def bucket_counts(self) -> Dict[str, int]:
        return {counter.value: self.counters.get(counter.value, 0) for _, counter in DISTANCE_BUCKETS}
