"""
Job description shared by every execution backend.
"""

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, List, Tuple

Pair = Tuple[str, str]


@dataclass
class TaskOutput:
    """Pairs and counters produced by one map or reduce call. Never shared between tasks."""
    pairs: List[Pair] = field(default_factory=list)
    counters: Counter = field(default_factory=Counter)

    def emit(self, key: str, value: str) -> None:
        self.pairs.append((key, value))

    def incr(self, counter: Any, amount: int = 1) -> None:
        # BFSCounter members are stored by value so counters pickle and serialize cleanly
        self.counters[getattr(counter, "value", counter)] += amount

    def extend(self, other: "TaskOutput") -> None:
        self.pairs.extend(other.pairs)
        self.counters.update(other.counters)


InputReader = Callable[[Path], Iterator[Tuple[str, Any]]]
Mapper = Callable[[str, Any], TaskOutput]
Reducer = Callable[[str, List[str]], TaskOutput]


def identity_mapper(key: str, value: Any) -> TaskOutput:
    output = TaskOutput()
    output.emit(key, value)
    return output


def identity_reducer(key: str, values: Iterable[str]) -> TaskOutput:
    output = TaskOutput()
    for value in values:
        output.emit(key, value)
    return output


@dataclass
class JobSpec:
    """One map/shuffle/reduce pass."""
    name: str
    read_input: InputReader
    mapper: Mapper = identity_mapper
    reducer: Reducer = identity_reducer
    num_map_tasks: int = 1
    num_reduce_tasks: int = 1
